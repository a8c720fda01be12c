"""Users API endpoints"""

import logging
import math
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ..core.app_state import get_user_store
from ..core.exceptions import ApiError, ValidationError
from ..models.envelope import Pagination, SuccessResponse
from ..services.user_store import UserStore
from ..utils.text import clean_text
from ..validation import CommonSchemas, validate_body, validate_query
from ..validation.rules import to_number


logger = logging.getLogger(__name__)
router = APIRouter()

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _as_int(value: Any, default: int) -> int:
    number = to_number(value)
    return int(number) if number is not None else default


@router.get("", response_model=SuccessResponse, response_model_exclude_none=True)
async def list_users(
    params: Dict[str, Any] = Depends(validate_query(CommonSchemas.PAGINATION)),
    store: UserStore = Depends(get_user_store),
):
    """List users one page at a time"""
    page = _as_int(params.get("page"), DEFAULT_PAGE)
    limit = _as_int(params.get("limit"), DEFAULT_LIMIT)

    users, total = store.paginate(page, limit)
    return SuccessResponse(
        data=users,
        message="Users retrieved successfully",
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.get("/search", response_model=SuccessResponse, response_model_exclude_none=True)
async def search_users(
    params: Dict[str, Any] = Depends(validate_query(CommonSchemas.SEARCH)),
    store: UserStore = Depends(get_user_store),
):
    """Substring search over user names and emails"""
    term = clean_text(params["q"])
    matches = store.search(term, role=params.get("category"))
    logger.debug(f"Search '{term}' matched {len(matches)} users")
    return SuccessResponse(data=matches, message=f"Found {len(matches)} users")


@router.get("/{user_id}", response_model=SuccessResponse, response_model_exclude_none=True)
async def get_user(user_id: str, store: UserStore = Depends(get_user_store)):
    """Fetch a single user by numeric id"""
    if not (user_id.isascii() and user_id.isdigit()):
        raise ValidationError("User ID must be a number", field="id", value=user_id)

    user = store.get(int(user_id))
    if user is None:
        raise ApiError("User not found", status_code=status.HTTP_404_NOT_FOUND, code="USER_NOT_FOUND")
    return SuccessResponse(data=user)


@router.post(
    "",
    response_model=SuccessResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    payload: Dict[str, Any] = Depends(validate_body(CommonSchemas.USER)),
    store: UserStore = Depends(get_user_store),
):
    """Create a user from a validated body"""
    age = to_number(payload.get("age"))
    if age is not None and age.is_integer():
        age = int(age)

    user = store.create(
        name=payload["name"].strip(),
        email=payload["email"].strip(),
        age=age,
    )
    return SuccessResponse(data=user, message="User created successfully")
