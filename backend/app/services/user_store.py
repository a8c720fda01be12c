"""In-memory user records backing the users endpoints."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..models.user import User

LOGGER = logging.getLogger(__name__)

SAMPLE_USERS = (
    {"id": 1, "name": "John Doe", "email": "john@example.com", "role": "admin"},
    {"id": 2, "name": "Jane Smith", "email": "jane@example.com", "role": "member"},
)


class UserStore:
    """Ordered, process-local user collection. Nothing is persisted."""

    def __init__(self, users: Iterable[User] = ()):
        self._users: Dict[int, User] = {user.id: user for user in users}
        self._next_id = max(self._users, default=0) + 1

    @classmethod
    def with_sample_users(cls) -> "UserStore":
        return cls(User(**record) for record in SAMPLE_USERS)

    def __len__(self) -> int:
        return len(self._users)

    def list(self) -> List[User]:
        return list(self._users.values())

    def get(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def paginate(self, page: int = 1, limit: int = 10) -> Tuple[List[User], int]:
        """Return one page of users and the total count"""
        users = self.list()
        start = (page - 1) * limit
        return users[start:start + limit], len(users)

    def search(self, term: str, role: Optional[str] = None) -> List[User]:
        """Case-insensitive substring match over name and email"""
        needle = term.lower()
        matches = [
            user for user in self._users.values()
            if needle in user.name.lower() or needle in user.email.lower()
        ]
        if role:
            matches = [user for user in matches if user.role.lower() == role.lower()]
        return matches

    def create(
        self,
        name: str,
        email: str,
        age: Optional[Union[int, float]] = None,
        role: str = "member",
    ) -> User:
        user = User(id=self._next_id, name=name, email=email, age=age, role=role)
        self._users[user.id] = user
        self._next_id += 1
        LOGGER.info("Created user %s", user.id)
        return user
