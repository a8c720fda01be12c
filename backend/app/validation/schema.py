"""Typed validation schema models.

A schema maps field names to one rule variant per type. Rule literals can be
declared directly (``StringRule(required=True, min_length=2)``) or parsed
from plain dictionaries with :func:`parse_schema`, which rejects unknown
types and malformed bounds at declaration time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from ..core.exceptions import SchemaError

Number = Union[int, float]


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    required: bool = False


class StringRule(_Rule):
    """Non-blank string with a minimum trimmed length"""

    type: Literal["string"] = "string"
    min_length: int = Field(1, ge=0, alias="minLength")


class EmailRule(_Rule):
    """Loosely formatted email address"""

    type: Literal["email"] = "email"


class NumberRule(_Rule):
    """Number (or numeric string) within optional inclusive bounds"""

    type: Literal["number"] = "number"
    min: Optional[Number] = None
    max: Optional[Number] = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "NumberRule":
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) is greater than max ({self.max})")
        return self


class ArrayRule(_Rule):
    """List with a minimum number of items"""

    type: Literal["array"] = "array"
    min_length: int = Field(1, ge=0, alias="minLength")


FieldRule = Annotated[
    Union[StringRule, EmailRule, NumberRule, ArrayRule],
    Field(discriminator="type"),
]

Schema = Dict[str, FieldRule]

_schema_adapter: TypeAdapter[Dict[str, FieldRule]] = TypeAdapter(Dict[str, FieldRule])


def parse_schema(raw: Mapping[str, Any]) -> Schema:
    """Build a typed schema from a mapping of rule objects or plain dicts.

    Raises:
        SchemaError: a rule has an unknown type, unknown keys or bad bounds.
    """
    try:
        return _schema_adapter.validate_python(dict(raw))
    except ValidationError as exc:
        raise SchemaError(f"Invalid validation schema: {exc}") from exc


@dataclass(frozen=True)
class ValidationIssue:
    """One failing field"""

    field: str
    message: str
    value: Any = None

    def to_dict(self, key: str = "field") -> Dict[str, Any]:
        return {key: self.field, "message": self.message, "value": self.value}


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of one validation pass; valid when there are no issues"""

    issues: Tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.issues


class CommonSchemas:
    """Schemas reused across endpoints"""

    USER: Schema = {
        "name": StringRule(required=True, min_length=2),
        "email": EmailRule(required=True),
        "age": NumberRule(required=False, min=13, max=120),
    }

    PAGINATION: Schema = {
        "page": NumberRule(required=False, min=1),
        "limit": NumberRule(required=False, min=1, max=100),
    }

    SEARCH: Schema = {
        "q": StringRule(required=True, min_length=1),
        "category": StringRule(required=False),
    }
