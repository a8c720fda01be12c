"""Schema-driven request validation."""

from .dependencies import validate_body, validate_query
from .rules import is_array_at_least, is_email, is_non_empty_string, is_number_in_range
from .schema import (
    ArrayRule,
    CommonSchemas,
    EmailRule,
    FieldRule,
    NumberRule,
    Schema,
    StringRule,
    ValidationIssue,
    ValidationOutcome,
    parse_schema,
)
from .validator import check_query_schema, evaluate_body, evaluate_query

__all__ = [
    "ArrayRule",
    "CommonSchemas",
    "EmailRule",
    "FieldRule",
    "NumberRule",
    "Schema",
    "StringRule",
    "ValidationIssue",
    "ValidationOutcome",
    "check_query_schema",
    "evaluate_body",
    "evaluate_query",
    "is_array_at_least",
    "is_email",
    "is_non_empty_string",
    "is_number_in_range",
    "parse_schema",
    "validate_body",
    "validate_query",
]
