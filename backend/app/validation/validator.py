"""Schema-driven evaluation of request bodies and query parameters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional

from ..core.exceptions import InternalValidationError, SchemaError
from .rules import is_array_at_least, is_email, is_non_empty_string, is_number_in_range
from .schema import (
    ArrayRule,
    EmailRule,
    NumberRule,
    Schema,
    StringRule,
    ValidationIssue,
    ValidationOutcome,
)

QUERY_RULE_TYPES = (StringRule, NumberRule)


def _ensure_mapping(payload: Any, what: str) -> Mapping:
    if not isinstance(payload, Mapping):
        raise InternalValidationError(
            f"Expected {what} to be a mapping, got {type(payload).__name__}"
        )
    return payload


def _number_message(name: str, rule: NumberRule) -> str:
    message = f"{name} must be a valid number"
    if rule.min is not None and rule.max is not None:
        message += f" between {rule.min} and {rule.max}"
    elif rule.min is not None:
        message += f" greater than or equal to {rule.min}"
    elif rule.max is not None:
        message += f" less than or equal to {rule.max}"
    return message


def _check_body_field(name: str, rule: Any, value: Any) -> Optional[str]:
    if isinstance(rule, EmailRule):
        if not is_email(value):
            return f"{name} must be a valid email address"
    elif isinstance(rule, StringRule):
        if not is_non_empty_string(value, rule.min_length):
            return f"{name} must be a string with at least {rule.min_length} characters"
    elif isinstance(rule, NumberRule):
        if not is_number_in_range(value, rule.min, rule.max):
            return _number_message(name, rule)
    elif isinstance(rule, ArrayRule):
        if not is_array_at_least(value, rule.min_length):
            return f"{name} must be an array with at least {rule.min_length} items"
    else:
        raise SchemaError(f"Unsupported rule for field '{name}': {rule!r}")
    return None


def evaluate_body(schema: Schema, payload: Any) -> ValidationOutcome:
    """Check a request body against ``schema``.

    A field is absent when it is missing or ``None``. Required absent fields
    report ``"<field> is required"``; optional absent fields are skipped.
    Each field contributes at most one issue, in schema order.

    Raises:
        InternalValidationError: ``payload`` is not a mapping.
    """
    body = _ensure_mapping(payload, "request body")
    issues: List[ValidationIssue] = []

    for name, rule in schema.items():
        value = body.get(name)

        if value is None:
            if rule.required:
                issues.append(ValidationIssue(name, f"{name} is required", value))
            continue

        message = _check_body_field(name, rule, value)
        if message:
            issues.append(ValidationIssue(name, message, value))

    return ValidationOutcome(tuple(issues))


def check_query_schema(schema: Schema) -> Schema:
    """Reject rule types that query evaluation does not enforce.

    Raises:
        SchemaError: the schema declares an email or array rule.
    """
    unsupported = [
        f"{name} ({getattr(rule, 'type', type(rule).__name__)})"
        for name, rule in schema.items()
        if not isinstance(rule, QUERY_RULE_TYPES)
    ]
    if unsupported:
        raise SchemaError(
            "Query parameters only support string and number rules: "
            + ", ".join(unsupported)
        )
    return schema


def evaluate_query(schema: Schema, params: Any) -> ValidationOutcome:
    """Check query parameters against ``schema``.

    A parameter is absent when its value is falsy, so an empty string counts
    as missing while ``"0"`` is present and gets type-checked.

    Raises:
        InternalValidationError: ``params`` is not a mapping.
        SchemaError: a rule other than string or number is declared.
    """
    check_query_schema(schema)
    query = _ensure_mapping(params, "query parameters")
    issues: List[ValidationIssue] = []

    for name, rule in schema.items():
        value = query.get(name)

        if not value:
            if rule.required:
                issues.append(
                    ValidationIssue(name, f"Query parameter '{name}' is required", value)
                )
            continue

        if isinstance(rule, NumberRule):
            if not is_number_in_range(value, rule.min, rule.max):
                issues.append(
                    ValidationIssue(name, f"Query parameter '{name}' must be a valid number", value)
                )
        elif isinstance(rule, StringRule):
            if not is_non_empty_string(value, rule.min_length):
                issues.append(
                    ValidationIssue(name, f"Query parameter '{name}' must be a non-empty string", value)
                )

    return ValidationOutcome(tuple(issues))
