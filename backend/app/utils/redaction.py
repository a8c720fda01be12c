"""Masking of sensitive values before they are logged or exported."""

from __future__ import annotations

from typing import Any, Mapping

REDACTED = "[REDACTED]"

SENSITIVE_KEYWORDS = (
    "secret",
    "password",
    "passwd",
    "token",
    "authorization",
    "api_key",
    "apikey",
    "database_url",
    "credential",
)


def is_sensitive_key(key: Any) -> bool:
    """Return True when a field or setting name looks like it holds a secret."""

    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return any(keyword in lowered for keyword in SENSITIVE_KEYWORDS)


def redact(value: Any) -> Any:
    """Recursively replace values stored under sensitive keys."""

    if isinstance(value, Mapping):
        return {
            k: (REDACTED if is_sensitive_key(k) and v not in (None, "") else redact(v))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value
