"""Small text helpers shared by routers and diagnostics."""

from __future__ import annotations

import re
from typing import Any

_WHITESPACE_RE = re.compile(r"\s+")


def capitalize_words(text: Any) -> str:
    """Capitalize the first letter of each space separated word."""

    if not text or not isinstance(text, str):
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in text.lower().split(" "))


def clean_text(text: Any) -> str:
    """Collapse runs of whitespace (line breaks included) and trim."""

    if not text or not isinstance(text, str):
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_text(text: Any, max_length: int, suffix: str = "...") -> str:
    """Shorten text to max_length characters, ending with suffix when cut."""

    if not text or not isinstance(text, str):
        return ""
    if len(text) <= max_length:
        return text
    return text[: max(max_length - len(suffix), 0)] + suffix


def count_words(text: Any) -> int:
    if not text or not isinstance(text, str):
        return 0
    return len(text.split())
