"""Pure validation predicates.

Every predicate is total: any input, including ``None`` or values of the
wrong type, yields ``False`` instead of raising.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional, Union

Number = Union[int, float]

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def is_email(value: Any) -> bool:
    """Loose ``local@domain.tld`` check, not RFC 5322."""
    return isinstance(value, str) and _EMAIL_RE.fullmatch(value.strip()) is not None


def is_non_empty_string(value: Any, min_length: int = 1) -> bool:
    return isinstance(value, str) and len(value.strip()) >= min_length


def to_number(value: Any) -> Optional[float]:
    """Coerce ints, floats and plain decimal strings to a finite float.

    Strings must look like ``12``, ``-3.5``, ``.5`` or ``1e3``; Python-only
    spellings (``inf``, ``nan``, ``1_000``) are rejected. Anything that is
    not finite once converted is None.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not _NUMBER_RE.fullmatch(text):
            return None
        number = float(text)
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_number_in_range(
    value: Any, min: Optional[Number] = None, max: Optional[Number] = None
) -> bool:
    """Numeric check with inclusive bounds."""

    number = to_number(value)
    if number is None:
        return False
    if min is not None and number < min:
        return False
    if max is not None and number > max:
        return False
    return True


def is_array_at_least(value: Any, min_length: int = 1) -> bool:
    return isinstance(value, (list, tuple)) and len(value) >= min_length
