"""
Value Coercion

Lenient converters for untrusted, user-curated product data.
Every helper returns None or a caller-supplied default instead of raising.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "n", "0", ""})

# RFC 3339 fractional seconds may carry nanoseconds; datetime keeps microseconds
_FRACTION_RE = re.compile(r'(\.\d{6})\d+')


def to_number(value: Any) -> Optional[float]:
    """
    Convert a raw value to a finite float.

    Returns None for missing, boolean, non-numeric or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def positive_or(value: Any, default: float) -> float:
    """Return value as a float if it is > 0, otherwise default."""
    number = to_number(value)
    if number is None or number <= 0:
        return default
    return number


def non_negative_int(value: Any, default: int = 0) -> int:
    """Return value truncated to an int if it is >= 0, otherwise default."""
    number = to_number(value)
    if number is None or number < 0:
        return default
    return int(number)


def to_bool(value: Any, default: bool) -> bool:
    """
    Interpret a raw flag.

    Accepts real booleans, numbers and the usual yes/no spellings.
    Anything else (including None) yields default.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return default


def to_text(value: Any, default: str = "") -> str:
    """Return a stripped string, or default for missing/blank values."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return default
    text = str(value).strip()
    return text or default


def to_string_list(value: Any) -> List[str]:
    """
    Normalize a list-or-scalar field into a list of non-blank strings.

    A single string becomes a one-element list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, (list, tuple)):
        items = []
        for item in value:
            text = to_text(item)
            if text:
                items.append(text)
        return items
    return []


def unique_in_order(values: Iterable[str]) -> List[str]:
    """Drop repeated values, keeping the first occurrence of each."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware datetime (UTC when no offset).

    Returns None for missing or unparseable values.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        text = _FRACTION_RE.sub(r'\1', text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
