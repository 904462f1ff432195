"""
Text Utilities

Helper functions for text processing and cleanup.
"""

import re


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and strip the ends."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def name_initials(name: str) -> str:
    """
    Upper-cased first letter of every word in a name.

    Example:
        >>> name_initials("Magenta Silk Saree")
        'MSS'
    """
    return ''.join(word[0] for word in name.split()).upper()


def matches_search(term: str, *fields) -> bool:
    """
    Case-insensitive substring match of term against any of the fields.

    Non-string fields are ignored.
    """
    needle = term.lower()
    return any(
        isinstance(field, str) and needle in field.lower()
        for field in fields
    )
