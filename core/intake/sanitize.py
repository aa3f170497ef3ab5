"""
Input Sanitisation - Scalar Cleaning for Untrusted Form Values

Every function here is total: malformed input degrades to a safe default
(empty string or zero) and nothing a client sends can make them raise.
"""

from __future__ import annotations

import math
import re
from typing import Any, Final, Mapping, Union


Number = Union[int, float]


# =============================================================================
# Constants
# =============================================================================

# Applied in this order, after bare "&" has been escaped.
HTML_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
)

# An "&" that already opens one of our entities is left alone (idempotence).
_BARE_AMPERSAND: Final = re.compile(r"&(?!(?:amp|lt|gt|quot|#x27|#x2F);)")

_HTML_TAG: Final = re.compile(r"<[^>]*>")
_ANGLE_ADDRESS: Final = re.compile(r"<([^<>]*@[^<>]*)>")
_EMAIL_DISALLOWED: Final = re.compile(r"[^a-zA-Z0-9@._\-+]")
_PHONE_DISALLOWED: Final = re.compile(r"[^0-9+\-() ]")
_REPEATED_SPACES: Final = re.compile(r" {2,}")


# =============================================================================
# Scalar Sanitisers
# =============================================================================


def sanitize_text(value: Any) -> str:
    """
    HTML-escape a string and trim surrounding whitespace.

    Non-string input yields an empty string. The output contains no literal
    ``< > " ' /`` and every ``&`` starts one of the escape entities.
    """
    if not isinstance(value, str):
        return ""

    escaped = _BARE_AMPERSAND.sub("&amp;", value)
    for char, entity in HTML_ESCAPES:
        escaped = escaped.replace(char, entity)
    return escaped.strip()


def sanitize_number(value: Any) -> Number:
    """
    Coerce a value to a finite number, returning 0 when that is not possible.

    Integral results come back as ``int`` so "42" becomes 42, not 42.0.
    Digit separators such as "1_000" are not numbers here.
    """
    if value is None:
        return 0
    if isinstance(value, str):
        value = value.strip()
        if not value or "_" in value:
            return 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0

    if math.isnan(number) or math.isinf(number):
        return 0
    if number.is_integer():
        return int(number)
    return number


def sanitize_email(value: Any) -> str:
    """
    Narrow an email address to a safe character set.

    A display-name form such as ``Sara <sara@example.com>`` keeps only the
    bracketed address. Remaining markup is removed, anything outside
    ``[A-Za-z0-9@._+-]`` is dropped, and the result is trimmed and
    lowercased. Does not check that the result is a deliverable address.
    """
    if not isinstance(value, str):
        return ""
    bracketed = _ANGLE_ADDRESS.search(value)
    if bracketed:
        value = bracketed.group(1)
    stripped = _HTML_TAG.sub("", value)
    return _EMAIL_DISALLOWED.sub("", stripped).strip().lower()


def sanitize_phone(value: Any) -> str:
    """Keep digits, ``+``, ``-``, spaces and parentheses only."""
    if not isinstance(value, str):
        return ""
    cleaned = _PHONE_DISALLOWED.sub("", value)
    return _REPEATED_SPACES.sub(" ", cleaned).strip()


# =============================================================================
# Composite Sanitiser
# =============================================================================


def sanitize_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow-copy a mapping, escaping every string value."""
    sanitized = dict(record)
    for key, value in sanitized.items():
        if isinstance(value, str):
            sanitized[key] = sanitize_text(value)
    return sanitized
