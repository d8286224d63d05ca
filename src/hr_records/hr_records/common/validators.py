from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_PAN_RE = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
_COUNTRY_PREFIX = "+91"


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def normalize_phone(value: str) -> str:
    """Strip whitespace and the +91 country prefix the login forms prepend."""
    phone = require_non_empty(value, "Phone number").replace(" ", "")
    if phone.startswith(_COUNTRY_PREFIX):
        phone = phone[len(_COUNTRY_PREFIX):]
    return phone


def normalize_tax_id(value: str) -> str:
    """Upper-case and validate a PAN (e.g. ABCDE1234F)."""
    pan = require_non_empty(value, "PAN number").upper()
    if not _PAN_RE.match(pan):
        raise ValidationError("Please enter a valid PAN number (e.g., ABCDE1234F)")
    return pan


def require_month(value) -> int:
    try:
        month = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Month must be a number between 1 and 12")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be a number between 1 and 12")
    return month


def require_year(value) -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Year is not valid")
    if year < 1900:
        raise ValidationError("Year is not valid")
    return year
