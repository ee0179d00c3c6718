"""Contact field validation and US phone formatting.

Rules
-----
- US numbers only: 11 digits starting with the country code 1
- Area code and exchange code may not start with 0 or 1 (NANP)
- Display format while typing: ``+1 (555) 123-4567``
- Submission format: ``+15551234567``
- Emails are checked with pydantic ``EmailStr`` (email-validator)
"""

from __future__ import annotations

import re

from pydantic import EmailStr, TypeAdapter, ValidationError

_EMAIL_ADAPTER = TypeAdapter(EmailStr)
_NON_DIGITS = re.compile(r"\D")


def validate_email(email: str) -> bool:
    if not email:
        return False
    try:
        _EMAIL_ADAPTER.validate_python(email)
    except ValidationError:
        return False
    return True


def normalize_email(email: str) -> str:
    """Bare address in email-validator's normalized form.  Raises ValueError."""
    return _EMAIL_ADAPTER.validate_python(email.strip())


def _digits(value: str) -> str:
    return _NON_DIGITS.sub("", value or "")


def _with_country_code(digits: str) -> str:
    # A bare 10-digit number gets the US country code.
    if len(digits) == 10 and not digits.startswith("1"):
        return "1" + digits
    return digits


def validate_phone_number(phone: str) -> bool:
    """Accept raw or formatted US numbers with a valid area/exchange code."""
    digits = _with_country_code(_digits(phone))
    if len(digits) != 11 or not digits.startswith("1"):
        return False
    area_code = digits[1:4]
    exchange_code = digits[4:7]
    return area_code[0] not in "01" and exchange_code[0] not in "01"


def format_phone_number(value: str) -> str:
    """Progressively format a (possibly partial) number for display."""
    digits = _with_country_code(_digits(value))[:11]
    if not digits:
        return ""
    if len(digits) >= 11:
        return f"+{digits[0]} ({digits[1:4]}) {digits[4:7]}-{digits[7:11]}"
    if len(digits) >= 7:
        rest = digits[7:]
        return f"+{digits[0]} ({digits[1:4]}) {digits[4:7]}{'-' + rest if rest else ''}"
    if len(digits) >= 4:
        return f"+{digits[0]} ({digits[1:]}"
    return f"+{digits}"


def normalize_phone_number(phone: str) -> str:
    """Return the ``+1XXXXXXXXXX`` form.  Raises ValueError for invalid numbers."""
    if not validate_phone_number(phone):
        raise ValueError("Please enter a valid US phone number")
    return "+" + _with_country_code(_digits(phone))
