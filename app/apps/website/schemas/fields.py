"""
Field rules shared by the website form schemas.

Each rule receives the raw submitted value and returns the normalized value
or raises a ``PydanticCustomError`` carrying the user-facing message, so
pydantic reports it verbatim in ``ValidationError.errors()``.
"""

import re
from typing import Any

import phonenumbers
from email_validator import EmailNotValidError, validate_email
from phonenumbers import NumberParseException, PhoneNumberFormat
from pydantic_core import PydanticCustomError

from app.core.config import settings

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")

# Separators accepted between digit groups of a phone number
PHONE_SEPARATORS = re.compile(r"[\s().\-]")
# Optional international prefix, then digits only
PHONE_PATTERN = re.compile(r"^\+?[0-9]+$")

NAME_LENGTH_MESSAGE = "Name must be between 2 and 100 characters"
NAME_PATTERN_MESSAGE = "Name can only contain letters and spaces"
EMAIL_MESSAGE = "Please enter a valid email address"
MOBILE_MESSAGE = "Please enter a valid mobile number"


def require_text(value: Any, message: str) -> str:
    """Return the trimmed string or reject anything that is not a string."""
    if not isinstance(value, str):
        raise PydanticCustomError("invalid_field", message)
    return value.strip()


def check_length(value: str, min_length: int, max_length: int, message: str) -> str:
    if not min_length <= len(value) <= max_length:
        raise PydanticCustomError("invalid_length", message)
    return value


def validate_name(value: Any) -> str:
    name = check_length(
        require_text(value, NAME_LENGTH_MESSAGE), 2, 100, NAME_LENGTH_MESSAGE
    )
    if not NAME_PATTERN.match(name):
        raise PydanticCustomError("invalid_name", NAME_PATTERN_MESSAGE)
    return name


def validate_email_address(value: Any) -> str:
    """Trim, syntax-check and lower-case a bare email address."""
    email = require_text(value, EMAIL_MESSAGE)
    try:
        validated = validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("invalid_email", EMAIL_MESSAGE) from None
    return validated.normalized.lower()


def parse_phone_number(digits: str) -> phonenumbers.PhoneNumber | None:
    """
    Find a region in which ``digits`` is a valid phone number.

    Numbers with a ``+`` prefix carry their own country code. Otherwise the
    default region is tried first, then every region phonenumbers knows.
    """
    if digits.startswith("+"):
        regions: list[str | None] = [None]
    else:
        regions = [settings.DEFAULT_PHONE_REGION]
        regions += sorted(phonenumbers.SUPPORTED_REGIONS - {settings.DEFAULT_PHONE_REGION})

    for region in regions:
        try:
            number = phonenumbers.parse(digits, region)
        except NumberParseException:
            continue
        if phonenumbers.is_valid_number(number):
            return number
    return None


def validate_mobile(value: Any) -> str:
    """
    Accept a phone number written in any recognised regional format and
    return it in E.164 form.

    Spaces, dots, dashes and parentheses may separate digit groups and a
    leading ``+`` marks an international number.
    """
    mobile = require_text(value, MOBILE_MESSAGE)
    digits = PHONE_SEPARATORS.sub("", mobile)
    if not PHONE_PATTERN.match(digits):
        raise PydanticCustomError("invalid_mobile", MOBILE_MESSAGE)

    number = parse_phone_number(digits)
    if number is None:
        raise PydanticCustomError("invalid_mobile", MOBILE_MESSAGE)
    return phonenumbers.format_number(number, PhoneNumberFormat.E164)


__all__ = [
    "EMAIL_MESSAGE",
    "MOBILE_MESSAGE",
    "NAME_LENGTH_MESSAGE",
    "NAME_PATTERN_MESSAGE",
    "check_length",
    "parse_phone_number",
    "require_text",
    "validate_email_address",
    "validate_mobile",
    "validate_name",
]
