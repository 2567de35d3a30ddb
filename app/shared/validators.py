"""Shared validation utilities"""

import re
from typing import Optional

DEFAULT_COUNTRY_CODE = "+992"

# Strict digit counts (after the country code) for known countries
STRICT_PHONE_PATTERNS = {
    "+992": r"^\+992[0-9]{9}$",  # Tajikistan
    "+998": r"^\+998[0-9]{9}$",  # Uzbekistan
    "+996": r"^\+996[0-9]{9}$",  # Kyrgyzstan
    "+7": r"^\+7[0-9]{10}$",  # Russia / Kazakhstan
    "+1": r"^\+1[0-9]{10}$",  # USA / Canada
    "+44": r"^\+44[0-9]{10}$",
    "+49": r"^\+49[0-9]{10,11}$",
    "+33": r"^\+33[0-9]{9}$",
    "+86": r"^\+86[0-9]{11}$",
    "+81": r"^\+81[0-9]{10}$",
    "+91": r"^\+91[0-9]{10}$",
    "+971": r"^\+971[0-9]{9}$",
    "+380": r"^\+380[0-9]{9}$",
    "+375": r"^\+375[0-9]{9}$",
}

# E.164: "+" and 7 to 15 digits
GENERIC_PHONE_PATTERN = r"^\+[1-9][0-9]{6,14}$"


def _detect_country_code(phone: str) -> Optional[str]:
    # Longest codes first so "+992" wins over "+9..." prefixes
    for code in sorted(STRICT_PHONE_PATTERNS, key=len, reverse=True):
        if phone.startswith(code):
            return code
    return None


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number to E.164.

    A bare 9-digit local number is treated as Tajik and prefixed with +992.

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    cleaned = re.sub(r"[^\d+]", "", phone)

    if not cleaned.startswith("+"):
        if not re.match(r"^[0-9]{9}$", cleaned):
            raise ValueError("Local phone number must contain 9 digits")
        return f"{DEFAULT_COUNTRY_CODE}{cleaned}"

    code = _detect_country_code(cleaned)
    if code:
        if not re.match(STRICT_PHONE_PATTERNS[code], cleaned):
            raise ValueError(f"Invalid phone number for country code {code}")
    elif not re.match(GENERIC_PHONE_PATTERN, cleaned):
        raise ValueError("Invalid international phone number")

    return cleaned


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email
