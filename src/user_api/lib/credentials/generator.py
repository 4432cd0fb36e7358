"""Fallback password derivation for non-admin accounts created without a password.

The password is rebuilt from data the account holder already knows: the
first four letters of their name and the last four digits of their phone.
"""

import re

NAME_PART_LENGTH = 4
PHONE_PART_LENGTH = 4

_NON_DIGITS = re.compile(r"\D")


def derive_default_password(full_name: str | None, mobile_no: str | None) -> str:
    """Derive the default 8-character password for a user.

    The name part is the first four characters of ``full_name`` lower-cased,
    right-padded with its first character (``"a"`` for an empty name). The
    phone part is the last four digits of ``mobile_no``, left-padded with
    zeros.

    Args:
        full_name: The user's full name.
        mobile_no: The user's mobile number in any formatting.

    Returns:
        Name part followed by phone part.

    Examples:
        >>> derive_default_password("Al", "12")
        'alaa0012'
        >>> derive_default_password("Priya Sharma", "+91 98765-43210")
        'priy3210'
    """
    name_part = (full_name or "").lower()[:NAME_PART_LENGTH]
    if len(name_part) < NAME_PART_LENGTH:
        name_part = name_part.ljust(NAME_PART_LENGTH, name_part[:1] or "a")

    digits = _NON_DIGITS.sub("", mobile_no or "")
    phone_part = digits[-PHONE_PART_LENGTH:].rjust(PHONE_PART_LENGTH, "0")

    return name_part + phone_part
