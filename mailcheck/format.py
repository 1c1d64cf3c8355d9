"""
Format Module

Structural and character checks for email addresses. No network access.
"""

import string
from typing import Tuple

from .errors import EmailValidationError, ErrorKind

ALLOWED_CHARACTERS = frozenset(string.ascii_letters + string.digits + '.-_@+')


def split_address(address: str) -> Tuple[str, str]:
    """
    Split an address into local part and domain on the last '@'.

    The last '@' is used so quoted local parts containing '@' keep their
    domain intact.

    Raises:
        EmailValidationError: InvalidFormat for non-string input,
            MissingAtSymbol if there is no '@'
    """
    if not isinstance(address, str):
        raise EmailValidationError(
            ErrorKind.INVALID_FORMAT,
            f"Email must be a string, got {type(address).__name__}"
        )
    local, sep, domain = address.rpartition('@')
    if not sep:
        raise EmailValidationError(ErrorKind.MISSING_AT_SYMBOL, "Email is missing '@' symbol")
    return local, domain


def check_format(address: str) -> None:
    """
    Check the structure and character set of an email address.

    Checks run in a fixed order and the first failure is raised.

    Args:
        address: The email address to check

    Raises:
        EmailValidationError: describing the first failed check
    """
    if not isinstance(address, str):
        raise EmailValidationError(
            ErrorKind.INVALID_FORMAT,
            f"Email must be a string, got {type(address).__name__}"
        )

    if not address:
        raise EmailValidationError(ErrorKind.INVALID_FORMAT, "Email address is empty")

    local, domain = split_address(address)

    if not local:
        raise EmailValidationError(ErrorKind.INVALID_FORMAT, "Local part (before @) is empty")

    if not domain:
        raise EmailValidationError(ErrorKind.MISSING_DOMAIN, "Domain part (after @) is empty")

    dot_index = domain.find('.')
    if dot_index == -1:
        raise EmailValidationError(
            ErrorKind.MISSING_TOP_LEVEL_DOMAIN,
            "Domain is missing TLD (top-level domain)"
        )
    if dot_index == 0 or dot_index == len(domain) - 1:
        raise EmailValidationError(
            ErrorKind.MISSING_TOP_LEVEL_DOMAIN,
            "Domain starts or ends with a dot"
        )

    for position, char in enumerate(address):
        if char not in ALLOWED_CHARACTERS:
            raise EmailValidationError(
                ErrorKind.INVALID_CHARACTERS,
                f"Invalid character {char!r} at position {position}"
            )
