"""
Errors Module

Error kinds and exception types shared by every validation rule.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Kinds of validation failure reported to the caller."""

    # Format errors
    INVALID_FORMAT = 'InvalidFormat'
    MISSING_AT_SYMBOL = 'MissingAtSymbol'
    MISSING_DOMAIN = 'MissingDomain'
    MISSING_TOP_LEVEL_DOMAIN = 'MissingTopLevelDomain'
    INVALID_CHARACTERS = 'InvalidCharacters'
    TOO_LONG = 'TooLong'

    # DNS/MX errors
    NO_MX_RECORDS = 'NoMxRecords'
    DOMAIN_NOT_FOUND = 'DomainNotFound'
    DNS_LOOKUP_FAILED = 'DnsLookupFailed'


class EmailValidationError(Exception):
    """
    Raised by a validation rule when an address fails its check.

    Attributes:
        kind: The ErrorKind describing the failure
        message: Optional human-readable detail
        rule: Name of the pipeline rule that raised it, set by EmailValidator
    """

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.value
        self.rule = None
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value!r}, {self.message!r})"


class DnsError(EmailValidationError):
    """DNS transport or decoding failure."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(ErrorKind.DNS_LOOKUP_FAILED, message)
