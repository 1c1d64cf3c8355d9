"""
Rules Module

Validation rules that can be combined into an EmailValidator pipeline.
"""

import logging
from abc import ABC, abstractmethod

from .errors import EmailValidationError, ErrorKind
from .format import check_format, split_address
from .resolver import ResolverBase

logger = logging.getLogger(__name__)


class ValidationRule(ABC):
    """A single check applied to an email address."""

    name = 'rule'

    @abstractmethod
    def check(self, address: str) -> None:
        """
        Check an address.

        Args:
            address: The email address to check

        Raises:
            EmailValidationError: if the address fails this rule
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FormatRule(ValidationRule):
    """Structural and character checks, no I/O."""

    name = 'format'

    def check(self, address: str) -> None:
        check_format(address)


class LengthRule(ValidationRule):
    """Length limits according to RFC 5321."""

    name = 'length'

    MAX_EMAIL_LENGTH = 254
    MAX_LOCAL_LENGTH = 64
    MAX_DOMAIN_LENGTH = 253

    def check(self, address: str) -> None:
        if not isinstance(address, str):
            raise EmailValidationError(ErrorKind.INVALID_FORMAT, "Email must be a string")
        if len(address) > self.MAX_EMAIL_LENGTH:
            raise EmailValidationError(
                ErrorKind.TOO_LONG,
                f"Email exceeds maximum length of {self.MAX_EMAIL_LENGTH} characters"
            )
        local, domain = split_address(address)
        if len(local) > self.MAX_LOCAL_LENGTH:
            raise EmailValidationError(
                ErrorKind.TOO_LONG,
                f"Local part exceeds maximum length of {self.MAX_LOCAL_LENGTH} characters"
            )
        if len(domain) > self.MAX_DOMAIN_LENGTH:
            raise EmailValidationError(
                ErrorKind.TOO_LONG,
                f"Domain exceeds maximum length of {self.MAX_DOMAIN_LENGTH} characters"
            )


class _DnsRule(ValidationRule):

    def __init__(self, resolver: ResolverBase):
        self.resolver = resolver

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.resolver!r})"


class MxRule(_DnsRule):
    """Require at least one MX answer for the address's domain."""

    name = 'mx'

    def check(self, address: str) -> None:
        _, domain = split_address(address)
        if not self.resolver.resolve_mx(domain):
            logger.debug("No MX records for %s", domain)
            raise EmailValidationError(
                ErrorKind.NO_MX_RECORDS, f"No MX records found for {domain}"
            )


class DomainExistsRule(_DnsRule):
    """Require an A or AAAA answer for the address's domain."""

    name = 'domain'

    def check(self, address: str) -> None:
        _, domain = split_address(address)
        if not self.resolver.has_address(domain):
            logger.debug("No A/AAAA records for %s", domain)
            raise EmailValidationError(
                ErrorKind.DOMAIN_NOT_FOUND, f"Domain {domain} does not resolve"
            )
