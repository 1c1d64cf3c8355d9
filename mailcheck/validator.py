"""
Email Validator Module

Contains the EmailValidator class, a fail-fast pipeline of validation rules.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .errors import EmailValidationError, ErrorKind
from .rules import FormatRule, ValidationRule

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """
    Represents the result of an email validation.

    Attributes:
        email: The email address that was validated
        error: Kind of the first failed rule (None if valid)
        detail: Message of the first failed rule (None if valid)
        rule: Name of the rule that failed (None if valid)
    """
    email: Any
    error: Optional[ErrorKind] = None
    detail: Optional[str] = None
    rule: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary format."""
        return {
            'is_valid': self.is_valid,
            'email': self.email,
            'error': self.error.value if self.error else None,
            'detail': self.detail,
            'rule': self.rule,
        }


class EmailValidator:
    """
    Runs an ordered sequence of rules and stops at the first failure.

    Rules are fixed at construction. Put format rules before DNS rules so
    malformed addresses never cost a network round trip.

    Example:
        >>> validator = EmailValidator()
        >>> validator.validate('user@example.com').is_valid
        True
        >>> validator.validate('plainaddress').error
        <ErrorKind.MISSING_AT_SYMBOL: 'MissingAtSymbol'>
    """

    def __init__(self, rules: Optional[Iterable[ValidationRule]] = None):
        """
        Initialize the EmailValidator.

        Args:
            rules: Rules to run in order; defaults to a single FormatRule
        """
        self._rules = tuple(rules) if rules is not None else (FormatRule(),)

    @property
    def rules(self) -> tuple:
        return self._rules

    def describe(self) -> List[str]:
        """Names of the configured rules, in execution order."""
        return [rule.name for rule in self._rules]

    def check(self, email: str) -> None:
        """
        Run every rule against an address.

        Raises:
            EmailValidationError: from the first rule that fails
        """
        for rule in self._rules:
            try:
                rule.check(email)
            except EmailValidationError as exc:
                logger.debug("Rule %s rejected %r: %s", rule.name, email, exc.kind.value)
                exc.rule = rule.name
                raise

    def validate(self, email: str) -> ValidationResult:
        """
        Validate an email address.

        Args:
            email: The email address to validate

        Returns:
            ValidationResult carrying the first error, if any
        """
        try:
            self.check(email)
        except EmailValidationError as exc:
            return ValidationResult(
                email=email,
                error=exc.kind,
                detail=exc.message,
                rule=exc.rule,
            )
        return ValidationResult(email=email)

    def validate_batch(self, emails: list) -> list:
        """
        Validate multiple email addresses.

        Args:
            emails: List of email addresses to validate

        Returns:
            List of ValidationResult objects
        """
        return [self.validate(email) for email in emails]

    def is_valid(self, email: str) -> bool:
        """Quick check if email is valid."""
        return self.validate(email).is_valid
