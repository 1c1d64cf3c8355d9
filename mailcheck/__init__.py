"""
mailcheck

Email validation with format checking and MX record verification over a
hand-built DNS query.
"""

from .config import ValidatorConfig, build_validator
from .errors import DnsError, EmailValidationError, ErrorKind
from .resolver import MockResolver, MxResolver, ResolverBase
from .rules import DomainExistsRule, FormatRule, LengthRule, MxRule, ValidationRule
from .validator import EmailValidator, ValidationResult

__all__ = [
    'EmailValidator', 'ValidationResult',
    'ValidationRule', 'FormatRule', 'LengthRule', 'MxRule', 'DomainExistsRule',
    'ResolverBase', 'MxResolver', 'MockResolver',
    'ErrorKind', 'EmailValidationError', 'DnsError',
    'ValidatorConfig', 'build_validator',
]
__version__ = '1.0.0'
