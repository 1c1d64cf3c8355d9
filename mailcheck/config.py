"""
Config Module

Validator configuration and construction of rule pipelines by name.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .resolver import DEFAULT_DNS_SERVER, DEFAULT_TIMEOUT, MxResolver, ResolverBase
from .rules import DomainExistsRule, FormatRule, LengthRule, MxRule, ValidationRule
from .validator import EmailValidator

RULE_NAMES = ('format', 'length', 'domain', 'mx')
DNS_RULES = ('domain', 'mx')


def _parse_bool(value: Optional[str]) -> bool:
    return (value or '').strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class ValidatorConfig:
    """
    Settings used to build an EmailValidator.

    Attributes:
        rules: Rule names in execution order
        dns_server: Resolver address as 'host:port'
        dns_timeout: Seconds to wait for a DNS reply
    """
    rules: Tuple[str, ...] = ('format',)
    dns_server: str = DEFAULT_DNS_SERVER
    dns_timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        unknown = [name for name in self.rules if name not in RULE_NAMES]
        if unknown:
            raise ValueError(
                f"Unknown rule(s) {', '.join(unknown)}; expected one of {', '.join(RULE_NAMES)}"
            )
        if self.dns_timeout <= 0:
            raise ValueError("dns_timeout must be positive")

    @property
    def uses_dns(self) -> bool:
        return any(name in DNS_RULES for name in self.rules)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ValidatorConfig':
        """
        Read configuration from environment variables.

        MAILCHECK_RULES: comma-separated rule names (default 'format')
        CHECK_MX: 'true' appends the mx rule if not already listed
        DNS_SERVER: resolver address (default '8.8.8.8:53')
        DNS_TIMEOUT: reply timeout in seconds (default 2)
        """
        environ = os.environ if environ is None else environ

        raw_rules = environ.get('MAILCHECK_RULES', 'format')
        rules = [name.strip().lower() for name in raw_rules.split(',') if name.strip()]
        if _parse_bool(environ.get('CHECK_MX')) and 'mx' not in rules:
            rules.append('mx')

        raw_timeout = environ.get('DNS_TIMEOUT', str(DEFAULT_TIMEOUT)).strip()
        try:
            timeout = float(raw_timeout)
        except ValueError as err:
            raise ValueError(f"DNS_TIMEOUT must be a number; got {raw_timeout!r}") from err

        return cls(
            rules=tuple(rules),
            dns_server=environ.get('DNS_SERVER', DEFAULT_DNS_SERVER).strip(),
            dns_timeout=timeout,
        )


def build_rule(name: str, resolver: Optional[ResolverBase] = None) -> ValidationRule:
    if name == 'format':
        return FormatRule()
    if name == 'length':
        return LengthRule()
    if resolver is None:
        raise ValueError(f"Rule {name!r} needs a resolver")
    if name == 'mx':
        return MxRule(resolver)
    if name == 'domain':
        return DomainExistsRule(resolver)
    raise ValueError(f"Unknown rule {name!r}")


def build_validator(config: ValidatorConfig,
                    resolver: Optional[ResolverBase] = None) -> EmailValidator:
    """
    Build an EmailValidator from configuration.

    Args:
        config: The validator settings
        resolver: Resolver for DNS rules; an MxResolver for the configured
            server is created when omitted and a DNS rule is requested

    Returns:
        EmailValidator running the configured rules in order
    """
    if resolver is None and config.uses_dns:
        resolver = MxResolver(config.dns_server, timeout=config.dns_timeout)
    return EmailValidator(build_rule(name, resolver) for name in config.rules)
