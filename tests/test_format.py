"""
Unit Tests for format checks

Covers the fixed check order, the last-'@' split policy and the
character whitelist.
"""

import string

import pytest

from mailcheck.errors import EmailValidationError, ErrorKind
from mailcheck.format import ALLOWED_CHARACTERS, check_format, split_address


def kind_of(address):
    """Return the ErrorKind raised for an address, or None if it passes."""
    try:
        check_format(address)
    except EmailValidationError as exc:
        return exc.kind
    return None


class TestSplitAddress:
    """Tests for split_address."""

    def test_simple_split(self):
        assert split_address("user@example.com") == ("user", "example.com")

    def test_splits_on_last_at(self):
        """The last '@' separates the domain."""
        assert split_address('"a@b"@example.com') == ('"a@b"', "example.com")

    def test_missing_at_raises(self):
        with pytest.raises(EmailValidationError) as excinfo:
            split_address("plainaddress")
        assert excinfo.value.kind is ErrorKind.MISSING_AT_SYMBOL


class TestValidFormats:
    """Addresses that pass every structural check."""

    @pytest.mark.parametrize("email", [
        "user@example.com",
        "test.email@domain.org",
        "user123@test-domain.co.uk",
        "user+tag@example.com",
        "user_name@example.com",
        "USER@EXAMPLE.COM",
        "user@sub.domain.co.uk",
        "user@x.co",
        "test@123domain.com",
        "a@b.cd",
        "first.last-name+filter@mail.example.travel",
    ])
    def test_valid_emails(self, email):
        """Test that well-formed addresses pass."""
        assert kind_of(email) is None, f"Expected {email} to be valid"


class TestInvalidFormats:
    """Each check in order, and which one wins."""

    @pytest.mark.parametrize("email,expected", [
        ("", ErrorKind.INVALID_FORMAT),
        ("plainaddress", ErrorKind.MISSING_AT_SYMBOL),
        ("missing-at-sign.com", ErrorKind.MISSING_AT_SYMBOL),
        ("@missing-local.com", ErrorKind.INVALID_FORMAT),
        ("@", ErrorKind.INVALID_FORMAT),
        ("missing-domain@", ErrorKind.MISSING_DOMAIN),
        ("a@b", ErrorKind.MISSING_TOP_LEVEL_DOMAIN),
        ("user@localhost", ErrorKind.MISSING_TOP_LEVEL_DOMAIN),
        ("user@.com", ErrorKind.MISSING_TOP_LEVEL_DOMAIN),
        ("user@domain.", ErrorKind.MISSING_TOP_LEVEL_DOMAIN),
        ("bad char@x.com", ErrorKind.INVALID_CHARACTERS),
        ("user!@example.com", ErrorKind.INVALID_CHARACTERS),
        ("user\t@domain.com", ErrorKind.INVALID_CHARACTERS),
        ("пользователь@example.com", ErrorKind.INVALID_CHARACTERS),
    ])
    def test_invalid_emails(self, email, expected):
        """Test that invalid addresses fail with the expected kind."""
        assert kind_of(email) is expected

    def test_structure_checked_before_characters(self):
        """A missing TLD wins over a bad character."""
        assert kind_of("bad char@nodot") is ErrorKind.MISSING_TOP_LEVEL_DOMAIN

    def test_first_dot_decides_tld_check(self):
        """Only the first dot of the domain is examined for position."""
        assert kind_of("user@a.b.") is None
        assert kind_of("user@.a.b") is ErrorKind.MISSING_TOP_LEVEL_DOMAIN

    def test_domain_with_at_after_last_split(self):
        """The local part may contain '@' since the last one is used."""
        assert kind_of("user@host@example.com") is None

    @pytest.mark.parametrize("value", [None, 12345, ["user@example.com"]])
    def test_non_string_input(self, value):
        assert kind_of(value) is ErrorKind.INVALID_FORMAT

    def test_error_message_names_offending_character(self):
        with pytest.raises(EmailValidationError) as excinfo:
            check_format("us%r@example.com")
        assert "'%'" in excinfo.value.message


class TestFormatProperties:
    """Properties that hold across generated inputs."""

    @pytest.mark.parametrize("local", ["plain", "dots.and-dashes", "a+b_c", "x"])
    def test_strings_without_at_are_missing_at(self, local):
        assert kind_of(local) is ErrorKind.MISSING_AT_SYMBOL
        assert kind_of(local + ".com") is ErrorKind.MISSING_AT_SYMBOL

    @pytest.mark.parametrize("domain", ["b", "localhost", "my-host", "host_1"])
    def test_domain_without_dot_is_missing_tld(self, domain):
        assert kind_of(f"user@{domain}") is ErrorKind.MISSING_TOP_LEVEL_DOMAIN

    def test_every_whitelisted_character_is_accepted(self):
        for char in string.ascii_letters + string.digits + "._-+":
            assert kind_of(f"us{char}er@example.com") is None, char

    def test_every_other_printable_character_is_rejected(self):
        for char in string.printable:
            if char in ALLOWED_CHARACTERS:
                continue
            assert kind_of(f"us{char}er@example.com") is ErrorKind.INVALID_CHARACTERS, repr(char)
