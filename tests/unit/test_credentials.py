"""Unit tests for registration credential checks."""

import pytest

from recordkeep.kernel.identity.credentials import (
    MIN_PASSWORD_LENGTH,
    check_new_password,
    parse_credentials,
)
from recordkeep.kernel.identity.exceptions import ValidationError


class TestParseCredentials:

    def test_valid_pair(self):
        credentials = parse_credentials("a@b.com", "secret1")

        assert credentials.email == "a@b.com"
        assert credentials.password == "secret1"

    def test_email_is_trimmed_not_lowercased(self):
        credentials = parse_credentials("  Alice@Records.io \n", "secret1")

        assert credentials.email == "Alice@Records.io"

    def test_password_is_not_trimmed(self):
        assert parse_credentials("a@b.com", " secret ").password == " secret "

    @pytest.mark.parametrize("email", ["", "ab", "not-an-email", "a@", "@b.com", "a b@c.com", "   "])
    def test_invalid_email(self, email):
        with pytest.raises(ValidationError):
            parse_credentials(email, "secret1")

    def test_short_password(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_credentials("a@b.com", "12345")

        assert f"at least {MIN_PASSWORD_LENGTH}" in exc_info.value.message

    def test_minimum_password_length_accepted(self):
        assert parse_credentials("a@b.com", "123456").password == "123456"

    def test_both_invalid_reports_both(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_credentials("nope", "1")

        assert "email" in exc_info.value.message.lower()
        assert "password" in exc_info.value.message.lower()


class TestCheckNewPassword:

    def test_accepts_long_enough(self):
        assert check_new_password("newsecret") == "newsecret"

    def test_rejects_short(self):
        with pytest.raises(ValidationError):
            check_new_password("short")
