"""
Shape checks for email/password pairs submitted at registration.
"""

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator

from recordkeep.kernel.identity.exceptions import ValidationError

MIN_EMAIL_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


class Credentials(BaseModel):
    """Email and plaintext password, validated and trimmed."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip()
        if len(v) < MIN_EMAIL_LENGTH:
            raise ValueError(f"Email must be at least {MIN_EMAIL_LENGTH} characters")
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"{v} is not a valid email") from e
        # Stored as typed (trimmed only); uniqueness is case-sensitive
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


def parse_credentials(email: str, password: str) -> Credentials:
    """Validate a registration pair, raising the identity ValidationError."""
    try:
        return Credentials(email=email, password=password)
    except PydanticValidationError as e:
        message = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise ValidationError(message) from e


def check_new_password(password: str) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password
