"""
Errors raised by the identity subsystem.

AuthenticationError is raised alike for unknown users, wrong passwords,
invalid tokens and revoked tokens.
HashingError and TokenSigningError are internal faults, not user errors.
"""


class IdentityError(Exception):
    """Base class for identity errors."""

    default_message = "Identity error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(IdentityError):
    """Malformed email or password; the user must resubmit."""

    default_message = "Invalid email or password format"


class DuplicateEmailError(IdentityError):
    default_message = "Email already registered"


class AuthenticationError(IdentityError):
    default_message = "Authentication failed"


class InvalidTokenError(IdentityError):
    """Token failed verification: malformed, forged, wrong key or expired."""

    default_message = "Invalid token"


class HashingError(IdentityError):
    default_message = "Password hashing failed"


class TokenSigningError(IdentityError):
    default_message = "Token signing failed"
