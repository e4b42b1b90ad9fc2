"""
Identity Core - password storage, bearer tokens and sessions.
"""

from recordkeep.kernel.identity.password import PasswordHasher, verify_password, hash_password
from recordkeep.kernel.identity.jwt import TokenClaims, TokenCodec, get_token_codec
from recordkeep.kernel.identity.credential_store import CredentialStore, SqlCredentialStore, TokenEntry
from recordkeep.kernel.identity.credentials import Credentials, parse_credentials
from recordkeep.kernel.identity.exceptions import (
    IdentityError,
    ValidationError,
    DuplicateEmailError,
    AuthenticationError,
    InvalidTokenError,
    HashingError,
    TokenSigningError,
)
from recordkeep.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "TokenClaims",
    "TokenCodec",
    "get_token_codec",
    "CredentialStore",
    "SqlCredentialStore",
    "TokenEntry",
    "Credentials",
    "parse_credentials",
    "IdentityError",
    "ValidationError",
    "DuplicateEmailError",
    "AuthenticationError",
    "InvalidTokenError",
    "HashingError",
    "TokenSigningError",
    "IdentityService",
]
