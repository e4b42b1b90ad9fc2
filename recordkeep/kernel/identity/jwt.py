"""
JWT bearer token signing and verification.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel, ValidationError as PydanticValidationError

from recordkeep.config import get_settings
from recordkeep.kernel.identity.exceptions import InvalidTokenError, TokenSigningError


class TokenClaims(BaseModel):
    """Claims carried by a bearer token."""

    sub: str  # User ID
    access: str  # Token class, see TokenAccess
    iat: Optional[int] = None
    jti: Optional[str] = None  # Distinguishes tokens issued in the same second
    exp: Optional[int] = None

    @classmethod
    def issue(
        cls,
        subject_id: uuid.UUID,
        access: str,
        expires_delta: Optional[timedelta] = None,
    ) -> "TokenClaims":
        """Build claims for a fresh token with issued-at and a random token id."""
        now = datetime.now(timezone.utc)
        return cls(
            sub=str(subject_id),
            access=access,
            iat=int(now.timestamp()),
            jti=uuid.uuid4().hex,
            exp=int((now + expires_delta).timestamp()) if expires_delta else None,
        )


class TokenCodec:
    """
    Signs claims into compact JWTs and verifies them back.

    Every verification failure surfaces as the same InvalidTokenError so
    that callers cannot distinguish a forged token from a malformed one.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm

    def sign(self, claims: TokenClaims) -> str:
        """
        Sign claims into a token string.

        Unset optional claims are left out of the payload.

        Raises:
            TokenSigningError: If the JOSE backend cannot produce a signature
        """
        payload = claims.model_dump(exclude_none=True)
        try:
            return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except JOSEError as e:
            raise TokenSigningError(f"Could not sign token: {e}") from e

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a token and return its claims.

        Args:
            token: Compact JWT string

        Returns:
            The claims exactly as they were signed

        Raises:
            InvalidTokenError: On any signature, format, key or expiry failure
        """
        if not isinstance(token, str) or not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
            return TokenClaims.model_validate(payload)
        except (JOSEError, PydanticValidationError) as e:
            raise InvalidTokenError() from e


# Default codec instance
_token_codec: Optional[TokenCodec] = None


def get_token_codec() -> TokenCodec:
    """Get or create the default token codec."""
    global _token_codec
    if _token_codec is None:
        _token_codec = TokenCodec()
    return _token_codec
