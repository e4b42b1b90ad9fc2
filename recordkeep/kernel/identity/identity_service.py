"""
Identity service for registration, login and token lifecycle.
"""

import asyncio
import uuid
from datetime import timedelta
from typing import Optional

from recordkeep.config import get_settings
from recordkeep.kernel.identity.credential_store import CredentialStore, TokenEntry
from recordkeep.kernel.identity.credentials import check_new_password, parse_credentials
from recordkeep.kernel.identity.exceptions import AuthenticationError, InvalidTokenError
from recordkeep.kernel.identity.jwt import TokenClaims, TokenCodec, get_token_codec
from recordkeep.kernel.identity.password import PasswordHasher, get_password_hasher
from recordkeep.kernel.models.base import generate_uuid
from recordkeep.kernel.models.user import TokenAccess, User
from recordkeep.logging_config import get_logger

logger = get_logger(__name__)


class IdentityService:
    """
    Service for user identity operations.

    Handles user registration, authentication, and token management.
    A user's active sessions are exactly the tokens in its token list:
    login adds one, logout removes one. The service itself is stateless.

    A token is only added while the password hash it was proven against is
    still the stored one, so a login racing a password change cannot leave
    a session behind.
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: Optional[PasswordHasher] = None,
        codec: Optional[TokenCodec] = None,
        token_expire_minutes: Optional[int] = None,
    ):
        self.store = store
        self.hasher = hasher or get_password_hasher()
        self.codec = codec or get_token_codec()
        if token_expire_minutes is None:
            token_expire_minutes = get_settings().token_expire_minutes
        self.token_ttl = timedelta(minutes=token_expire_minutes) if token_expire_minutes else None

    async def register(self, email: str, password: str) -> str:
        """
        Register a new user and issue its first token.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            A bearer token for the new user

        Raises:
            ValidationError: If email or password is malformed
            DuplicateEmailError: If email already exists
        """
        credentials = parse_credentials(email, password)

        # Hash before the first write; plaintext never reaches the store
        user = User(
            id=generate_uuid(),
            email=credentials.email,
            password_hash=await self._hash(credentials.password),
            tokens=[],
        )
        user = await self.store.insert(user)
        logger.info("User registered", extra={"user_id": str(user.id)})

        return await self._issue_token(user.id, user.password_hash)

    async def login(self, email: str, password: str) -> str:
        """
        Authenticate by email and password and issue a new token.

        Unknown email and wrong password raise the same AuthenticationError.
        A hash made with an outdated work factor is upgraded on the way.
        """
        user = await self.store.find_by_email(email.strip())
        if user is None or not await self._verify(password, user.password_hash):
            logger.warning("Login failed")
            raise AuthenticationError("Invalid email or password")

        password_hash = user.password_hash
        if self.hasher.needs_rehash(password_hash):
            upgraded = await self._hash(password)
            if not await self.store.update_password_hash(
                user.id, upgraded, revoke_tokens=False, current_hash=password_hash,
            ):
                raise AuthenticationError("Invalid email or password")
            password_hash = upgraded
            logger.info("Password hash upgraded", extra={"user_id": str(user.id)})

        token = await self._issue_token(user.id, password_hash)
        logger.info("User logged in", extra={"user_id": str(user.id)})
        return token

    async def authenticate(self, token: str) -> User:
        """
        Resolve a bearer token to its user.

        The token must both verify and still be in the user's token list.

        Raises:
            AuthenticationError: For invalid, forged, expired or revoked tokens
        """
        try:
            claims = self.codec.verify(token)
            user_id = uuid.UUID(claims.sub)
        except (InvalidTokenError, ValueError) as e:
            raise AuthenticationError() from e

        if claims.access != TokenAccess.AUTH.value:
            raise AuthenticationError()

        user = await self.store.find_by_id_and_token(user_id, token, access=TokenAccess.AUTH.value)
        if user is None:
            raise AuthenticationError()
        return user

    async def logout(self, user_id: uuid.UUID, token: str) -> None:
        """Revoke one token. Revoking an unknown token is not an error."""
        await self.store.remove_token(user_id, token)
        logger.info("User logged out", extra={"user_id": str(user_id)})

    async def logout_all(self, user_id: uuid.UUID) -> None:
        """Revoke every token of the user."""
        await self.store.clear_tokens(user_id)
        logger.info("User logged out of all sessions", extra={"user_id": str(user_id)})

    async def change_password(
        self,
        user_id: uuid.UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Change user's password.

        Revokes all of the user's tokens on success.

        Raises:
            AuthenticationError: If the user is unknown, current_password is wrong,
                or the password changed concurrently
            ValidationError: If new_password is too short
        """
        user = await self.store.find_by_id(user_id)
        if user is None or not await self._verify(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        check_new_password(new_password)
        changed = await self.store.update_password_hash(
            user_id,
            await self._hash(new_password),
            revoke_tokens=True,
            current_hash=user.password_hash,
        )
        if not changed:
            raise AuthenticationError("Current password is incorrect")
        logger.info("Password changed", extra={"user_id": str(user_id)})

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        """Get a user by ID."""
        return await self.store.find_by_id(user_id)

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self.hasher.hash, password)

    async def _verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.hasher.verify, password, password_hash)

    async def _issue_token(self, user_id: uuid.UUID, password_hash: str) -> str:
        claims = TokenClaims.issue(user_id, TokenAccess.AUTH.value, self.token_ttl)
        token = self.codec.sign(claims)
        added = await self.store.append_token(
            user_id,
            TokenEntry(access=claims.access, token=token),
            password_hash=password_hash,
        )
        if not added:
            # Password changed (or user removed) since the credential was checked
            raise AuthenticationError("Invalid email or password")
        return token
