"""
Persistence of user credentials and live tokens.

Each SqlCredentialStore method runs in its own short transaction, so a call
returning means its write is committed. Token membership is changed with
row-level INSERT and DELETE only; the token list is never read, edited and
written back as a whole.
"""

import uuid
from typing import Optional, Protocol

from pydantic import BaseModel
from sqlalchemy import and_, delete, insert, literal, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from recordkeep.kernel.identity.exceptions import DuplicateEmailError
from recordkeep.kernel.models.user import TokenAccess, User, UserToken


class TokenEntry(BaseModel):
    """A token together with its token class."""

    access: str = TokenAccess.AUTH.value
    token: str


class CredentialStore(Protocol):
    """Persisted user records with their password hash and live tokens."""

    async def find_by_email(self, email: str) -> Optional[User]:
        """Return the user registered under ``email`` exactly as stored."""

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        ...

    async def find_by_id_and_token(
        self,
        user_id: uuid.UUID,
        token: str,
        access: str = TokenAccess.AUTH.value,
    ) -> Optional[User]:
        """Return the user only while ``token`` is still in its token list."""

    async def insert(self, user: User) -> User:
        """Persist a new user; raise DuplicateEmailError on a taken email."""

    async def append_token(
        self,
        user_id: uuid.UUID,
        entry: TokenEntry,
        password_hash: Optional[str] = None,
    ) -> bool:
        """
        Add ``entry`` to the user's token list.

        With ``password_hash`` the entry is only added while the stored hash
        still equals it. Returns False when nothing was added.
        """

    async def remove_token(self, user_id: uuid.UUID, token: str) -> None:
        """Drop every entry matching ``token``; absent tokens are ignored."""

    async def clear_tokens(self, user_id: uuid.UUID) -> None:
        ...

    async def update_password_hash(
        self,
        user_id: uuid.UUID,
        password_hash: str,
        revoke_tokens: bool = True,
        current_hash: Optional[str] = None,
    ) -> bool:
        """
        Replace the stored hash, optionally only if it still equals ``current_hash``.

        Returns False when no row was updated; tokens are then left alone.
        """


class SqlCredentialStore:
    """CredentialStore backed by the users / user_tokens tables."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def find_by_email(self, email: str) -> Optional[User]:
        query = select(User).where(User.email == email)
        async with self.session_maker() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none()

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        query = select(User).where(User.id == user_id)
        async with self.session_maker() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none()

    async def find_by_id_and_token(
        self,
        user_id: uuid.UUID,
        token: str,
        access: str = TokenAccess.AUTH.value,
    ) -> Optional[User]:
        query = (
            select(User)
            .join(UserToken, UserToken.user_id == User.id)
            .where(
                and_(
                    User.id == user_id,
                    UserToken.token == token,
                    UserToken.access == access,
                )
            )
            .limit(1)
        )
        async with self.session_maker() as session:
            result = await session.execute(query)
            return result.scalars().first()

    async def insert(self, user: User) -> User:
        try:
            async with self.session_maker.begin() as session:
                session.add(user)
                await session.flush()
                await session.refresh(user, attribute_names=["created_at", "updated_at"])
        except IntegrityError as e:
            raise DuplicateEmailError() from e
        return user

    async def append_token(
        self,
        user_id: uuid.UUID,
        entry: TokenEntry,
        password_hash: Optional[str] = None,
    ) -> bool:
        # Hash check and insert are one statement; FOR UPDATE locks the user row
        # on backends that support it (SQLite serializes writers anyway)
        source = select(User.id, literal(entry.access), literal(entry.token)).where(User.id == user_id)
        if password_hash is not None:
            source = source.where(User.password_hash == password_hash)
        stmt = insert(UserToken).from_select(
            ["user_id", "access", "token"],
            source.with_for_update(),
        )
        async with self.session_maker.begin() as session:
            result = await session.execute(stmt)
            return result.rowcount > 0

    async def remove_token(self, user_id: uuid.UUID, token: str) -> None:
        stmt = delete(UserToken).where(
            and_(
                UserToken.user_id == user_id,
                UserToken.token == token,
            )
        )
        async with self.session_maker.begin() as session:
            await session.execute(stmt)

    async def clear_tokens(self, user_id: uuid.UUID) -> None:
        stmt = delete(UserToken).where(UserToken.user_id == user_id)
        async with self.session_maker.begin() as session:
            await session.execute(stmt)

    async def update_password_hash(
        self,
        user_id: uuid.UUID,
        password_hash: str,
        revoke_tokens: bool = True,
        current_hash: Optional[str] = None,
    ) -> bool:
        stmt = update(User).where(User.id == user_id).values(password_hash=password_hash)
        if current_hash is not None:
            stmt = stmt.where(User.password_hash == current_hash)
        async with self.session_maker.begin() as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                return False
            if revoke_tokens:
                await session.execute(
                    delete(UserToken).where(UserToken.user_id == user_id)
                )
        return True
