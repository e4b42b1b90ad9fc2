"""
FastAPI dependencies for authentication and database sessions.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from recordkeep.database import async_session_maker, get_db
from recordkeep.kernel.identity.credential_store import SqlCredentialStore
from recordkeep.kernel.identity.exceptions import AuthenticationError
from recordkeep.kernel.identity.identity_service import IdentityService
from recordkeep.kernel.models.user import User


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_identity_service() -> IdentityService:
    """Identity service over the shared session factory."""
    return IdentityService(SqlCredentialStore(async_session_maker))


Identity = Annotated[IdentityService, Depends(get_identity_service)]


async def get_bearer_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> str:
    """Raw bearer token from the Authorization header, or 401."""
    if not credentials:
        raise _unauthorized("Not authenticated")
    return credentials.credentials


BearerToken = Annotated[str, Depends(get_bearer_token)]


async def get_current_user(token: BearerToken, identity: Identity) -> User:
    """Get current authenticated user or raise 401."""
    try:
        return await identity.authenticate(token)
    except AuthenticationError:
        raise _unauthorized("Invalid or expired token")


CurrentUser = Annotated[User, Depends(get_current_user)]
