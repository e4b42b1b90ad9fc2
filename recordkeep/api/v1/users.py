"""
User account and session endpoints.
"""

from fastapi import APIRouter, HTTPException, status

from recordkeep.api.deps import BearerToken, CurrentUser, Identity
from recordkeep.kernel.identity.exceptions import AuthenticationError
from recordkeep.schemas.auth import (
    ChangePasswordRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from recordkeep.schemas.common import SuccessResponse

router = APIRouter()


@router.post("", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, identity: Identity):
    """
    Register a new user account.

    Returns the first access token of the new account.
    """
    token = await identity.register(email=data.email, password=data.password)
    user = await identity.authenticate(token)

    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, identity: Identity):
    """
    Authenticate user and return a new token.
    """
    token = await identity.login(email=data.email, password=data.password)
    user = await identity.authenticate(token)

    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(user: CurrentUser):
    """Get current user's profile."""
    return UserResponse.model_validate(user)


@router.delete("/me/token", response_model=SuccessResponse)
async def logout(user: CurrentUser, token: BearerToken, identity: Identity):
    """Revoke the token used for this request."""
    await identity.logout(user.id, token)
    return SuccessResponse(message="Logged out successfully")


@router.delete("/me/tokens", response_model=SuccessResponse)
async def logout_all(user: CurrentUser, identity: Identity):
    """Revoke every token of the current user."""
    await identity.logout_all(user.id)
    return SuccessResponse(message="Logged out of all sessions")


@router.post("/me/password", response_model=SuccessResponse)
async def change_password(
    data: ChangePasswordRequest,
    user: CurrentUser,
    identity: Identity,
):
    """
    Change user's password.

    Revokes all tokens on success.
    """
    try:
        await identity.change_password(
            user_id=user.id,
            current_password=data.current_password,
            new_password=data.new_password,
        )
    except AuthenticationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    return SuccessResponse(message="Password changed successfully. Please log in again.")
