"""
Pydantic schemas for API request/response validation.
"""

from recordkeep.schemas.auth import (
    UserCreate,
    UserLogin,
    UserResponse,
    TokenResponse,
    ChangePasswordRequest,
)
from recordkeep.schemas.record import (
    RecordCreate,
    RecordUpdate,
    RecordResponse,
    RecordListResponse,
)
from recordkeep.schemas.common import (
    SuccessResponse,
    HealthResponse,
)

__all__ = [
    # Auth
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    "ChangePasswordRequest",
    # Record
    "RecordCreate",
    "RecordUpdate",
    "RecordResponse",
    "RecordListResponse",
    # Common
    "SuccessResponse",
    "HealthResponse",
]
