"""
Kernel Data Models

Core SQLAlchemy models: user accounts with their live tokens, and records.
"""

from recordkeep.kernel.models.base import Base, TimestampMixin, generate_uuid
from recordkeep.kernel.models.user import User, UserToken, TokenAccess
from recordkeep.kernel.models.record import Record

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    # User
    "User",
    "UserToken",
    "TokenAccess",
    # Records
    "Record",
]
