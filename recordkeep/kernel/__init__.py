"""
Kernel Layer

- Identity Core (password hashing, bearer tokens, sessions as token lists)
- Records (owner-scoped entries)
- Data models shared by both

Architectural Invariants:
- Passwords are hashed before the first write; plaintext is never stored
- A token is live only while it is in its user's token list
- Token lists change by row insert/delete, never by whole-list rewrite
"""

from recordkeep.kernel.models import (
    Base,
    User,
    UserToken,
    TokenAccess,
    Record,
)

__all__ = [
    "Base",
    # User & Identity
    "User",
    "UserToken",
    "TokenAccess",
    # Records
    "Record",
]
