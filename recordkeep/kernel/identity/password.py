"""
Password hashing utilities using bcrypt.
"""

from typing import Optional

import bcrypt

from recordkeep.config import get_settings
from recordkeep.kernel.identity.exceptions import HashingError

# bcrypt only uses the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """
    Password hashing service.

    Every hash carries its own random salt, so hashing the same password twice
    gives two different strings that both verify.
    """

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds if rounds is not None else get_settings().bcrypt_rounds

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """Encode and truncate to the bcrypt input limit."""
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string

        Raises:
            HashingError: If bcrypt fails to produce a hash
        """
        pwd_bytes = self._truncate_password(password)
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            hashed = bcrypt.hashpw(pwd_bytes, salt)
        except ValueError as e:
            raise HashingError(f"bcrypt hash failed: {e}") from e
        return hashed.decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password to verify
            hashed_password: Stored hashed password

        Returns:
            True if password matches, False otherwise

        Raises:
            HashingError: If hashed_password is not a bcrypt hash
        """
        pwd_bytes = self._truncate_password(plain_password)
        try:
            hash_bytes = hashed_password.encode("utf-8")
            return bcrypt.checkpw(pwd_bytes, hash_bytes)
        except (ValueError, TypeError, AttributeError) as e:
            raise HashingError("Stored password hash is malformed") from e

    def needs_rehash(self, hashed_password: str) -> bool:
        """
        Check if a password hash was made with a different work factor.

        Args:
            hashed_password: Existing password hash

        Returns:
            True if hash should be regenerated
        """
        # Format: $2b$XX$... where XX is the rounds
        parts = hashed_password.split("$")
        if len(parts) < 4 or not parts[2].isdigit():
            return True
        return int(parts[2]) != self.rounds


_default_hasher: Optional[PasswordHasher] = None


def get_password_hasher() -> PasswordHasher:
    """Get or create the default password hasher."""
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = PasswordHasher()
    return _default_hasher


# Convenience functions
def hash_password(password: str) -> str:
    """Hash a password."""
    return get_password_hasher().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return get_password_hasher().verify(plain_password, hashed_password)
