"""
Authentication models for ArkiArt.

This module defines the SQLAlchemy Account model and the helpers for:
- Password hashing
- Access token generation
"""
import secrets
from sqlalchemy import Column, Integer, String
import bcrypt
from arkiart.database import Base

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 14
PASSWORD_MIN_LENGTH = 6
BCRYPT_MAX_BYTES = 72

# 128 random bytes, hex encoded
ACCESS_TOKEN_BYTES = 128


def generate_access_token() -> str:
    """Generate an opaque, unguessable access token."""
    return secrets.token_hex(ACCESS_TOKEN_BYTES)


def _password_bytes(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; newer releases refuse longer input
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Generate password hash using bcrypt with a fresh salt."""
    return bcrypt.hashpw(
        _password_bytes(password),
        bcrypt.gensalt()
    ).decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    """Check if provided password matches the stored hash."""
    if not password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            _password_bytes(password),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # Malformed hash or a password bcrypt refuses to process
        return False


class Account(Base):
    """An account: username, password hash and the current access token."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    # Null when logged out
    access_token = Column(String(ACCESS_TOKEN_BYTES * 2), unique=True, index=True, nullable=True)

    def verify_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    @property
    def is_logged_in(self) -> bool:
        return self.access_token is not None

    def to_public(self) -> dict:
        """Client-facing view of the account; never includes the hash."""
        return {
            "username": self.username,
            "id": self.id,
            "accessToken": self.access_token,
        }

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, username={self.username!r})"
