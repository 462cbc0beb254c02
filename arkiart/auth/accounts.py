"""
Account directory.

This module provides the authoritative username -> account mapping:
- Account creation with a fresh access token
- Lookup by username or by access token
- Token issue and clearing for login/logout
"""
from typing import Optional
from fastapi import Depends
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from arkiart.database import get_db_session
from arkiart.auth.models import (
    Account, USERNAME_MIN_LENGTH, USERNAME_MAX_LENGTH, generate_access_token
)


class Credentials(BaseModel):
    """Request body for register and login."""
    username: Optional[str] = None
    password: Optional[str] = None


class AccountCreationError(Exception):
    """An account could not be created (invalid or taken username, or a write failure)."""


class AccountDirectory:
    """
    Create, look up and update accounts through an AsyncSession.
    """
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, username: Optional[str], hashed_password: str) -> Account:
        """
        Create a new logged-in account.

        Args:
            username: Unique username, 2 to 14 characters
            hashed_password: bcrypt hash of the password

        Returns:
            The persisted account, holding a fresh access token

        Raises:
            AccountCreationError: If the username is invalid or taken, or the write fails
        """
        if not username or not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            raise AccountCreationError(
                f"Username must be {USERNAME_MIN_LENGTH} to {USERNAME_MAX_LENGTH} characters"
            )

        account = Account(
            username=username,
            hashed_password=hashed_password,
            access_token=generate_access_token()
        )

        # The unique constraint on username settles concurrent registrations
        self.db.add(account)
        try:
            await self.db.commit()
            await self.db.refresh(account)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise AccountCreationError("Could not persist account") from e

        return account

    async def find_by_username(self, username: Optional[str]) -> Optional[Account]:
        if not username:
            return None
        result = await self.db.execute(
            select(Account).where(Account.username == username)
        )
        return result.scalar_one_or_none()

    async def find_by_token(self, token: Optional[str]) -> Optional[Account]:
        """
        Find the account holding a live access token.

        An empty token never matches, so logged-out accounts (null token)
        cannot be reached this way.
        """
        if not token:
            return None
        result = await self.db.execute(
            select(Account).where(Account.access_token == token)
        )
        return result.scalar_one_or_none()

    async def issue_token(self, account: Account) -> Account:
        """Give a logged-out account a fresh access token."""
        account.access_token = generate_access_token()
        await self.db.commit()
        return account

    async def clear_token(self, account: Account) -> Account:
        account.access_token = None
        await self.db.commit()
        return account

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Account))
        return result.scalar_one()


async def get_account_directory(db: AsyncSession = Depends(get_db_session)) -> AccountDirectory:
    """Dependency for getting the account directory bound to the request session."""
    return AccountDirectory(db)
