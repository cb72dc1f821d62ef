"""
Account Service - User lookup, registration and login.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ValidationFailedError,
)
from storefront.core.security import hash_password, verify_password
from storefront.models.user import User, UserRole


class UserService:
    """
    Service for user accounts.

    Usage:
        users = UserService(db_session)
        user = await users.get_user(user_id)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize user service with database session."""
        self.db = db

    async def find_by_id(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_user(self, user_id: int) -> User:
        """Get user by ID or raise NotFoundError."""
        user = await self.find_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found with id: {user_id}")
        return user

    async def get_by_username(self, username: str) -> User | None:
        query = select(User).where(User.username == username)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def exists_by_username(self, username: str) -> bool:
        result = await self.db.execute(select(exists().where(User.username == username)))
        return bool(result.scalar())

    async def exists_by_email(self, email: str) -> bool:
        result = await self.db.execute(select(exists().where(User.email == email)))
        return bool(result.scalar())

    async def register_user(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str | None = None,
        is_admin: bool = False,
    ) -> User:
        """
        Register a new account.

        Args:
            username: Unique login name
            email: Unique email address
            password: Plain text password, stored hashed
            full_name: Display name
            is_admin: Grant the admin role

        Returns:
            Created user

        Raises:
            ValidationFailedError: username or email already taken
        """
        if await self.exists_by_username(username):
            raise ValidationFailedError("Username is already taken")
        if await self.exists_by_email(email):
            raise ValidationFailedError("Email is already in use")

        user = User(
            username=username,
            email=email,
            hashed_password=hash_password(password),
            full_name=full_name,
            role=UserRole.ADMIN if is_admin else UserRole.USER,
        )
        self.db.add(user)
        await self.db.flush()

        logger.info(f"Registered {user.role.value.lower()} account {username} (id={user.id})")
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """Check credentials and record the login time."""
        user = await self.get_by_username(username)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for {username}")
            raise AuthenticationError("Invalid username or password")

        user.last_login = datetime.utcnow()
        await self.db.flush()
        return user
