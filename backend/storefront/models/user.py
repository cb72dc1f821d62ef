"""
Customer and admin accounts.
"""

from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.core.database import Base


class UserRole(str, PyEnum):
    """Account role."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """Account that places orders, asks questions or administers the shop."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))

    # Display
    full_name: Mapped[str | None] = mapped_column(String(255))

    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.USER)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    last_login: Mapped[datetime | None] = mapped_column(DateTime)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def roles(self) -> list[str]:
        """Roles as exposed over the API; admins also hold the user role."""
        if self.is_admin:
            return [UserRole.ADMIN.value, UserRole.USER.value]
        return [UserRole.USER.value]

    def __repr__(self) -> str:
        return f"<User {self.username}>"
