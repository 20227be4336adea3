"""
RoomForge - User Model
Authentication accounts and role-based access control
"""
import enum
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlalchemy import Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomforge.database import Base, utcnow

if TYPE_CHECKING:
    from roomforge.models.element import Avatar


class UserRole(str, enum.Enum):
    """User role enumeration for RBAC."""
    ADMIN = "admin"
    USER = "user"


class User(Base):
    """
    User model for authentication and authorization.

    Roles:
    - admin: Can author elements, avatars and template maps
    - user: Can build spaces and maps, clone templates and join maps by code
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.USER, nullable=False)

    avatar_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("avatars.id", ondelete="SET NULL"),
        nullable=True
    )
    avatar: Mapped[Optional["Avatar"]] = relationship(
        "Avatar",
        foreign_keys=[avatar_id],
        lazy="selectin"
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<User(username='{self.username}', role='{self.role}')>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
