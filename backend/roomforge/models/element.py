"""
RoomForge - Element and Avatar Models
Admin-authored catalog of placeable sprites and player avatars
"""
from typing import Optional
from sqlalchemy import Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from roomforge.database import Base


class Element(Base):
    """
    A single placeable sprite/object with fixed grid dimensions.

    Attributes:
        width, height: Footprint in grid units (always positive)
        image_url: Sprite image reference
        is_static: Whether users collide with it when walking; carried as
            metadata only, the placement validator ignores it
        creator_id: Admin who authored the element
    """
    __tablename__ = "elements"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    is_static: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    creator_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    def __repr__(self) -> str:
        return f"<Element(id={self.id}, size={self.width}x{self.height})>"


class Avatar(Base):
    """Selectable player avatar."""
    __tablename__ = "avatars"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)

    # Plain column: users.avatar_id already points at this table
    creator_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Avatar(id={self.id}, name='{self.name}')>"
