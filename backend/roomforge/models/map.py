"""
RoomForge - Map Models
Top-level 2-D canvases, their placed occupants and visit markers
"""
from sqlalchemy import Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from typing import Optional, List

from roomforge.database import Base, utcnow
from roomforge.models.element import Element
from roomforge.models.space import Space
from roomforge.models.user import User


class Map(Base):
    """
    Map model for a virtual room.

    A template has is_template=True and no access code. A regular map has
    is_template=False and exactly one access code. Clones keep template_id
    for provenance only.
    """
    __tablename__ = "maps"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    creator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    is_template: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Unique at the store level; NULL for templates
    access_code: Mapped[Optional[str]] = mapped_column(String(16), unique=True, nullable=True)

    template_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("maps.id", ondelete="SET NULL"),
        nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    creator: Mapped["User"] = relationship("User")
    map_elements: Mapped[List["MapElement"]] = relationship(
        "MapElement",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MapElement.id"
    )
    map_spaces: Mapped[List["MapSpace"]] = relationship(
        "MapSpace",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MapSpace.id"
    )

    def __repr__(self) -> str:
        return f"<Map(id={self.id}, name='{self.name}')>"

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}"


class MapElement(Base):
    """One element instance placed directly on a map."""
    __tablename__ = "map_elements"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    map_id: Mapped[int] = mapped_column(
        ForeignKey("maps.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    element_id: Mapped[int] = mapped_column(
        ForeignKey("elements.id", ondelete="CASCADE"),
        nullable=False
    )
    x: Mapped[int] = mapped_column(Integer, nullable=False)
    y: Mapped[int] = mapped_column(Integer, nullable=False)

    element: Mapped["Element"] = relationship("Element")


class MapSpace(Base):
    """A space placed on a map; occupies [x, x+width) x [y, y+height)."""
    __tablename__ = "map_spaces"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    map_id: Mapped[int] = mapped_column(
        ForeignKey("maps.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    space_id: Mapped[int] = mapped_column(
        ForeignKey("spaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    x: Mapped[int] = mapped_column(Integer, nullable=False)
    y: Mapped[int] = mapped_column(Integer, nullable=False)

    space: Mapped["Space"] = relationship("Space")


class UserMapVisit(Base):
    """Last-visit marker, one row per (user, map)."""
    __tablename__ = "user_map_visits"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    map_id: Mapped[int] = mapped_column(
        ForeignKey("maps.id", ondelete="CASCADE"),
        nullable=False
    )
    visited_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    map: Mapped["Map"] = relationship("Map")

    __table_args__ = (
        UniqueConstraint("user_id", "map_id", name="uq_user_map_visit"),
    )
