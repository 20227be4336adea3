"""
RoomForge - Space Models
Reusable, privately owned sub-layouts of elements
"""
from typing import Optional, List
from sqlalchemy import Integer, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomforge.database import Base
from roomforge.models.element import Element


class Space(Base):
    """
    A reusable sub-layout. Owned by one user until placed onto a map; placing
    it links the same row, cloning a template copies it.
    """
    __tablename__ = "spaces"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    elements: Mapped[List["SpaceElement"]] = relationship(
        "SpaceElement",
        back_populates="space",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SpaceElement.id"
    )

    def __repr__(self) -> str:
        return f"<Space(id={self.id}, name='{self.name}')>"


class SpaceElement(Base):
    """One element instance inside a space at an integer grid position."""
    __tablename__ = "space_elements"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    space_id: Mapped[int] = mapped_column(
        ForeignKey("spaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    element_id: Mapped[int] = mapped_column(
        ForeignKey("elements.id", ondelete="CASCADE"),
        nullable=False
    )
    x: Mapped[int] = mapped_column(Integer, nullable=False)
    y: Mapped[int] = mapped_column(Integer, nullable=False)

    space: Mapped["Space"] = relationship("Space", back_populates="elements")
    element: Mapped["Element"] = relationship("Element")

    def __repr__(self) -> str:
        return f"<SpaceElement(space={self.space_id}, element={self.element_id}, at=({self.x}, {self.y}))>"
