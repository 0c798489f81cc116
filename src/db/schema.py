"""Database tables / schema"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import JSON, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBOpening(Base):
    __tablename__ = "openings"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(unique=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    variations: Mapped[list["DBVariation"]] = relationship(
        back_populates="opening",
        cascade="all, delete-orphan",
        order_by="DBVariation.created_at",
    )


class DBVariation(Base):
    __tablename__ = "variations"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    opening_id: Mapped[UUID] = mapped_column(ForeignKey("openings.id"))
    name: Mapped[str]
    moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    opening: Mapped[DBOpening] = relationship(back_populates="variations")
