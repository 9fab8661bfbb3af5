"""SQLAlchemy ORM models backing the persistent state."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


class Client(Base):
    """An account that owns viewing profiles."""

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )

    profiles: Mapped[list["Profile"]] = relationship(
        back_populates="client", cascade="all, delete-orphan"
    )


class Profile(Base):
    """A named profile holding a movie wishlist."""

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), unique=True)
    client_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("clients.id", ondelete="CASCADE")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )

    client: Mapped[Client] = relationship(back_populates="profiles")
    movies: Mapped[list["Movie"]] = relationship(
        back_populates="profile", cascade="all, delete-orphan"
    )


class Movie(Base):
    """A title saved on a profile's wishlist."""

    __tablename__ = "movies"
    __table_args__ = (
        UniqueConstraint("profile_id", "title", name="uq_movie_profile_title"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255))
    watchmode_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )

    profile: Mapped[Profile] = relationship(back_populates="movies")
