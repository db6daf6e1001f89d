"""SQLAlchemy models for the catalog Store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from decimal import Decimal  # noqa: TC003 - used at runtime for SQLAlchemy
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


class UserKind(StrEnum):
    """Account kind enum."""

    PROVIDER = "PROVIDER"
    LEARNER = "LEARNER"


class CourseMode(StrEnum):
    """How a course is delivered."""

    ONLINE = "ONLINE"
    IN_PERSON = "IN_PERSON"
    HYBRID = "HYBRID"


class CourseCategory(StrEnum):
    """Course category enum."""

    TECHNOLOGY = "TECHNOLOGY"
    BUSINESS = "BUSINESS"
    DESIGN = "DESIGN"
    LANGUAGE = "LANGUAGE"
    MUSIC = "MUSIC"
    ARTS = "ARTS"
    FITNESS = "FITNESS"
    ACADEMIC = "ACADEMIC"
    OTHER = "OTHER"


def generate_external_id() -> str:
    """Generate a new external identifier."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class User(Base):
    """User model - a provider or learner account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __init__(
        self,
        email: str,
        password_hash: str,
        name: str,
        kind: str,
        created_at: datetime,
        updated_at: datetime,
        id: int | None = None,
        external_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if id is not None:
            self.id = id
        self.external_id = external_id if external_id is not None else generate_external_id()
        self.email = email
        self.password_hash = password_hash
        self.name = name
        self.kind = kind
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def user_kind(self) -> UserKind:
        """Get kind as UserKind enum."""
        return UserKind(self.kind)

    @property
    def is_provider(self) -> bool:
        return self.kind == UserKind.PROVIDER.value

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, external_id={self.external_id!r}, kind={self.kind!r})>"


class Course(Base):
    """Course model - a course offered by a provider."""

    __tablename__ = "courses"
    __table_args__ = (UniqueConstraint("owner_id", "title", name="uq_course_owner_title"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    mode: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    pin_code: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    schedule_info: Mapped[str | None] = mapped_column(String(100), nullable=True)
    price_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __init__(
        self,
        owner_id: int,
        title: str,
        category: str,
        mode: str,
        start_date: date,
        created_at: datetime,
        updated_at: datetime,
        id: int | None = None,
        external_id: str | None = None,
        description: str | None = None,
        address: str | None = None,
        pin_code: str | None = None,
        end_date: date | None = None,
        schedule_info: str | None = None,
        price_amount: Decimal | None = None,
        is_free: bool = False,
        capacity: int | None = None,
        is_published: bool | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if id is not None:
            self.id = id
        self.external_id = external_id if external_id is not None else generate_external_id()
        self.owner_id = owner_id
        self.title = title
        self.description = description
        self.category = category
        self.mode = mode
        self.address = address
        self.pin_code = pin_code
        self.start_date = start_date
        self.end_date = end_date
        self.schedule_info = schedule_info
        self.price_amount = price_amount
        self.is_free = is_free
        self.capacity = capacity
        self.is_published = is_published if is_published is not None else False
        self.created_at = created_at
        self.updated_at = updated_at

    def __repr__(self) -> str:
        return (
            f"<Course(id={self.id!r}, external_id={self.external_id!r}, "
            f"owner_id={self.owner_id!r}, title={self.title!r})>"
        )


class SortDirection(StrEnum):
    """Sort direction for paginated queries."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Pagination:
    """Page request. Pages are 0-based."""

    page: int = 0
    size: int = 20
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError(f"page must be >= 0, got {self.page}")
        if self.size < 1:
            raise ValueError(f"size must be >= 1, got {self.size}")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class CoursePage:
    """One page of course search results."""

    items: list[Course] = field(default_factory=list)
    total: int = 0
    page: int = 0
    size: int = 20
