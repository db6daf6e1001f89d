"""Data models for the catalog service layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date  # noqa: TC003
from decimal import Decimal  # noqa: TC003

from coursecatalog.store.models import CourseCategory, CourseMode, UserKind


@dataclass(frozen=True)
class CallerContext:
    """Authenticated caller, identified by the user's surrogate id."""

    user_id: int


@dataclass(frozen=True)
class UserRef:
    """Reference to a user by external identifier and/or surrogate id."""

    external_id: str | None = None
    id: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.external_id is None and self.id is None


@dataclass
class UserCandidate:
    """Incoming user record, possibly referring to an existing user.

    Attributes:
        email: Natural key of the user.
        password_hash: Credential hash, never the plain password.
        name: Display name.
        kind: PROVIDER or LEARNER.
        external_id: External identifier, if the caller knows it.
        id: Surrogate id, if the caller knows it.
    """

    email: str
    password_hash: str
    name: str
    kind: UserKind
    external_id: str | None = None
    id: int | None = None


@dataclass
class CourseCandidate:
    """Incoming course record, possibly referring to an existing course.

    ``is_published`` is only honoured for new records; merges never touch it.
    """

    owner: UserRef | None
    title: str
    category: CourseCategory
    mode: CourseMode
    start_date: date
    description: str | None = None
    address: str | None = None
    pin_code: str | None = None
    end_date: date | None = None
    schedule_info: str | None = None
    price_amount: Decimal | None = None
    is_free: bool = False
    capacity: int | None = None
    is_published: bool | None = None
    external_id: str | None = None
    id: int | None = None


@dataclass
class SearchFilters:
    """Optional course search criteria. ``None`` means "do not filter"."""

    pin_code: str | None = None
    category: CourseCategory | None = None
    mode: CourseMode | None = None
    is_free: bool | None = None
    start_from: date | None = None
    start_to: date | None = None
