"""Pydantic models for REST API."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from coursecatalog.catalog import CourseCandidate, UserRef
from coursecatalog.store import CourseCategory, CourseMode, UserKind

T = TypeVar("T")

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# User models


class UserCreate(BaseModel):
    """Request model for registering a user."""

    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    kind: UserKind


class UserLogin(BaseModel):
    """Request model for checking credentials."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserUpdate(BaseModel):
    """Request model for updating the caller's profile (partial update)."""

    email: str | None = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    name: str | None = Field(default=None, min_length=1, max_length=255)


class UserResponse(BaseModel):
    """Response model for a user. ``id`` is the external identifier."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(validation_alias=AliasChoices("external_id", "id"))
    email: str
    name: str
    kind: UserKind
    created_at: datetime
    updated_at: datetime


def user_to_response(user: Any) -> UserResponse:
    """Convert a User model to UserResponse."""
    return UserResponse.model_validate(user)


# Course models


class CourseRequest(BaseModel):
    """Request model for creating or replacing a course."""

    id: str | None = Field(default=None, max_length=36)
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    category: CourseCategory
    mode: CourseMode
    address: str | None = Field(default=None, max_length=500)
    pin_code: str | None = Field(default=None, max_length=20)
    start_date: date
    end_date: date | None = None
    schedule_info: str | None = Field(default=None, max_length=100)
    price_amount: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    is_free: bool = False
    capacity: int | None = Field(default=None, ge=1)

    def to_candidate(self, owner_external_id: str) -> CourseCandidate:
        """Build a course candidate owned by the given user."""
        return CourseCandidate(
            owner=UserRef(external_id=owner_external_id),
            title=self.title,
            description=self.description,
            category=self.category,
            mode=self.mode,
            address=self.address,
            pin_code=self.pin_code,
            start_date=self.start_date,
            end_date=self.end_date,
            schedule_info=self.schedule_info,
            price_amount=self.price_amount,
            is_free=self.is_free,
            capacity=self.capacity,
            external_id=self.id,
        )


class CourseResponse(BaseModel):
    """Response model for a course. ``id`` is the external identifier."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(validation_alias=AliasChoices("external_id", "id"))
    title: str
    description: str | None
    category: CourseCategory
    mode: CourseMode
    address: str | None
    pin_code: str | None
    start_date: date
    end_date: date | None
    schedule_info: str | None
    price_amount: Decimal | None
    is_free: bool
    capacity: int | None
    is_published: bool
    created_at: datetime
    updated_at: datetime


def course_to_response(course: Any) -> CourseResponse:
    """Convert a Course model to CourseResponse."""
    return CourseResponse.model_validate(course)


class CoursePageResponse(BaseModel):
    """Response model for one page of search results."""

    items: list[CourseResponse]
    total: int
    page: int
    size: int


def course_page_to_response(page: Any) -> CoursePageResponse:
    """Convert a CoursePage to CoursePageResponse."""
    return CoursePageResponse(
        items=[course_to_response(c) for c in page.items],
        total=page.total,
        page=page.page,
        size=page.size,
    )
