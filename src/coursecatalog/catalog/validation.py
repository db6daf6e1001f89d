"""Cross-field invariant checks for course candidates."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from coursecatalog.catalog.exceptions import RequiredFieldError, ValidationError
from coursecatalog.store.models import CourseMode

if TYPE_CHECKING:
    from coursecatalog.catalog.models import CourseCandidate
    from coursecatalog.store.models import User

MAX_TITLE_LENGTH = 200
MAX_SCHEDULE_INFO_LENGTH = 100


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_owner(owner: User) -> None:
    """Only providers may own courses."""
    if not owner.is_provider:
        raise ValidationError("Only a PROVIDER may own courses", field="owner")


def validate_course(candidate: CourseCandidate) -> None:
    """Check a course candidate against the catalog's data invariants.

    Raises:
        RequiredFieldError: If title or start date is missing.
        ValidationError: On the first violated invariant.
    """
    if _blank(candidate.title):
        raise RequiredFieldError("Title is required", field="title")
    if len(candidate.title) > MAX_TITLE_LENGTH:
        raise ValidationError(
            f"Title must not exceed {MAX_TITLE_LENGTH} characters", field="title"
        )
    if candidate.start_date is None:
        raise RequiredFieldError("Start date is required", field="start_date")

    if candidate.mode == CourseMode.IN_PERSON and (
        _blank(candidate.address) or _blank(candidate.pin_code)
    ):
        raise ValidationError(
            "Address and PIN code are required for in-person courses", field="address"
        )

    if candidate.end_date is not None and candidate.end_date < candidate.start_date:
        raise ValidationError("End date must not be before start date", field="end_date")

    price = candidate.price_amount
    if price is not None and price < Decimal(0):
        raise ValidationError("Price must be non-negative", field="price_amount")
    if not candidate.is_free and price is None:
        raise ValidationError("Price amount is required for paid courses", field="price_amount")
    if candidate.is_free and price is not None and price != Decimal(0):
        raise ValidationError("Free courses cannot have a price", field="price_amount")

    if candidate.capacity is not None and candidate.capacity < 1:
        raise ValidationError("Capacity must be at least 1", field="capacity")

    if (
        candidate.schedule_info is not None
        and len(candidate.schedule_info) > MAX_SCHEDULE_INFO_LENGTH
    ):
        raise ValidationError(
            f"Schedule info must not exceed {MAX_SCHEDULE_INFO_LENGTH} characters",
            field="schedule_info",
        )
