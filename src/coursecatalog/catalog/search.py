"""SearchQueryBuilder - composes optional course filters into one query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from coursecatalog.store.models import Course, SortDirection

if TYPE_CHECKING:
    from datetime import date

    from sqlalchemy import ColumnElement, Select

    from coursecatalog.catalog.models import SearchFilters


def _present(value: str | None) -> str | None:
    """Return the stripped value, or None if it is missing or blank."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(frozen=True)
class EffectiveCriteria:
    """Search criteria after precedence and defaults have been applied."""

    pin_code: str | None
    start_from: date
    start_to: date | None
    category: str | None
    mode: str | None
    is_free: bool | None


class SearchQueryBuilder:
    """Builds the published-course search query.

    Absent criteria are left out of the WHERE clause entirely rather than
    compared against NULL.
    """

    def effective_criteria(
        self,
        pin_code: str | None,
        filters: SearchFilters | None,
        today: date,
    ) -> EffectiveCriteria:
        """Apply pin-code precedence and the start-date default.

        The filter's pin code wins over the raw parameter; blanks count as absent.
        """
        filter_pin = _present(filters.pin_code) if filters is not None else None
        effective_pin = filter_pin if filter_pin is not None else _present(pin_code)

        if filters is None:
            return EffectiveCriteria(
                pin_code=effective_pin,
                start_from=today,
                start_to=None,
                category=None,
                mode=None,
                is_free=None,
            )

        return EffectiveCriteria(
            pin_code=effective_pin,
            start_from=filters.start_from if filters.start_from is not None else today,
            start_to=filters.start_to,
            category=filters.category.value if filters.category is not None else None,
            mode=filters.mode.value if filters.mode is not None else None,
            is_free=filters.is_free,
        )

    def predicates(self, criteria: EffectiveCriteria) -> list[ColumnElement[bool]]:
        """Translate effective criteria into AND-ed predicates."""
        clauses: list[ColumnElement[bool]] = [
            Course.is_published.is_(True),
            Course.start_date >= criteria.start_from,
        ]

        if criteria.pin_code is not None:
            pin = criteria.pin_code
            # Exact, case-sensitive prefix; % and _ have no special meaning
            clauses.append(func.substr(Course.pin_code, 1, len(pin)) == pin)
        if criteria.start_to is not None:
            clauses.append(Course.start_date <= criteria.start_to)
        if criteria.category is not None:
            clauses.append(Course.category == criteria.category)
        if criteria.mode is not None:
            clauses.append(Course.mode == criteria.mode)
        if criteria.is_free is not None:
            clauses.append(Course.is_free.is_(criteria.is_free))

        return clauses

    def build(
        self,
        pin_code: str | None,
        filters: SearchFilters | None,
        today: date,
        direction: SortDirection = SortDirection.ASC,
    ) -> Select[tuple[Course]]:
        """Compose the full search query.

        Args:
            pin_code: Raw pin code parameter (lower precedence than the filter's).
            filters: Optional filter set.
            today: Default lower bound for start dates.
            direction: Sort direction for start_date. Ties are always broken by
                creation order (ascending id).

        Returns:
            A SELECT over courses, filtered and ordered, without pagination.
        """
        criteria = self.effective_criteria(pin_code, filters, today)
        start_order = (
            Course.start_date.desc() if direction == SortDirection.DESC else Course.start_date.asc()
        )
        return (
            select(Course)
            .where(*self.predicates(criteria))
            .order_by(start_order, Course.id.asc())
        )
