"""Unit tests for SearchQueryBuilder and course search."""

from datetime import date, timedelta

import pytest

from coursecatalog.catalog import (
    CallerContext,
    CatalogService,
    FixedClock,
    SearchFilters,
    SearchQueryBuilder,
    ValidationError,
)
from coursecatalog.store import (
    Course,
    CourseCategory,
    CourseMode,
    Pagination,
    SortDirection,
    User,
)

TODAY = date(2026, 3, 2)


@pytest.fixture
def builder() -> SearchQueryBuilder:
    return SearchQueryBuilder()


@pytest.fixture
def publish(service: CatalogService, provider: User, caller: CallerContext, make_course):
    """Create and publish a course owned by the provider."""

    def _publish(title: str, **overrides) -> Course:
        candidate = make_course(provider, title=title, **overrides)
        course = service.create_or_update_course(candidate, caller)
        return service.publish_course(course.external_id, caller)

    return _publish


def _titles(page) -> list[str]:
    return [c.title for c in page.items]


@pytest.mark.unit
class TestEffectiveCriteria:
    """Tests for pin precedence and defaults."""

    def test_filter_pin_wins_over_raw_pin(self, builder: SearchQueryBuilder) -> None:
        criteria = builder.effective_criteria("411", SearchFilters(pin_code="412"), TODAY)

        assert criteria.pin_code == "412"

    def test_blank_filter_pin_falls_back_to_raw_pin(self, builder: SearchQueryBuilder) -> None:
        criteria = builder.effective_criteria("411", SearchFilters(pin_code="   "), TODAY)

        assert criteria.pin_code == "411"

    def test_blank_pins_mean_no_pin_criterion(self, builder: SearchQueryBuilder) -> None:
        criteria = builder.effective_criteria("", SearchFilters(pin_code=""), TODAY)

        assert criteria.pin_code is None

    def test_pin_is_trimmed(self, builder: SearchQueryBuilder) -> None:
        criteria = builder.effective_criteria(" 411 ", None, TODAY)

        assert criteria.pin_code == "411"

    def test_start_from_defaults_to_today(self, builder: SearchQueryBuilder) -> None:
        assert builder.effective_criteria(None, None, TODAY).start_from == TODAY
        assert builder.effective_criteria(None, SearchFilters(), TODAY).start_from == TODAY

    def test_explicit_start_from_kept(self, builder: SearchQueryBuilder) -> None:
        earlier = TODAY - timedelta(days=30)

        criteria = builder.effective_criteria(None, SearchFilters(start_from=earlier), TODAY)

        assert criteria.start_from == earlier


@pytest.mark.unit
class TestPredicates:
    """Tests that absent criteria add no predicate at all."""

    def test_no_criteria_gives_only_base_predicates(self, builder: SearchQueryBuilder) -> None:
        criteria = builder.effective_criteria(None, None, TODAY)

        assert len(builder.predicates(criteria)) == 2

    def test_each_present_criterion_adds_one_predicate(
        self, builder: SearchQueryBuilder
    ) -> None:
        filters = SearchFilters(
            pin_code="411",
            category=CourseCategory.MUSIC,
            mode=CourseMode.ONLINE,
            is_free=False,
            start_to=TODAY + timedelta(days=10),
        )

        criteria = builder.effective_criteria(None, filters, TODAY)

        assert len(builder.predicates(criteria)) == 7

    def test_is_free_false_is_a_criterion(self, builder: SearchQueryBuilder) -> None:
        criteria = builder.effective_criteria(None, SearchFilters(is_free=False), TODAY)

        assert len(builder.predicates(criteria)) == 3


@pytest.mark.unit
class TestSearchCourses:
    """Tests for CatalogService.search_courses against the store."""

    def test_pin_prefix_match(self, service: CatalogService, publish) -> None:
        publish("Pune A", pin_code="411001")
        publish("Pune B", pin_code="411038")
        publish("Elsewhere", pin_code="412001")

        page = service.search_courses("411", None)

        assert _titles(page) == ["Pune A", "Pune B"]

    def test_filter_pin_overrides_raw_pin(self, service: CatalogService, publish) -> None:
        publish("Pune", pin_code="411001")
        publish("Elsewhere", pin_code="412001")

        page = service.search_courses("411", SearchFilters(pin_code="412"))

        assert _titles(page) == ["Elsewhere"]

    def test_no_pin_includes_courses_without_pin(
        self, service: CatalogService, publish
    ) -> None:
        publish("No Pin")
        publish("With Pin", pin_code="411001")

        page = service.search_courses(None, SearchFilters(pin_code="  "))

        assert sorted(_titles(page)) == ["No Pin", "With Pin"]

    def test_pin_wildcards_are_literal(self, service: CatalogService, publish) -> None:
        publish("Pune", pin_code="411001")

        assert service.search_courses("4_1", None).total == 0
        assert service.search_courses("%", None).total == 0

    def test_pin_prefix_is_case_sensitive(self, service: CatalogService, publish) -> None:
        """Lower-case input does not match an upper-case pin, and vice versa."""
        publish(
            "Studio",
            mode=CourseMode.IN_PERSON,
            address="5 Canal St",
            pin_code="AB12",
        )
        publish("Lower", pin_code="ab34")

        assert _titles(service.search_courses("ab", SearchFilters())) == ["Lower"]
        assert _titles(service.search_courses("AB", SearchFilters())) == ["Studio"]
        assert service.search_courses("Ab", SearchFilters()).total == 0

    def test_pin_with_wildcard_characters_matches_literally(
        self, service: CatalogService, publish
    ) -> None:
        publish("Odd Pin", pin_code="4_1%9")
        publish("Plain Pin", pin_code="41119")

        assert _titles(service.search_courses("4_1%", None)) == ["Odd Pin"]

    def test_unpublished_courses_excluded(
        self,
        service: CatalogService,
        provider: User,
        caller: CallerContext,
        make_course,
        publish,
    ) -> None:
        publish("Live")
        service.create_or_update_course(make_course(provider, title="Draft"), caller)

        assert _titles(service.search_courses(None, None)) == ["Live"]

    def test_unpublish_removes_from_results(
        self, service: CatalogService, caller: CallerContext, publish
    ) -> None:
        course = publish("Live")

        service.unpublish_course(course.external_id, caller)

        assert service.search_courses(None, None).total == 0

    def test_past_courses_excluded_by_default(self, service: CatalogService, publish) -> None:
        publish("Yesterday", start_date=TODAY - timedelta(days=1))
        publish("Today", start_date=TODAY)

        assert _titles(service.search_courses(None, None)) == ["Today"]

    def test_default_start_from_follows_clock(
        self, service: CatalogService, publish, clock: FixedClock
    ) -> None:
        publish("Soon", start_date=TODAY + timedelta(days=3))

        clock.set(clock.now() + timedelta(days=5))

        assert service.search_courses(None, None).total == 0

    def test_explicit_start_from_includes_past(self, service: CatalogService, publish) -> None:
        publish("Last Month", start_date=TODAY - timedelta(days=30))

        page = service.search_courses(
            None, SearchFilters(start_from=TODAY - timedelta(days=31))
        )

        assert _titles(page) == ["Last Month"]

    def test_start_to_is_inclusive(self, service: CatalogService, publish) -> None:
        publish("Inside", start_date=TODAY + timedelta(days=7))
        publish("Outside", start_date=TODAY + timedelta(days=8))

        page = service.search_courses(
            None, SearchFilters(start_to=TODAY + timedelta(days=7))
        )

        assert _titles(page) == ["Inside"]

    def test_category_mode_and_price_filters(
        self, service: CatalogService, publish, paid
    ) -> None:
        publish("Guitar", category=CourseCategory.MUSIC)
        publish("Paid Guitar", category=CourseCategory.MUSIC, **paid)
        publish(
            "Studio Guitar",
            category=CourseCategory.MUSIC,
            mode=CourseMode.IN_PERSON,
            address="1 Main St",
            pin_code="411001",
        )
        publish("Yoga", category=CourseCategory.FITNESS)

        music = service.search_courses(None, SearchFilters(category=CourseCategory.MUSIC))
        paid_only = service.search_courses(None, SearchFilters(is_free=False))
        in_person = service.search_courses(None, SearchFilters(mode=CourseMode.IN_PERSON))

        assert sorted(_titles(music)) == ["Guitar", "Paid Guitar", "Studio Guitar"]
        assert _titles(paid_only) == ["Paid Guitar"]
        assert _titles(in_person) == ["Studio Guitar"]

    def test_ordered_by_start_date_then_creation(
        self, service: CatalogService, publish
    ) -> None:
        publish("Late", start_date=TODAY + timedelta(days=9))
        publish("Early B", start_date=TODAY + timedelta(days=1))
        publish("Early A", start_date=TODAY + timedelta(days=1))

        page = service.search_courses(None, None)

        assert _titles(page) == ["Early B", "Early A", "Late"]

    def test_descending_direction(self, service: CatalogService, publish) -> None:
        publish("First", start_date=TODAY + timedelta(days=1))
        publish("Second", start_date=TODAY + timedelta(days=2))

        page = service.search_courses(
            None, None, Pagination(direction=SortDirection.DESC)
        )

        assert _titles(page) == ["Second", "First"]


@pytest.mark.unit
class TestSearchPagination:
    """Tests for paging search results."""

    def test_page_slices_results_and_reports_total(
        self, service: CatalogService, publish
    ) -> None:
        for i in range(5):
            publish(f"Course {i}", start_date=TODAY + timedelta(days=i))

        page = service.search_courses(None, None, Pagination(page=1, size=2))

        assert _titles(page) == ["Course 2", "Course 3"]
        assert page.total == 5
        assert page.page == 1
        assert page.size == 2

    def test_page_past_end_is_empty(self, service: CatalogService, publish) -> None:
        publish("Only")

        page = service.search_courses(None, None, Pagination(page=3, size=10))

        assert page.items == []
        assert page.total == 1

    def test_oversized_page_rejected(self, service: CatalogService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            service.search_courses(None, None, Pagination(size=service.max_page_size + 1))

        assert exc_info.value.field == "size"

    def test_default_page_size_used_when_omitted(self, service: CatalogService) -> None:
        page = service.search_courses(None, None)

        assert page.size == service.default_page_size
        assert page.page == 0
