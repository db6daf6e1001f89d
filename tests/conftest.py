"""Shared pytest fixtures and configuration."""

import logging
from collections.abc import Callable, Iterator
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import pytest

from coursecatalog.catalog import (
    CallerContext,
    CatalogService,
    CourseCandidate,
    FixedClock,
    UserCandidate,
    UserRef,
)
from coursecatalog.store import CatalogStore, CourseCategory, CourseMode, User, UserKind

NOW = datetime(2026, 3, 2, 9, 30)
TODAY = NOW.date()


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


@pytest.fixture(autouse=True)
def reset_catalog_logger() -> Iterator[None]:
    """Drop handlers a test installed so files in removed temp dirs are released."""
    yield
    logger = logging.getLogger("coursecatalog")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class PlainHasher:
    """Reversible stand-in for the passlib hasher."""

    def hash(self, password: str) -> str:
        return f"plain${password}"

    def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"plain${password}"


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to NOW."""
    return FixedClock(NOW)


@pytest.fixture
def store() -> Iterator[CatalogStore]:
    """Create an in-memory CatalogStore."""
    s = CatalogStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def hasher() -> PlainHasher:
    return PlainHasher()


@pytest.fixture
def service(store: CatalogStore, hasher: PlainHasher, clock: FixedClock) -> CatalogService:
    """CatalogService over the in-memory store with a fixed clock."""
    return CatalogService(store=store, hasher=hasher, clock=clock)


@pytest.fixture
def make_user(service: CatalogService) -> Callable[..., User]:
    """Factory that persists a user through the upsert path."""

    def _make(
        email: str = "provider@example.com",
        kind: UserKind = UserKind.PROVIDER,
        name: str = "Provider",
    ) -> User:
        return service.create_or_update_user(
            UserCandidate(email=email, password_hash="plain$secret", name=name, kind=kind)
        )

    return _make


@pytest.fixture
def provider(make_user: Callable[..., User]) -> User:
    return make_user()


@pytest.fixture
def caller(provider: User) -> CallerContext:
    return CallerContext(user_id=provider.id)


@pytest.fixture
def make_course() -> Callable[..., CourseCandidate]:
    """Factory for valid course candidates; keyword overrides replace fields."""

    def _make(owner: User | None, /, **overrides: Any) -> CourseCandidate:
        fields: dict[str, Any] = {
            "owner": UserRef(external_id=owner.external_id) if owner is not None else None,
            "title": "Intro to X",
            "category": CourseCategory.TECHNOLOGY,
            "mode": CourseMode.ONLINE,
            "start_date": date(2026, 4, 1),
            "is_free": True,
        }
        fields.update(overrides)
        return CourseCandidate(**fields)

    return _make


@pytest.fixture
def paid() -> dict[str, Any]:
    """Overrides that turn a candidate into a paid course."""
    return {"is_free": False, "price_amount": Decimal("49.99")}
