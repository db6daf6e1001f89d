"""Catalog package - upsert reconciliation, search composition and orchestration."""

from coursecatalog.catalog.clock import Clock, FixedClock, SystemClock
from coursecatalog.catalog.exceptions import (
    CatalogError,
    ConflictError,
    CourseNotFoundError,
    NotFoundError,
    OwnerNotFoundError,
    RequiredFieldError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationError,
)
from coursecatalog.catalog.models import (
    CallerContext,
    CourseCandidate,
    SearchFilters,
    UserCandidate,
    UserRef,
)
from coursecatalog.catalog.resolver import (
    CourseResolver,
    EntityResolver,
    Resolution,
    UserResolver,
)
from coursecatalog.catalog.search import SearchQueryBuilder
from coursecatalog.catalog.service import CatalogService, PasswordHasher

__all__ = [
    "CallerContext",
    "CatalogError",
    "CatalogService",
    "Clock",
    "ConflictError",
    "CourseCandidate",
    "CourseNotFoundError",
    "CourseResolver",
    "EntityResolver",
    "FixedClock",
    "NotFoundError",
    "OwnerNotFoundError",
    "PasswordHasher",
    "RequiredFieldError",
    "Resolution",
    "SearchFilters",
    "SearchQueryBuilder",
    "SystemClock",
    "UnauthorizedError",
    "UserCandidate",
    "UserNotFoundError",
    "UserRef",
    "UserResolver",
    "ValidationError",
]
