"""Store - Persistent storage for users and courses."""

from coursecatalog.store.exceptions import StoreError, UniqueConstraintError
from coursecatalog.store.models import (
    Course,
    CourseCategory,
    CourseMode,
    CoursePage,
    Pagination,
    SortDirection,
    User,
    UserKind,
)
from coursecatalog.store.store import CatalogStore

__all__ = [
    "CatalogStore",
    "Course",
    "CourseCategory",
    "CourseMode",
    "CoursePage",
    "Pagination",
    "SortDirection",
    "StoreError",
    "UniqueConstraintError",
    "User",
    "UserKind",
]
