"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends, Header

from coursecatalog.catalog import CallerContext, CatalogService, UnauthorizedError
from coursecatalog.config import Settings
from coursecatalog.security import PasslibHasher
from coursecatalog.store import CatalogStore

CALLER_HEADER = "X-Caller-Id"

# Global service instance (initialized on app startup)
_service: CatalogService | None = None


def init_service(settings: Settings) -> CatalogService:
    """Initialize the global CatalogService and its Store."""
    global _service  # noqa: PLW0603
    if _service is not None:
        _service.store.close()
    store = CatalogStore(settings.db_path)
    _service = CatalogService(
        store=store,
        hasher=PasslibHasher(),
        max_page_size=settings.max_page_size,
        default_page_size=settings.default_page_size,
    )
    return _service


def close_service() -> None:
    """Close the global CatalogService's Store."""
    global _service  # noqa: PLW0603
    if _service is not None:
        _service.store.close()
        _service = None


def get_service() -> Generator[CatalogService, None, None]:
    """Dependency that provides the CatalogService instance."""
    if _service is None:
        raise RuntimeError("CatalogService not initialized. Call init_service() first.")
    yield _service


# Type alias for dependency injection
ServiceDep = Annotated[CatalogService, Depends(get_service)]


def get_caller(
    service: ServiceDep,
    x_caller_id: Annotated[str | None, Header(alias=CALLER_HEADER)] = None,
) -> CallerContext:
    """Resolve the caller from the identity header set by the auth gateway.

    The header carries the user's external id.

    Raises:
        UnauthorizedError: If the header is missing or names no user.
    """
    if x_caller_id is None or not x_caller_id.strip():
        raise UnauthorizedError(f"Missing {CALLER_HEADER} header")
    user = service.store.find_user_by_external_id(x_caller_id.strip())
    if user is None:
        raise UnauthorizedError("Unknown caller")
    return CallerContext(user_id=user.id)


CallerDep = Annotated[CallerContext, Depends(get_caller)]
