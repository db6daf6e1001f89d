"""Exceptions for the catalog service layer."""


class CatalogError(Exception):
    """Base exception for catalog errors."""

    pass


class NotFoundError(CatalogError):
    """A looked-up record does not exist or is not visible to the caller."""

    pass


class CourseNotFoundError(NotFoundError):
    """Course does not exist, or the caller does not own it."""

    pass


class UserNotFoundError(NotFoundError):
    """User with given identifier does not exist."""

    pass


class OwnerNotFoundError(NotFoundError):
    """The owner referenced by a course candidate cannot be resolved."""

    pass


class ConflictError(CatalogError):
    """A uniqueness constraint was violated at write time."""

    pass


class ValidationError(CatalogError):
    """A candidate violates a data invariant."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class RequiredFieldError(ValidationError):
    """A required field was not supplied."""

    pass


class UnauthorizedError(CatalogError):
    """No valid caller identity where one is required."""

    pass
