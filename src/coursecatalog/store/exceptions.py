"""Custom exceptions for the catalog Store."""


class StoreError(Exception):
    """Base exception for Store errors."""


class UniqueConstraintError(StoreError):
    """A write violated a uniqueness constraint (email, external id, or owner+title)."""

    def __init__(self, message: str, constraint: str | None = None) -> None:
        super().__init__(message)
        self.constraint = constraint
