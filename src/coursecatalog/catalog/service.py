"""CatalogService - entry point for course and user operations."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Protocol

from coursecatalog.catalog.clock import Clock, SystemClock
from coursecatalog.catalog.exceptions import (
    ConflictError,
    CourseNotFoundError,
    OwnerNotFoundError,
    UnauthorizedError,
    UserNotFoundError,
    ValidationError,
)
from coursecatalog.catalog.models import UserCandidate
from coursecatalog.catalog.resolver import CourseResolver, UserResolver
from coursecatalog.catalog.search import SearchQueryBuilder
from coursecatalog.catalog.validation import validate_course, validate_owner
from coursecatalog.logging import sanitize_for_log
from coursecatalog.store import Pagination, UniqueConstraintError, UserKind

if TYPE_CHECKING:
    from coursecatalog.catalog.models import CallerContext, CourseCandidate, SearchFilters
    from coursecatalog.store import CatalogStore, Course, CoursePage, User

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20


class PasswordHasher(Protocol):
    """Interface for credential hashing."""

    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...


class CatalogService:
    """Orchestrates resolution, validation, ownership and search.

    Caller identity is always passed in explicitly as a CallerContext.
    Another owner's course is reported exactly like a missing one.
    """

    def __init__(
        self,
        store: CatalogStore,
        hasher: PasswordHasher,
        clock: Clock | None = None,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize the CatalogService.

        Args:
            store: Store used for all lookups and writes.
            hasher: Password hasher for registration and login.
            clock: Time source; defaults to the UTC system clock.
            max_page_size: Largest page size search accepts.
            default_page_size: Page size used when a search gives none.
        """
        self.store = store
        self.hasher = hasher
        self.clock: Clock = clock if clock is not None else SystemClock()
        self.max_page_size = max_page_size
        self.default_page_size = default_page_size
        self.course_resolver = CourseResolver(store, self.clock)
        self.user_resolver = UserResolver(store, self.clock)
        self.query_builder = SearchQueryBuilder()

    # --- Helpers ---

    def _require_caller(self, caller: CallerContext | None) -> User:
        if caller is None:
            raise UnauthorizedError("Authentication required")
        user = self.store.find_user_by_id(caller.user_id)
        if user is None:
            raise UnauthorizedError("Caller does not exist")
        return user

    def _owned_course(self, external_id: str, caller: CallerContext | None) -> Course:
        user = self._require_caller(caller)
        course = self.store.find_course_by_external_id(external_id)
        if course is None or course.owner_id != user.id:
            raise CourseNotFoundError("Course not found")
        return course

    def _save_course(self, course: Course) -> Course:
        try:
            return self.store.save_course(course)
        except UniqueConstraintError as e:
            raise ConflictError(
                f"Course '{course.title}' already exists for this owner"
            ) from e

    def _save_user(self, user: User) -> User:
        try:
            return self.store.save_user(user)
        except UniqueConstraintError as e:
            raise ConflictError(
                f"User with email '{sanitize_for_log(user.email)}' already exists"
            ) from e

    # --- Course Operations ---

    def create_or_update_course(
        self, candidate: CourseCandidate, caller: CallerContext | None
    ) -> Course:
        """Upsert a course owned by the caller.

        Args:
            candidate: Incoming course. Its owner must refer to the caller.
            caller: Authenticated caller.

        Returns:
            The saved course.

        Raises:
            UnauthorizedError: If there is no valid caller.
            RequiredFieldError: If the owner or another required field is missing.
            OwnerNotFoundError: If the owner cannot be resolved or is not the caller.
            ValidationError: If the owner is not a provider or an invariant fails.
            CourseNotFoundError: If the candidate matches another owner's course.
            ConflictError: If a concurrent write took the same (owner, title).
        """
        caller_user = self._require_caller(caller)
        validate_course(candidate)

        owner = self.course_resolver.resolve_owner(candidate.owner)
        if owner.id != caller_user.id:
            raise OwnerNotFoundError("Owner not found")
        validate_owner(owner)

        def ensure_owned(existing: Course) -> None:
            if existing.owner_id != caller_user.id:
                raise CourseNotFoundError("Course not found")

        resolution = self.course_resolver.resolve(candidate, owner=owner, guard=ensure_owned)
        saved = self._save_course(resolution.record)

        logger.info(
            "%s course %s (owner=%s, matched_by=%s)",
            "Created" if resolution.created else "Updated",
            saved.external_id,
            owner.external_id,
            resolution.matched_by,
        )
        return saved

    def update_course(
        self, external_id: str, candidate: CourseCandidate, caller: CallerContext | None
    ) -> Course:
        """Update an existing course the caller owns.

        Raises:
            CourseNotFoundError: If the course is missing or owned by someone else.
        """
        self._owned_course(external_id, caller)
        targeted = replace(candidate, external_id=external_id, id=None)
        return self.create_or_update_course(targeted, caller)

    def get_course(self, external_id: str, caller: CallerContext | None) -> Course:
        """Get a course the caller owns."""
        return self._owned_course(external_id, caller)

    def delete_course(self, external_id: str, caller: CallerContext | None) -> None:
        """Delete a course the caller owns."""
        course = self._owned_course(external_id, caller)
        self.store.delete_course(course.id)
        logger.info("Deleted course %s", external_id)

    def publish_course(self, external_id: str, caller: CallerContext | None) -> Course:
        """Mark a course as published. Publishing a published course is a no-op save."""
        return self._set_published(external_id, caller, published=True)

    def unpublish_course(self, external_id: str, caller: CallerContext | None) -> Course:
        """Mark a course as unpublished. Unpublishing twice is a no-op save."""
        return self._set_published(external_id, caller, published=False)

    def _set_published(
        self, external_id: str, caller: CallerContext | None, published: bool
    ) -> Course:
        course = self._owned_course(external_id, caller)
        course.is_published = published
        course.updated_at = self.clock.now()
        saved = self._save_course(course)
        logger.info("Course %s published=%s", external_id, published)
        return saved

    def list_my_courses(self, caller: CallerContext | None) -> list[Course]:
        """List the caller's courses in creation order."""
        user = self._require_caller(caller)
        return self.store.list_courses_by_owner(user.id)

    def search_courses(
        self,
        pin_code: str | None,
        filters: SearchFilters | None,
        pagination: Pagination | None = None,
    ) -> CoursePage:
        """Search published courses.

        Args:
            pin_code: Raw pin code; the filter's pin code takes precedence.
            filters: Optional criteria.
            pagination: Page request; first page of the default size if omitted.

        Raises:
            ValidationError: If the page size exceeds the configured maximum.
        """
        if pagination is None:
            pagination = Pagination(size=self.default_page_size)
        if pagination.size > self.max_page_size:
            raise ValidationError(
                f"Page size must not exceed {self.max_page_size}", field="size"
            )

        today = self.clock.now().date()
        stmt = self.query_builder.build(pin_code, filters, today, pagination.direction)
        page = self.store.search_courses(stmt, pagination)
        logger.debug("Course search returned %d of %d", len(page.items), page.total)
        return page

    # --- User Operations ---

    def create_or_update_user(self, candidate: UserCandidate) -> User:
        """Upsert a user, converging on external id, surrogate id, then email.

        Args:
            candidate: Incoming user record.

        Returns:
            The saved user.

        Raises:
            ValidationError: If a provider who still owns courses would stop
                being a provider.
            ConflictError: If the email is taken by a concurrent or different user.
        """

        def keep_course_owners_providers(existing: User) -> None:
            if (
                existing.is_provider
                and candidate.kind != UserKind.PROVIDER
                and self.store.count_courses_by_owner(existing.id) > 0
            ):
                raise ValidationError(
                    "A provider who owns courses cannot change kind", field="kind"
                )

        resolution = self.user_resolver.resolve(candidate, guard=keep_course_owners_providers)
        saved = self._save_user(resolution.record)
        logger.info(
            "%s user %s (%s)",
            "Created" if resolution.created else "Updated",
            saved.external_id,
            sanitize_for_log(saved.email),
        )
        return saved

    def get_user(self, identifier: str | int) -> User:
        """Get a user by surrogate id (int), email, or external id.

        Raises:
            UserNotFoundError: If no user matches.
        """
        if isinstance(identifier, int):
            user = self.store.find_user_by_id(identifier)
        elif "@" in identifier:
            user = self.store.find_user_by_email(identifier)
        else:
            user = self.store.find_user_by_external_id(identifier)
        if user is None:
            raise UserNotFoundError(f"User '{sanitize_for_log(str(identifier))}' not found")
        return user

    def get_user_by_external_id(self, external_id: str) -> User:
        """Get a user by external id only. Emails are never looked up here.

        Raises:
            UserNotFoundError: If no user has this external id.
        """
        user = self.store.find_user_by_external_id(external_id)
        if user is None:
            raise UserNotFoundError(f"User '{sanitize_for_log(external_id)}' not found")
        return user

    def register_user(self, email: str, password: str, name: str, kind: UserKind) -> User:
        """Create a new account. Unlike the upsert, an existing email is rejected.

        The record is always inserted, never merged, so a signup that races
        another one for the same email fails on the unique constraint.

        Args:
            email: Login and natural key.
            password: Plain password; only its hash is stored.
            name: Display name.
            kind: PROVIDER or LEARNER.

        Returns:
            The new user.

        Raises:
            ConflictError: If the email is already registered.
        """
        if self.store.find_user_by_email(email) is not None:
            raise ConflictError("Email already registered")
        candidate = UserCandidate(
            email=email,
            password_hash=self.hasher.hash(password),
            name=name,
            kind=kind,
        )
        record = self.user_resolver.adapter.create(candidate, self.clock.now())
        saved = self._save_user(record)
        logger.info("Registered user %s (%s)", saved.external_id, sanitize_for_log(saved.email))
        return saved

    def authenticate(self, email: str, password: str) -> User:
        """Check credentials.

        Raises:
            UnauthorizedError: If the email is unknown or the password is wrong.
        """
        user = self.store.find_user_by_email(email)
        if user is None or not self.hasher.verify(password, user.password_hash):
            logger.info("Failed login for %s", sanitize_for_log(email))
            raise UnauthorizedError("Invalid email or password")
        return user

    def update_profile(
        self,
        caller: CallerContext | None,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> User:
        """Update the caller's own account through the upsert path."""
        user = self._require_caller(caller)
        candidate = UserCandidate(
            email=email if email is not None else user.email,
            password_hash=(
                self.hasher.hash(password) if password is not None else user.password_hash
            ),
            name=name if name is not None else user.name,
            kind=user.user_kind,
            external_id=user.external_id,
        )
        return self.create_or_update_user(candidate)
