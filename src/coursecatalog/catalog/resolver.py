"""EntityResolver - identity resolution and merge for upserts.

A candidate is matched against persisted records in a fixed order, and the
first hit wins:

1. external identifier, when the candidate carries one
2. surrogate id, when step 1 was skipped or missed and an id is present
3. natural key (owner + title for courses, email for users)

A hit has the candidate's mutable fields merged onto it. A miss produces a
brand-new record with a fresh external identifier. Nothing is persisted here;
the caller saves the returned record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from coursecatalog.catalog.exceptions import OwnerNotFoundError, RequiredFieldError
from coursecatalog.store.models import Course, User

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from coursecatalog.catalog.clock import Clock
    from coursecatalog.catalog.models import CourseCandidate, UserCandidate, UserRef
    from coursecatalog.store import CatalogStore

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")
CandidateT = TypeVar("CandidateT", contravariant=True)


class EntityAdapter(Protocol[RecordT, CandidateT]):
    """Per-entity capabilities the resolver needs."""

    kind: str

    def identifiers(self, candidate: CandidateT) -> tuple[str | None, int | None]:
        """Return the candidate's (external_id, id)."""
        ...

    def find_by_external_id(self, external_id: str) -> RecordT | None: ...

    def find_by_id(self, record_id: int) -> RecordT | None: ...

    def find_by_natural_key(self, candidate: CandidateT) -> RecordT | None: ...

    def merge(self, record: RecordT, candidate: CandidateT, now: datetime) -> RecordT:
        """Copy mutable fields from candidate onto record."""
        ...

    def create(self, candidate: CandidateT, now: datetime) -> RecordT:
        """Build a new, unsaved record from candidate."""
        ...


@dataclass
class Resolution(Generic[RecordT]):
    """Outcome of resolving a candidate.

    Attributes:
        record: The merged existing record, or the new record. Not yet saved.
        created: True if no existing record matched.
        matched_by: Which lookup found the record ("external_id", "id",
            "natural_key"), or None for new records.
    """

    record: RecordT
    created: bool
    matched_by: str | None = None


class EntityResolver(Generic[RecordT, CandidateT]):
    """Find-or-create with merge, shared by every entity kind."""

    def __init__(self, adapter: EntityAdapter[RecordT, CandidateT], clock: Clock) -> None:
        self.adapter = adapter
        self.clock = clock

    def find(self, candidate: CandidateT) -> tuple[RecordT | None, str | None]:
        """Locate the persisted record a candidate refers to.

        Returns:
            (record, matched_by), or (None, None) if nothing matched.
        """
        external_id, record_id = self.adapter.identifiers(candidate)

        if external_id is not None:
            found = self.adapter.find_by_external_id(external_id)
            if found is not None:
                return found, "external_id"

        if record_id is not None:
            found = self.adapter.find_by_id(record_id)
            if found is not None:
                return found, "id"

        found = self.adapter.find_by_natural_key(candidate)
        if found is not None:
            return found, "natural_key"

        return None, None

    def resolve(
        self,
        candidate: CandidateT,
        guard: Callable[[RecordT], None] | None = None,
    ) -> Resolution[RecordT]:
        """Resolve a candidate to its canonical record, merging or creating.

        Args:
            candidate: The incoming record.
            guard: Called with an existing record before it is merged. May raise
                to refuse the merge (e.g. the caller does not own the record).

        Returns:
            Resolution holding the unsaved record.
        """
        now = self.clock.now()
        found, matched_by = self.find(candidate)

        if found is None:
            record = self.adapter.create(candidate, now)
            logger.debug("No existing %s matched; creating new record", self.adapter.kind)
            return Resolution(record=record, created=True)

        if guard is not None:
            guard(found)
        merged = self.adapter.merge(found, candidate, now)
        logger.debug("Resolved %s %r by %s", self.adapter.kind, merged, matched_by)
        return Resolution(record=merged, created=False, matched_by=matched_by)


class UserAdapter:
    """Resolver capabilities for users. Natural key: email."""

    kind = "user"

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def identifiers(self, candidate: UserCandidate) -> tuple[str | None, int | None]:
        """Return the candidate's (external_id, id); either may be None."""
        return candidate.external_id, candidate.id

    def find_by_external_id(self, external_id: str) -> User | None:
        """Look up a user by external identifier.

        Args:
            external_id: Identifier carried by the candidate

        Returns:
            Matching user, or None
        """
        return self.store.find_user_by_external_id(external_id)

    def find_by_id(self, record_id: int) -> User | None:
        return self.store.find_user_by_id(record_id)

    def find_by_natural_key(self, candidate: UserCandidate) -> User | None:
        """Look up a user by the candidate's email.

        Returns:
            Matching user, or None
        """
        return self.store.find_user_by_email(candidate.email)

    def merge(self, record: User, candidate: UserCandidate, now: datetime) -> User:
        """Overwrite a user's mutable fields from the candidate.

        Identifiers and ``created_at`` are left alone.

        Args:
            record: Existing user found by the resolver
            candidate: Incoming values
            now: Timestamp for ``updated_at``

        Returns:
            The same record, modified in place
        """
        record.email = candidate.email
        record.password_hash = candidate.password_hash
        record.name = candidate.name
        record.kind = candidate.kind.value
        record.updated_at = now
        return record

    def create(self, candidate: UserCandidate, now: datetime) -> User:
        """Build a new, unsaved user.

        Args:
            candidate: Incoming values; its identifiers are ignored
            now: Timestamp for ``created_at`` and ``updated_at``

        Returns:
            User with a fresh external id and no surrogate id
        """
        return User(
            email=candidate.email,
            password_hash=candidate.password_hash,
            name=candidate.name,
            kind=candidate.kind.value,
            created_at=now,
            updated_at=now,
        )


@dataclass(frozen=True)
class OwnedCourseCandidate:
    """A course candidate paired with its already-resolved owner."""

    candidate: CourseCandidate
    owner: User


class CourseAdapter:
    """Resolver capabilities for courses. Natural key: (owner, title)."""

    kind = "course"

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def identifiers(self, owned: OwnedCourseCandidate) -> tuple[str | None, int | None]:
        return owned.candidate.external_id, owned.candidate.id

    def find_by_external_id(self, external_id: str) -> Course | None:
        return self.store.find_course_by_external_id(external_id)

    def find_by_id(self, record_id: int) -> Course | None:
        return self.store.find_course_by_id(record_id)

    def find_by_natural_key(self, owned: OwnedCourseCandidate) -> Course | None:
        """Look up a course by (resolved owner, title)."""
        return self.store.find_course_by_natural_key(owned.owner.id, owned.candidate.title)

    def merge(self, record: Course, owned: OwnedCourseCandidate, now: datetime) -> Course:
        """Overwrite a course's mutable fields from the candidate.

        Publication state, identifiers and ``created_at`` are left alone.

        Args:
            record: Existing course found by the resolver
            owned: Incoming values plus the resolved owner
            now: Timestamp for ``updated_at``

        Returns:
            The same record, modified in place
        """
        candidate = owned.candidate
        record.owner_id = owned.owner.id
        record.title = candidate.title
        record.description = candidate.description
        record.category = candidate.category.value
        record.mode = candidate.mode.value
        record.address = candidate.address
        record.pin_code = candidate.pin_code
        record.start_date = candidate.start_date
        record.end_date = candidate.end_date
        record.schedule_info = candidate.schedule_info
        record.price_amount = candidate.price_amount
        record.is_free = candidate.is_free
        record.capacity = candidate.capacity
        record.updated_at = now
        return record

    def create(self, owned: OwnedCourseCandidate, now: datetime) -> Course:
        """Build a new, unsaved course owned by the resolved owner.

        Returns:
            Course with a fresh external id; unpublished unless the candidate says otherwise
        """
        candidate = owned.candidate
        return Course(
            owner_id=owned.owner.id,
            title=candidate.title,
            description=candidate.description,
            category=candidate.category.value,
            mode=candidate.mode.value,
            address=candidate.address,
            pin_code=candidate.pin_code,
            start_date=candidate.start_date,
            end_date=candidate.end_date,
            schedule_info=candidate.schedule_info,
            price_amount=candidate.price_amount,
            is_free=candidate.is_free,
            capacity=candidate.capacity,
            is_published=candidate.is_published,
            created_at=now,
            updated_at=now,
        )


class CourseResolver:
    """Resolves a course candidate's owner, then the course itself."""

    def __init__(self, store: CatalogStore, clock: Clock) -> None:
        self.store = store
        self.resolver: EntityResolver[Course, OwnedCourseCandidate] = EntityResolver(
            CourseAdapter(store), clock
        )

    def resolve_owner(self, ref: UserRef | None) -> User:
        """Resolve an owner reference by external id, then surrogate id.

        Raises:
            RequiredFieldError: If no owner reference was given.
            OwnerNotFoundError: If the reference matches no user.
        """
        if ref is None or ref.is_empty:
            raise RequiredFieldError("Course must have an owner", field="owner")

        owner = None
        if ref.external_id is not None:
            owner = self.store.find_user_by_external_id(ref.external_id)
        if owner is None and ref.id is not None:
            owner = self.store.find_user_by_id(ref.id)
        if owner is None:
            raise OwnerNotFoundError(
                f"Owner not found (external_id={ref.external_id!r}, id={ref.id!r})"
            )
        return owner

    def resolve(
        self,
        candidate: CourseCandidate,
        owner: User | None = None,
        guard: Callable[[Course], None] | None = None,
    ) -> Resolution[Course]:
        """Resolve a course candidate.

        Args:
            candidate: The incoming course.
            owner: Already-resolved owner; resolved from ``candidate.owner`` if omitted.
            guard: Passed through to :meth:`EntityResolver.resolve`.
        """
        if owner is None:
            owner = self.resolve_owner(candidate.owner)
        return self.resolver.resolve(OwnedCourseCandidate(candidate, owner), guard=guard)


class UserResolver(EntityResolver[User, "UserCandidate"]):
    """Entity resolver specialised for users."""

    def __init__(self, store: CatalogStore, clock: Clock) -> None:
        super().__init__(UserAdapter(store), clock)
