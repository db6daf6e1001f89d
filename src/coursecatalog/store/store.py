"""CatalogStore - durable keyed storage for Users and Courses."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from coursecatalog.store.database import Database
from coursecatalog.store.exceptions import StoreError, UniqueConstraintError
from coursecatalog.store.models import Base, Course, CoursePage, Pagination, User

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Base)

_UNIQUE_FAILED = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w., ]+)")


def _unique_violation(error: IntegrityError) -> UniqueConstraintError | None:
    """Map a SQLite IntegrityError to UniqueConstraintError, if it is one."""
    match = _UNIQUE_FAILED.search(str(error.orig))
    if match is None:
        return None
    columns = match.group("columns").strip()
    return UniqueConstraintError(f"Uniqueness violated on {columns}", constraint=columns)


class CatalogStore:
    """Main API for Store operations.

    Every call runs in its own session. Returned records are detached and keep
    their loaded state, so they can be modified and passed back to ``save_*``.
    """

    def __init__(self, db_path: str = "coursecatalog.db") -> None:
        """Initialize the Store with a SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    @property
    def database(self) -> Database:
        """Underlying Database manager, for journal-mode checks and tests."""
        return self._db

    def close(self) -> None:
        """Close the database connection.

        The store stays usable; the next call reconnects.
        """
        self._db.close()

    # --- Generic helpers ---

    def _save(self, record: RecordT) -> RecordT:
        """Insert a record without surrogate id, or overwrite the row with its id.

        Raises:
            UniqueConstraintError: If the write violates a uniqueness constraint
        """
        with self._db.get_session() as session:
            try:
                merged = session.merge(record)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                violation = _unique_violation(e)
                if violation is not None:
                    logger.info("Rejected write of %r: %s", record, violation)
                    raise violation from e
                raise StoreError(f"Integrity error while saving {record!r}") from e
            session.refresh(merged)
            return merged

    def _delete(self, model: type[Base], record_id: int) -> bool:
        """Delete a row by surrogate id.

        Returns:
            True if a row was deleted, False if none existed

        Raises:
            StoreError: If other rows still reference it
        """
        with self._db.get_session() as session:
            record = session.get(model, record_id)
            if record is None:
                return False
            session.delete(record)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise StoreError(f"Cannot delete {record!r}: still referenced") from e
            return True

    def _first(self, session: Session, stmt: Select[tuple[RecordT]]) -> RecordT | None:
        return session.execute(stmt).scalar_one_or_none()

    # --- User Operations ---

    def find_user_by_id(self, user_id: int) -> User | None:
        """Get user by surrogate id.

        Args:
            user_id: Store-assigned id

        Returns:
            User if found, None otherwise
        """
        with self._db.get_session() as session:
            return session.get(User, user_id)

    def find_user_by_external_id(self, external_id: str) -> User | None:
        """Get user by external identifier.

        Args:
            external_id: Stable public identifier

        Returns:
            User if found, None otherwise
        """
        with self._db.get_session() as session:
            return self._first(session, select(User).where(User.external_id == external_id))

    def find_user_by_email(self, email: str) -> User | None:
        """Get user by email, the user natural key.

        The comparison is exact and case-sensitive.

        Args:
            email: Email address

        Returns:
            User if found, None otherwise
        """
        with self._db.get_session() as session:
            return self._first(session, select(User).where(User.email == email))

    def save_user(self, user: User) -> User:
        """Persist a user.

        Args:
            user: Record to insert (no id) or overwrite (with id)

        Returns:
            The stored user, refreshed from the database

        Raises:
            UniqueConstraintError: If email or external id is already taken
        """
        return self._save(user)

    def delete_user(self, user_id: int) -> bool:
        """Delete a user.

        Args:
            user_id: Store-assigned id

        Returns:
            True if deleted, False if no such user exists

        Raises:
            StoreError: If the user still owns courses
        """
        return self._delete(User, user_id)

    # --- Course Operations ---

    def find_course_by_id(self, course_id: int) -> Course | None:
        """Get course by surrogate id, or None if missing."""
        with self._db.get_session() as session:
            return session.get(Course, course_id)

    def find_course_by_external_id(self, external_id: str) -> Course | None:
        """Get course by external identifier.

        Args:
            external_id: Stable public identifier

        Returns:
            Course if found, None otherwise
        """
        with self._db.get_session() as session:
            return self._first(session, select(Course).where(Course.external_id == external_id))

    def find_course_by_natural_key(self, owner_id: int, title: str) -> Course | None:
        """Get course by its natural key.

        Args:
            owner_id: Surrogate id of the owning user
            title: Exact, case-sensitive title

        Returns:
            Course if found, None otherwise
        """
        with self._db.get_session() as session:
            stmt = select(Course).where(Course.owner_id == owner_id, Course.title == title)
            return self._first(session, stmt)

    def save_course(self, course: Course) -> Course:
        """Persist a course.

        Args:
            course: Record to insert (no id) or overwrite (with id)

        Returns:
            The stored course, refreshed from the database

        Raises:
            UniqueConstraintError: If (owner, title) or external id is already taken
        """
        return self._save(course)

    def delete_course(self, course_id: int) -> bool:
        """Delete a course.

        Args:
            course_id: Store-assigned id

        Returns:
            True if deleted, False if no such course exists
        """
        return self._delete(Course, course_id)

    def list_courses_by_owner(self, owner_id: int) -> list[Course]:
        """List an owner's courses.

        Args:
            owner_id: Surrogate id of the owning user

        Returns:
            The owner's courses in creation order, published or not
        """
        with self._db.get_session() as session:
            stmt = select(Course).where(Course.owner_id == owner_id).order_by(Course.id)
            return list(session.execute(stmt).scalars().all())

    def count_courses_by_owner(self, owner_id: int) -> int:
        """Count an owner's courses, published or not.

        Args:
            owner_id: Surrogate id of the owning user

        Returns:
            Number of courses the user owns
        """
        with self._db.get_session() as session:
            stmt = select(func.count(Course.id)).where(Course.owner_id == owner_id)
            return session.execute(stmt).scalar_one()

    def search_courses(self, stmt: Select[tuple[Course]], pagination: Pagination) -> CoursePage:
        """Execute a composed course query and return one page of it.

        Args:
            stmt: Filtered and ordered course query
            pagination: Page index and size

        Returns:
            CoursePage with the page's items and the total match count
        """
        with self._db.get_session() as session:
            count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
            total = session.execute(count_stmt).scalar_one()

            page_stmt = stmt.offset(pagination.offset).limit(pagination.size)
            items = list(session.execute(page_stmt).scalars().all())

        return CoursePage(items=items, total=total, page=pagination.page, size=pagination.size)
