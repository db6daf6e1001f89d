"""Integration tests for racing upserts against a file-backed store."""

import itertools
import tempfile
import threading
from pathlib import Path

import pytest

from coursecatalog.catalog import (
    CallerContext,
    CatalogService,
    ConflictError,
    FixedClock,
    PasswordHasher,
    UserCandidate,
)
from coursecatalog.store import CatalogStore, UserKind

BARRIER_TIMEOUT = 5


@pytest.fixture
def file_store():
    """CatalogStore on a temporary SQLite file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = f.name
    store = CatalogStore(path)
    yield store
    store.close()
    Path(path).unlink(missing_ok=True)
    Path(f"{path}-wal").unlink(missing_ok=True)
    Path(f"{path}-shm").unlink(missing_ok=True)


@pytest.fixture
def file_service(
    file_store: CatalogStore, hasher: PasswordHasher, clock: FixedClock
) -> CatalogService:
    return CatalogService(store=file_store, hasher=hasher, clock=clock)


def _hold_after_lookup(store: CatalogStore, method: str, barrier: threading.Barrier) -> None:
    """Make both threads finish the named lookup before either writes.

    Only the first ``barrier.parties`` calls wait; later lookups pass straight through.
    """
    original = getattr(store, method)
    calls = itertools.count()

    def lookup(*args, **kwargs):
        result = original(*args, **kwargs)
        if next(calls) < barrier.parties:
            barrier.wait(timeout=BARRIER_TIMEOUT)
        return result

    setattr(store, method, lookup)


def _race(target, count: int = 2) -> tuple[list, list[Exception]]:
    results: list = []
    errors: list[Exception] = []
    lock = threading.Lock()

    def run() -> None:
        try:
            value = target()
        except Exception as e:  # noqa: BLE001
            with lock:
                errors.append(e)
        else:
            with lock:
                results.append(value)

    threads = [threading.Thread(target=run) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=BARRIER_TIMEOUT * 4)
    return results, errors


@pytest.mark.integration
class TestConcurrentCourseUpsert:
    """Two writers with the same (owner, title) and no identifiers."""

    def test_exactly_one_course_survives(
        self, file_service: CatalogService, file_store: CatalogStore, make_course
    ) -> None:
        owner = file_service.create_or_update_user(
            UserCandidate(
                email="racer@example.com",
                password_hash="h",
                name="Racer",
                kind=UserKind.PROVIDER,
            )
        )
        caller = CallerContext(user_id=owner.id)
        _hold_after_lookup(file_store, "find_course_by_natural_key", threading.Barrier(2))

        results, errors = _race(
            lambda: file_service.create_or_update_course(
                make_course(owner, title="Contended"), caller
            )
        )

        assert len(results) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], ConflictError)
        assert file_store.count_courses_by_owner(owner.id) == 1


@pytest.mark.integration
class TestConcurrentUserUpsert:
    """Two writers with the same email and no identifiers."""

    def test_exactly_one_user_survives(
        self, file_service: CatalogService, file_store: CatalogStore
    ) -> None:
        _hold_after_lookup(file_store, "find_user_by_email", threading.Barrier(2))

        results, errors = _race(
            lambda: file_service.create_or_update_user(
                UserCandidate(
                    email="same@example.com",
                    password_hash="h",
                    name="Same",
                    kind=UserKind.LEARNER,
                )
            )
        )

        assert len(results) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], ConflictError)
        assert file_store.find_user_by_email("same@example.com").id == results[0].id


@pytest.mark.integration
class TestConcurrentRegistration:
    """Two signups for the same email must never merge into one account."""

    def test_racing_signups_one_conflicts(
        self, file_service: CatalogService, file_store: CatalogStore
    ) -> None:
        _hold_after_lookup(file_store, "find_user_by_email", threading.Barrier(2))
        passwords = iter(["first-password", "second-password"])
        lock = threading.Lock()

        def signup():
            with lock:
                password = next(passwords)
            return file_service.register_user(
                "shared@example.com", password, password, UserKind.LEARNER
            )

        results, errors = _race(signup)

        assert len(results) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], ConflictError)
        winner = results[0]
        assert file_service.authenticate("shared@example.com", winner.name).id == winner.id

    def test_signup_after_stale_check_keeps_first_account(
        self, file_service: CatalogService, file_store: CatalogStore
    ) -> None:
        """A signup whose existence check went stale fails instead of overwriting."""
        original = file_store.find_user_by_email
        competed = False

        def lookup_then_competing_signup(email: str):
            nonlocal competed
            result = original(email)
            if not competed:
                competed = True
                file_service.register_user(email, "owner-password", "Owner", UserKind.PROVIDER)
            return result

        file_store.find_user_by_email = lookup_then_competing_signup

        with pytest.raises(ConflictError):
            file_service.register_user(
                "owned@example.com", "intruder-password", "Intruder", UserKind.LEARNER
            )

        del file_store.find_user_by_email
        owner = file_service.authenticate("owned@example.com", "owner-password")
        assert owner.name == "Owner"
        assert owner.kind == UserKind.PROVIDER.value
