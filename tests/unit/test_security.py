"""Unit tests for the passlib-backed password hasher."""

import pytest

from coursecatalog.security import PasslibHasher


@pytest.fixture
def hasher() -> PasslibHasher:
    return PasslibHasher()


@pytest.mark.unit
class TestPasslibHasher:
    """Tests for PasslibHasher."""

    def test_hash_is_not_plaintext(self, hasher: PasslibHasher) -> None:
        hashed = hasher.hash("correct-horse")

        assert hashed != "correct-horse"
        assert hashed.startswith("$pbkdf2-sha256$")

    def test_verify_round_trip(self, hasher: PasslibHasher) -> None:
        hashed = hasher.hash("correct-horse")

        assert hasher.verify("correct-horse", hashed) is True
        assert hasher.verify("wrong-horse", hashed) is False

    def test_unrecognised_hash_never_matches(self, hasher: PasslibHasher) -> None:
        assert hasher.verify("anything", "not-a-hash") is False
