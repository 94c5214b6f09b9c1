"""Unit tests for PasswordHashingService."""

import base64
import hashlib

import bcrypt
import pytest

from rights_identity import PasswordHashingService
from rights_identity.services.password_service import PREHASHED_PREFIX


def _sha256_b64(password: str) -> str:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest()).decode()


class TestPasswordHashing:
    """Tests for hash and verify."""

    def test_hash_verifies_with_same_password(self, password_service):
        password_hash = password_service.hash("correct-password")

        assert password_service.verify("correct-password", password_hash)

    def test_hash_rejects_other_password(self, password_service):
        password_hash = password_service.hash("correct-password")

        assert not password_service.verify("correct-passwore", password_hash)
        assert not password_service.verify("", password_hash)

    def test_hash_is_salted(self, password_service):
        first = password_service.hash("same-password")
        second = password_service.hash("same-password")

        assert first != second
        assert password_service.verify("same-password", first)
        assert password_service.verify("same-password", second)

    def test_hash_is_not_plaintext(self, password_service):
        password_hash = password_service.hash("correct-password")

        assert "correct-password" not in password_hash
        assert password_hash.startswith("$2")

    @pytest.mark.parametrize(
        "password",
        ["", "ünïcødé-パスワード", "x" * 200, "nul\x00byte", "🔑" * 30],
    )
    def test_hash_accepts_any_string(self, password_service, password):
        password_hash = password_service.hash(password)

        assert password_service.verify(password, password_hash)

    def test_long_passwords_are_not_truncated(self, password_service):
        base = "a" * 72
        password_hash = password_service.hash(base + "tail-one")

        assert not password_service.verify(base + "tail-two", password_hash)

    def test_default_work_factor_is_12(self):
        service = PasswordHashingService()

        assert service.hash("correct-password").split("$")[2] == "12"


class TestPrehashedPasswords:
    """Inputs bcrypt cannot take verbatim get their own hash format."""

    @pytest.mark.parametrize("password", ["x" * 80, "a\x00b"])
    def test_prehashed_hashes_are_marked(self, password_service, password):
        password_hash = password_service.hash(password)

        assert password_hash.startswith(PREHASHED_PREFIX + "$2")

    @pytest.mark.parametrize("password", ["x" * 80, "a\x00b"])
    def test_digest_is_not_an_equivalent_password(self, password_service, password):
        password_hash = password_service.hash(password)

        assert password_service.verify(_sha256_b64(password), password_hash) is False
        assert password_service.verify(password, password_hash) is True

    def test_digest_of_short_password_does_not_match(self, password_service):
        password_hash = password_service.hash("correct-password")

        assert not password_service.verify(_sha256_b64("correct-password"), password_hash)

    def test_overlong_input_against_plain_hash(self, password_service):
        base = "a" * 72
        password_hash = password_service.hash(base)

        assert not password_hash.startswith(PREHASHED_PREFIX)
        assert password_service.verify(base, password_hash)
        assert not password_service.verify(base + "tail", password_hash)

    def test_plain_bcrypt_hashes_still_verify(self, password_service):
        legacy = bcrypt.hashpw(b"legacy-password", bcrypt.gensalt(rounds=4)).decode()

        assert password_service.verify("legacy-password", legacy)


class TestPasswordVerifyMalformed:
    """verify never raises on bad hash input."""

    @pytest.mark.parametrize(
        "bad_hash",
        [None, "", "not-a-hash", "$2b$12$short", PREHASHED_PREFIX, PREHASHED_PREFIX + "junk"],
    )
    def test_malformed_hash_returns_false(self, password_service, bad_hash):
        assert password_service.verify("anything", bad_hash) is False
