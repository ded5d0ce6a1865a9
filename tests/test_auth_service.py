from datetime import timedelta
from types import SimpleNamespace

import pytest

from routebid.core.auth.service import AuthService, BCRYPT_MAX_BYTES

from conftest import new_user


def test_hash_and_verify():
    hashed = AuthService.get_password_hash("secret123")
    assert hashed != "secret123"
    assert AuthService.verify_password("secret123", hashed)
    assert not AuthService.verify_password("secret124", hashed)


def test_only_first_bcrypt_bytes_count():
    base = "x" * BCRYPT_MAX_BYTES
    hashed = AuthService.get_password_hash(base + "cola")
    assert AuthService.verify_password(base + "otra-cola", hashed)
    assert not AuthService.verify_password("x" * (BCRYPT_MAX_BYTES - 1), hashed)


def test_multibyte_password_cut_inside_a_character():
    password = "a" + "ñ" * BCRYPT_MAX_BYTES
    hashed = AuthService.get_password_hash(password)
    assert AuthService.verify_password(password, hashed)


def test_corrupt_hash_is_rejected():
    assert AuthService.verify_password("secret123", "no-es-un-hash") is False


def test_issued_token_carries_user_claims():
    user = SimpleNamespace(id=42, email="marta@routebid.test", role="driver")
    claims = AuthService.verify_token(AuthService.issue_token(user))

    assert claims["user_id"] == 42
    assert claims["email"] == "marta@routebid.test"
    assert claims["role"] == "driver"
    assert claims["exp"] > claims["iat"]


def test_token_requires_role():
    with pytest.raises(ValueError):
        AuthService.create_access_token({"user_id": 1, "email": "sin-rol@routebid.test"})


def test_expired_token_is_rejected():
    user = SimpleNamespace(id=1, email="luis@routebid.test", role="driver")
    token = AuthService.issue_token(user, expires_delta=timedelta(minutes=-1))
    assert AuthService.verify_token(token) is None


def test_tampered_token_is_rejected():
    user = SimpleNamespace(id=1, email="luis@routebid.test", role="driver")
    token = AuthService.issue_token(user)
    assert AuthService.verify_token(token[:-2] + ("AA" if token[-2:] != "AA" else "BB")) is None


class TestAuthenticate:
    def test_matching_credentials(self, db):
        user = new_user(db, "customer")
        found = AuthService.authenticate(db, f"  {user.email.upper()} ", "secret123")
        assert found is not None
        assert found.id == user.id

    def test_wrong_password(self, db):
        user = new_user(db, "driver")
        assert AuthService.authenticate(db, user.email, "otra-clave") is None

    def test_unknown_email(self, db):
        assert AuthService.authenticate(db, "nadie@routebid.test", "secret123") is None
