from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.shift_tracker.shift_tracker.auth.service import AdminUser, AuthService
from src.shift_tracker.shift_tracker.core.exceptions import AuthFailureError


@pytest.fixture
def auth() -> AuthService:
    return AuthService(username="admin", password_hash=generate_password_hash("s3cret"))


def test_valid_credentials(auth):
    assert auth.authenticate(" admin ", "s3cret") == AdminUser(username="admin")


@pytest.mark.parametrize(
    "username,password",
    [("admin", "wrong"), ("root", "s3cret"), ("", "s3cret"), (None, None)],
)
def test_invalid_credentials(auth, username, password):
    with pytest.raises(AuthFailureError) as exc:
        auth.authenticate(username, password)
    assert str(exc.value) == "Invalid username or password"


def test_placeholder_hash_never_matches():
    auth = AuthService(username="admin", password_hash="CHANGE_ME")

    with pytest.raises(AuthFailureError):
        auth.authenticate("admin", "CHANGE_ME")
