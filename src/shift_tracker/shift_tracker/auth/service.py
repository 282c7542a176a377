from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..core.exceptions import AuthFailureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminUser:
    """What we store into Flask session after login."""

    username: str


class AuthService:
    """Use case: authenticate the dashboard administrator (login)."""

    def __init__(self, *, username: str, password_hash: str):
        self._username = username
        self._password_hash = password_hash

    def authenticate(self, username: str, password: str) -> AdminUser:
        username = (username or "").strip()
        if not username or not hmac.compare_digest(username, self._username):
            raise AuthFailureError()

        try:
            ok = check_password_hash(self._password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Failed admin login for %s", username)
            raise AuthFailureError()

        logger.info("Admin %s signed in", username)
        return AdminUser(username=username)
