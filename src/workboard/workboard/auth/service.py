from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_utc
from ..core.constants import ADMIN_CREDENTIALS_ID, DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME
from ..core.enums import Collection
from ..core.exceptions import AuthenticationError, StoreUnavailableError
from ..core.result import Result
from ..storage.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """What we keep in the signed session after login; cleared on logout."""

    username: str
    logged_in_at: datetime

    def to_session(self) -> Dict[str, Any]:
        return {"username": self.username, "logged_in_at": self.logged_in_at.isoformat()}

    @classmethod
    def from_session(cls, data: Optional[Dict[str, Any]]) -> Optional["SessionContext"]:
        if not data or not data.get("username"):
            return None
        try:
            logged_in_at = datetime.fromisoformat(str(data.get("logged_in_at")))
        except ValueError:
            return None
        return cls(username=str(data["username"]), logged_in_at=logged_in_at)


class AuthGate:
    """Allow/deny check run before any ledger operation is reachable."""

    @staticmethod
    def is_authenticated(ctx: Optional[SessionContext]) -> bool:
        return ctx is not None and bool(ctx.username)

    def require_auth(self, ctx: Optional[SessionContext], on_denied=None) -> bool:
        if self.is_authenticated(ctx):
            return True
        if on_denied is not None:
            on_denied()
        return False


class AuthService:
    """Use case: authenticate the single admin account."""

    def __init__(
        self,
        store: RecordStore,
        *,
        default_username: str = DEFAULT_ADMIN_USERNAME,
        default_password: str = DEFAULT_ADMIN_PASSWORD,
    ):
        self._store = store
        self._default_username = default_username
        self._default_password = default_password

    async def ensure_admin(self) -> None:
        """Create the default admin credentials if none exist yet."""

        created = await self._store.create_if_absent(
            Collection.ADMIN,
            ADMIN_CREDENTIALS_ID,
            {
                "username": self._default_username,
                "passwordHash": generate_password_hash(self._default_password),
                "createdAt": now_utc().isoformat(),
            },
        )
        if created:
            logger.info("Default admin user created")

    async def authenticate(self, username: str, password: str) -> SessionContext:
        await self.ensure_admin()
        creds = await self._store.get(Collection.ADMIN, ADMIN_CREDENTIALS_ID)
        if not creds:
            raise AuthenticationError("Admin credentials not found")

        try:
            ok = check_password_hash(str(creds.get("passwordHash", "")), password or "")
        except ValueError:
            # e.g. corrupted or placeholder hash values
            ok = False

        if username != creds.get("username") or not ok:
            raise AuthenticationError("Invalid username or password")

        return SessionContext(username=username, logged_in_at=now_utc())

    async def login(self, username: str, password: str) -> Result:
        try:
            ctx = await self.authenticate(username, password)
        except AuthenticationError as e:
            return Result.fail(e.kind, str(e))
        except StoreUnavailableError as e:
            logger.error("Login error: %s", e)
            return Result.fail(e.kind, f"Login failed: {e}")
        return Result.ok("Login successful", ctx)
