"""
Current-user resolution.

Services never look up the user themselves; the view layer asks a
CurrentUser once per action and threads the owner id explicitly.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from combinators import lift as L
from firebase_admin import auth
from kungfu import Result, Ok, Error

from shoply._errors import Errors, ShopError
from shoply._types import OwnerId

logger = logging.getLogger(__name__)


class CurrentUser(Protocol):
    def current_user(self) -> OwnerId | None: ...


class UserSession:
    """Holds the signed-in owner id. Identity checks happen elsewhere."""

    def __init__(self, owner_id: OwnerId | None = None) -> None:
        self._owner_id = owner_id

    def current_user(self) -> OwnerId | None:
        return self._owner_id

    def sign_in(self, owner_id: OwnerId) -> None:
        self._owner_id = owner_id

    def sign_out(self) -> None:
        self._owner_id = None


class FirebaseSession(UserSession):
    """Session whose owner id comes from a verified Firebase ID token."""

    def __init__(self, app: Any = None) -> None:
        super().__init__()
        self._app = app

    async def sign_in_with_id_token(self, id_token: str) -> Result[OwnerId, ShopError]:
        verified = await L.catching_async(
            lambda: asyncio.to_thread(auth.verify_id_token, id_token, self._app),
            on_error=lambda e: Errors.unauthenticated(f"ID token rejected: {e}"),
        )
        match verified:
            case Ok(claims):
                uid = claims.get("uid") if isinstance(claims, dict) else None
                if not uid:
                    return Error(Errors.unauthenticated("ID token has no uid"))
                self.sign_in(uid)
                logger.info("Signed in %s", uid)
                return Ok(uid)
            case Error(e):
                logger.warning("Sign-in failed: %s", e.message)
                self.sign_out()
                return Error(e)


__all__ = ("CurrentUser", "UserSession", "FirebaseSession")
