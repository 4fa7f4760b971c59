"""Shopper session context and its lifecycle"""

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

import jwt

from .errors import AuthRequired

if TYPE_CHECKING:
    from ..services.store_client import StoreClient

logger = logging.getLogger(__name__)


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass
class Identity:
    """Signed-in shopper and the bearer credential issued for them"""
    email: str
    role: Role
    token: str
    expires_at: Optional[datetime] = None

    @classmethod
    def from_credential(cls, token: str, email: str, role: str) -> "Identity":
        return cls(email=email, role=Role(role), token=token, expires_at=token_expiry(token))

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def is_expired(self, leeway_seconds: int = 0) -> bool:
        if self.expires_at is None:
            return False
        now = datetime.now(timezone.utc)
        return now + timedelta(seconds=leeway_seconds) >= self.expires_at


def token_expiry(token: str) -> Optional[datetime]:
    """Read the ``exp`` claim of a JWT without verifying it.

    The signing key belongs to the store; the client only needs to know
    when to stop presenting the token.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None
    exp = claims.get("exp")
    return datetime.fromtimestamp(exp, tz=timezone.utc) if exp is not None else None


class ShopperSession:
    """
    Explicit session context shared by the store client and every service.

    Holds the current identity or none. Created empty, populated at
    sign-in (or restore), emptied at sign-out.
    """

    def __init__(self, identity: Optional[Identity] = None):
        self._identity = identity

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def begin(self, identity: Identity) -> None:
        self._identity = identity

    def end(self) -> None:
        self._identity = None

    def require_identity(self, action: str = "continue") -> Identity:
        """Return the identity or raise AuthRequired without touching the store"""
        if self._identity is None:
            raise AuthRequired(f"Please log in to {action}.")
        return self._identity

    def auth_headers(self) -> dict[str, str]:
        if self._identity is None:
            return {}
        return {"Authorization": f"Bearer {self._identity.token}"}


class SessionManager:
    """Signs shoppers in and out and persists the credential between runs"""

    def __init__(
        self,
        store: "StoreClient",
        session: ShopperSession,
        session_path: str,
        leeway_seconds: int = 30,
    ):
        self.store = store
        self.session = session
        self.session_path = session_path
        self.leeway_seconds = leeway_seconds

    async def sign_in(self, email: str, password: str) -> Identity:
        """Exchange credentials for a session"""
        data = await self.store.login(email, password)
        return self._start(data)

    async def register(
        self,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
    ) -> Identity:
        """Create an account and start a session for it"""
        data = await self.store.register(email, password, first_name, last_name)
        return self._start(data)

    def sign_out(self) -> None:
        """Tear the session down and forget the persisted credential"""
        if self.session.identity:
            logger.info(f"Signed out {self.session.identity.email}")
        self.session.end()
        self._forget()

    def restore(self) -> Optional[Identity]:
        """
        Re-validate a persisted session at process start.

        A missing, unreadable or expired credential leaves the session empty
        and removes the file.
        """
        if not os.path.exists(self.session_path):
            return None

        try:
            with open(self.session_path, "r") as f:
                data = json.load(f)
            identity = Identity.from_credential(data["token"], data["email"], data["role"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable session file: {e}")
            self._forget()
            return None

        if identity.is_expired(self.leeway_seconds):
            logger.warning(f"Persisted session for {identity.email} has expired")
            self._forget()
            return None

        self.session.begin(identity)
        logger.info(f"Restored session for {identity.email}")
        return identity

    def _start(self, data: dict) -> Identity:
        identity = Identity.from_credential(data["token"], data["email"], data["role"])
        self.session.begin(identity)
        self._persist(identity)
        logger.info(f"Signed in {identity.email} ({identity.role.value})")
        return identity

    def _persist(self, identity: Identity) -> None:
        directory = os.path.dirname(self.session_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.session_path, "w") as f:
            json.dump(
                {"token": identity.token, "email": identity.email, "role": identity.role.value},
                f,
            )

    def _forget(self) -> None:
        if os.path.exists(self.session_path):
            os.remove(self.session_path)
