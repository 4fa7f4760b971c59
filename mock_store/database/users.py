"""User storage for the reference store"""

import itertools
import logging
import os
import secrets
from typing import Optional

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..models.user import User, UserRole

logger = logging.getLogger(__name__)


def _kdf(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=32, n=2**14, r=8, p=1)


class UserDatabase:
    """In-memory accounts with scrypt password hashes"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.users: dict[str, User] = {}
        self._user_ids = itertools.count(1)

        admin_email = os.getenv("STORE_ADMIN_EMAIL", "admin@example.com")
        admin_password = os.getenv("STORE_ADMIN_PASSWORD", "admin123")
        self.create_user(admin_email, admin_password, role=UserRole.ADMIN)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.users.get(email.lower())

    def create_user(
        self,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        role: UserRole = UserRole.USER,
    ) -> Optional[User]:
        """Register an account. Returns None when the email is taken."""
        if self.get_by_email(email):
            return None

        salt = secrets.token_bytes(16)
        user = User(
            id=next(self._user_ids),
            email=email.lower(),
            first_name=first_name,
            last_name=last_name,
            role=role,
            password_salt=salt,
            password_hash=_kdf(salt).derive(password.encode()),
        )
        self.users[user.email] = user
        logger.info(f"Registered {role.value} account {user.email}")
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when the password matches"""
        user = self.get_by_email(email)
        if not user:
            return None
        try:
            _kdf(user.password_salt).verify(password.encode(), user.password_hash)
        except InvalidKey:
            return None
        return user


# Singleton instance
user_db = UserDatabase()
