"""
Bearer Token Middleware

Verifies the JWT bearer credential on incoming requests.
Allows anonymous requests (catalog browsing) but rejects a malformed or
expired token outright.
"""

import os
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Callable

import jwt
from fastapi import Request, HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from ..models.user import ErrorResponse, User, UserRole

logger = logging.getLogger(__name__)


@dataclass
class Identity:
    """Authenticated caller, as decoded from the bearer token"""
    user_id: int
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class TokenService:
    """Issues and decodes HS256 session tokens"""

    algorithm = "HS256"

    def __init__(self, secret: str, ttl_minutes: int = 60):
        self.secret = secret
        self.ttl = timedelta(minutes=ttl_minutes)

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Identity:
        """Raises jwt.InvalidTokenError on a bad or expired token"""
        claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        return Identity(
            user_id=int(claims["sub"]),
            email=claims["email"],
            role=UserRole(claims["role"]),
        )


class BearerTokenMiddleware(BaseHTTPMiddleware):
    """
    Middleware that decodes the bearer token on requests.

    If a request has an Authorization header, it validates it.
    If validation fails, the request is rejected with 401.
    If there is no header, the request proceeds anonymously.
    """

    def __init__(self, app, tokens: TokenService):
        super().__init__(app)
        self.tokens = tokens

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.identity = None
        authorization = request.headers.get("Authorization")

        if authorization:
            scheme, _, token = authorization.partition(" ")
            if scheme.lower() != "bearer" or not token:
                return _unauthorized("Malformed Authorization header")

            try:
                request.state.identity = self.tokens.decode(token)
            except jwt.ExpiredSignatureError:
                return _unauthorized("Session expired, please log in again")
            except jwt.InvalidTokenError as e:
                logger.warning(f"Rejected bearer token: {e}")
                return _unauthorized("Invalid credential")

        return await call_next(request)


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content=ErrorResponse(code="AUTH_REQUIRED", message=message).model_dump(),
    )


class AuthDependency:
    """
    FastAPI dependency giving route-level control over authentication.
    """

    def __init__(self, require_admin: bool = False):
        self.require_admin = require_admin

    async def __call__(self, request: Request) -> Identity:
        identity: Optional[Identity] = getattr(request.state, "identity", None)

        if identity is None:
            raise HTTPException(status_code=401, detail="Please log in to continue")

        if self.require_admin and not identity.is_admin:
            raise HTTPException(
                status_code=403,
                detail="You don't have permission to perform this action",
            )

        return identity


def get_token_service() -> TokenService:
    """Create the token service from environment configuration"""
    secret = os.getenv("STORE_JWT_SECRET")
    if not secret:
        logger.warning("STORE_JWT_SECRET not set - using an ephemeral signing secret")
        secret = os.urandom(32).hex()
    ttl = int(os.getenv("STORE_TOKEN_TTL_MINUTES", "60"))
    return TokenService(secret=secret, ttl_minutes=ttl)


# Dependency instances
token_service = get_token_service()
require_user = AuthDependency()
require_admin = AuthDependency(require_admin=True)
