# Store security

from .auth import (
    Identity,
    TokenService,
    BearerTokenMiddleware,
    token_service,
    require_user,
    require_admin,
)

__all__ = [
    "Identity",
    "TokenService",
    "BearerTokenMiddleware",
    "token_service",
    "require_user",
    "require_admin",
]
