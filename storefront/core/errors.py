"""
Failure taxonomy for the storefront client.

Every failure reaching a caller is a StorefrontError subclass with an
explicit ``kind``. Wire responses are classified once, in the store client;
nothing downstream inspects raw HTTP errors.
"""

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    AUTH_REQUIRED = "AUTH_REQUIRED"
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    TRANSIENT = "TRANSIENT"
    PERMISSION = "PERMISSION"


class StorefrontError(Exception):
    """Base exception for storefront client errors"""

    kind: FailureKind = FailureKind.TRANSIENT

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Only transient faults are safe to retry as-is"""
        return self.kind == FailureKind.TRANSIENT

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, message={self.message!r})"


class AuthRequired(StorefrontError):
    """No session, or the store rejected the credential"""
    kind = FailureKind.AUTH_REQUIRED


class ValidationFailed(StorefrontError):
    """Bad input, rejected locally or by the store"""
    kind = FailureKind.VALIDATION


class NotFound(StorefrontError):
    """Target line, product or order does not exist"""
    kind = FailureKind.NOT_FOUND


class Conflict(StorefrontError):
    """Stock changed, duplicate resource, or resource still referenced"""
    kind = FailureKind.CONFLICT


class TransientFailure(StorefrontError):
    """Network or server fault"""
    kind = FailureKind.TRANSIENT


class PermissionDenied(StorefrontError):
    """Authenticated but not entitled"""
    kind = FailureKind.PERMISSION


_BY_KIND: dict[FailureKind, type[StorefrontError]] = {
    cls.kind: cls
    for cls in (AuthRequired, ValidationFailed, NotFound, Conflict, TransientFailure, PermissionDenied)
}

_BY_STATUS: dict[int, FailureKind] = {
    400: FailureKind.VALIDATION,
    401: FailureKind.AUTH_REQUIRED,
    403: FailureKind.PERMISSION,
    404: FailureKind.NOT_FOUND,
    409: FailureKind.CONFLICT,
    422: FailureKind.VALIDATION,
}


def error_for_status(status_code: int, message: str, code: Optional[str] = None) -> StorefrontError:
    """Build the typed failure for an HTTP error answer.

    A recognised ``code`` from the failure body wins over the status code.
    Anything unclassified (5xx, unexpected 4xx) is transient.
    """
    kind = None
    if code:
        try:
            kind = FailureKind(code)
        except ValueError:
            kind = None
    if kind is None:
        kind = _BY_STATUS.get(status_code, FailureKind.TRANSIENT)
    return _BY_KIND[kind](message, status_code=status_code)
