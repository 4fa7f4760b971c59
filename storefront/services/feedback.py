"""Operation status and human-readable failure messages for the UI layer"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional

from ..core.errors import FailureKind, StorefrontError


class OperationStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


class StatusTracker:
    """Tracks the loading/idle/error state of one component's remote calls"""

    def __init__(self):
        self.status = OperationStatus.IDLE
        self.last_error: Optional[StorefrontError] = None
        self._in_flight = 0

    @property
    def busy(self) -> bool:
        return self._in_flight > 0

    @contextmanager
    def track(self) -> Iterator[None]:
        self._in_flight += 1
        self.status = OperationStatus.LOADING
        self.last_error = None
        try:
            yield
        except StorefrontError as e:
            self.last_error = e
            raise
        finally:
            self._in_flight -= 1
            if not self._in_flight:
                self.status = OperationStatus.ERROR if self.last_error else OperationStatus.IDLE


_TEMPLATES = {
    FailureKind.AUTH_REQUIRED: "Please log in to {action}.",
    FailureKind.PERMISSION: "You don't have permission to {action}.",
    FailureKind.VALIDATION: "Could not {action}: {detail}",
    FailureKind.NOT_FOUND: "Could not {action}: {detail}",
    FailureKind.CONFLICT: "Could not {action}: {detail}",
    FailureKind.TRANSIENT: "Failed to {action} because of a network or server error. Please try again.",
}


def failure_message(error: StorefrontError, action: str = "complete the request") -> str:
    """
    Render a failure for display.

    Args:
        error: Typed failure raised by a service
        action: What the user was doing, phrased to follow "to", e.g.
            "add items to your cart"
    """
    return _TEMPLATES[error.kind].format(action=action, detail=error.message)
