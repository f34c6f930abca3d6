"""Cooperative cancellation for long-running optimizer scans."""

import threading
from typing import Optional

from .errors import OperationCancelledError


class CancellationToken:
    """
    Shared cancel signal passed through every optimizer entry point.

    The engine checks the token at the start of every candidate evaluation and
    before every squad mutation. Cancelling never rolls back moves that were
    already committed, it only stops future scanning.
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled by caller") -> None:
        """Request cancellation. Safe to call from another thread."""
        self._reason = reason
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if cancellation was requested."""
        if self._event.is_set():
            raise OperationCancelledError(self._reason or "cancelled")

    @classmethod
    def ensure(cls, token: Optional["CancellationToken"]) -> "CancellationToken":
        """Return ``token`` or a fresh, never-cancelled token."""
        return token if token is not None else cls()
