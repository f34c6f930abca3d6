"""Exception taxonomy for the transfer engine.

Constraint violations are raised by ``Squad.apply`` and swallowed by the
optimizers, which skip the offending candidate and keep scanning. Projection
failures are degraded to zero by the projection layer. Only invalid input
(``InvalidSquadError``) escapes to callers.
"""

from typing import Optional


class TransferEngineError(Exception):
    """Base class for all engine errors."""


class InvalidSquadError(TransferEngineError, ValueError):
    """Squad input that no optimizer can work with (e.g. not 15 players)."""


class ConstraintViolation(TransferEngineError):
    """A candidate move fails a hard squad constraint."""

    def __init__(self, message: str, player_in_id: Optional[int] = None):
        super().__init__(message)
        self.player_in_id = player_in_id


class BudgetViolation(ConstraintViolation):
    """Incoming price exceeds bank plus outgoing price."""


class ClubCapViolation(ConstraintViolation):
    """Move would put more than the allowed number of players from one club."""


class DuplicatePlayerError(ConstraintViolation):
    """Incoming player is already in the squad."""


class InvalidMoveError(ConstraintViolation):
    """Outgoing player missing from the squad or positions do not match."""


class ProjectionUnavailableError(TransferEngineError):
    """The projection service could not produce a value for a player."""

    def __init__(self, player_id: int, reason: str = "projection unavailable"):
        super().__init__(f"Player {player_id}: {reason}")
        self.player_id = player_id
        self.reason = reason


class OperationCancelledError(TransferEngineError):
    """A cancellation token was triggered during a scan."""
