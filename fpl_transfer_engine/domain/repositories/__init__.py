"""Repository interfaces for data access abstraction."""

from .projection_repository import ProjectionProvider
from .roster_repository import RosterRepository

__all__ = [
    "RosterRepository",
    "ProjectionProvider",
]
