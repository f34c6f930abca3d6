"""Interface for the external projection service."""

from abc import ABC, abstractmethod
from typing import Sequence

from ..models.player import Player


class ProjectionProvider(ABC):
    """
    Black-box projected points and minutes for a player.

    Implementations may fail for individual players. They should raise
    ``ProjectionUnavailableError``; the engine treats any exception the same
    way and degrades that player to zero.
    """

    @abstractmethod
    def projected_points(self, player: Player, gameweeks: Sequence[int]) -> float:
        """
        Projected points summed over a gameweek window.

        Args:
            player: The player to project
            gameweeks: Ordered gameweek IDs in the window

        Returns:
            Projected points total for the window
        """
        pass

    @abstractmethod
    def projected_minutes(self, player: Player) -> float:
        """
        Projected minutes per gameweek (0-90).

        Args:
            player: The player to project

        Returns:
            Expected minutes for the next gameweek
        """
        pass
