"""Repository interface for roster data access."""

from abc import ABC, abstractmethod
from typing import List

from ..common.result import Result
from ..models.player import Player
from ..models.squad import Squad


class RosterRepository(ABC):
    """
    Abstract repository for the manager's squad and the player universe.

    The engine only reads these snapshots. Applying a plan back to the
    roster source is the caller's job.
    """

    @abstractmethod
    def get_current_squad(self, gameweek: int) -> Result[Squad]:
        """
        Get the manager's 15-player squad for a gameweek.

        Args:
            gameweek: The gameweek number (1-38)

        Returns:
            Result containing the squad (with starting and captaincy flags and
            bank) or error information
        """
        pass

    @abstractmethod
    def get_player_universe(self) -> Result[List[Player]]:
        """
        Get every player that can be transferred in.

        Returns:
            Result containing list of players or error information
        """
        pass
