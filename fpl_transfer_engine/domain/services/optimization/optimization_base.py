"""Base utilities for FPL transfer optimization.

This module contains shared functionality used across all optimization modules:
- Safe, memoised access to the external projection service
- Projection window helpers
- Formation enumeration over the catalog
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from fpl_transfer_engine.config import EngineConfig
from fpl_transfer_engine.domain.models.lineup import FORMATION_CATALOG, Formation
from fpl_transfer_engine.domain.models.player import (
    POSITION_ORDER,
    Player,
    Position,
    ProjectedPlayer,
)
from fpl_transfer_engine.domain.repositories.projection_repository import (
    ProjectionProvider,
)

Window = Tuple[int, ...]


class SafeProjector:
    """Wraps a ProjectionProvider so one bad player never aborts a scan.

    Any exception from the provider degrades that player to 0 points (or 0
    minutes) for that call and is logged once. Successful results are
    memoised per (player, window) when ``memoize`` is set; degraded zeros are
    not, so the provider is asked again on the next lookup.
    """

    def __init__(self, provider: ProjectionProvider, memoize: bool = True):
        self.provider = provider
        self.memoize = memoize
        self._points: Dict[Tuple[int, Window], float] = {}
        self._minutes: Dict[int, float] = {}
        self.failures: Dict[int, str] = {}

    def points(self, player: Player, window: Window) -> float:
        key = (player.player_id, window)
        if self.memoize and key in self._points:
            return self._points[key]
        try:
            value = float(self.provider.projected_points(player, list(window)))
        except Exception as e:
            return self._degrade(player, "points", e)
        if self.memoize:
            self._points[key] = value
        return value

    def minutes(self, player: Player) -> float:
        if self.memoize and player.player_id in self._minutes:
            return self._minutes[player.player_id]
        try:
            value = float(self.provider.projected_minutes(player))
        except Exception as e:
            return self._degrade(player, "minutes", e)
        value = max(0.0, value)
        if self.memoize:
            self._minutes[player.player_id] = value
        return value

    def project(self, player: Player, window: Window) -> ProjectedPlayer:
        return ProjectedPlayer(
            player=player,
            projected_points=self.points(player, window),
            projected_minutes=self.minutes(player),
        )

    def clear(self) -> None:
        self._points.clear()
        self._minutes.clear()
        self.failures.clear()

    def _degrade(self, player: Player, what: str, error: Exception) -> float:
        if player.player_id not in self.failures:
            logger.warning(
                f"⚠️ Projected {what} unavailable for {player.web_name} "
                f"({player.player_id}): {error}. Using 0."
            )
        self.failures[player.player_id] = str(error)
        return 0.0


class OptimizationBaseMixin:
    """Mixin providing shared optimization utilities.

    Concrete services set ``engine_config`` and ``projector``.
    """

    engine_config: EngineConfig
    projector: SafeProjector

    @property
    def club_limit(self) -> int:
        return self.engine_config.optimization.club_limit

    def window_from(self, start_gameweek: int, length: Optional[int] = None) -> Window:
        """Consecutive gameweek window starting at ``start_gameweek``.

        Args:
            start_gameweek: First gameweek in the window
            length: Number of gameweeks (defaults to projection config)

        Raises:
            ValueError: if ``length`` is below 1 or the start is outside GW1-38
        """
        if length is None:
            length = self.engine_config.projection.default_window_length
        if length < 1:
            raise ValueError(f"Window length must be at least 1, got {length}")
        if not 1 <= start_gameweek <= 38:
            raise ValueError(
                f"Gameweek must be between 1 and 38, got {start_gameweek}"
            )
        end = min(start_gameweek + length - 1, 38)
        return tuple(range(start_gameweek, end + 1))

    def _resolve_window(self, window: Iterable[int]) -> Window:
        resolved = tuple(int(gw) for gw in window)
        if not resolved:
            raise ValueError("Projection window must contain at least one gameweek")
        return resolved

    def _project_all(
        self, players: Sequence[Player], window: Window
    ) -> List[ProjectedPlayer]:
        return [self.projector.project(p, window) for p in players]

    def _group_by_position(
        self, projected: Sequence[ProjectedPlayer]
    ) -> Dict[Position, List[ProjectedPlayer]]:
        """Players grouped by position, best projection first (stable)."""
        by_position: Dict[Position, List[ProjectedPlayer]] = {
            pos: [] for pos in POSITION_ORDER
        }
        for pp in projected:
            by_position[pp.position].append(pp)
        for pos in POSITION_ORDER:
            by_position[pos].sort(key=lambda pp: pp.projected_points, reverse=True)
        return by_position

    def _enumerate_formations(
        self, by_position: Dict[Position, List[ProjectedPlayer]]
    ) -> Optional[Tuple[Formation, List[ProjectedPlayer], float]]:
        """Core formation enumeration logic.

        Evaluates every catalog formation and returns the one with the highest
        total. Only a strictly better total replaces the current best, so ties
        go to the formation listed first in ``FORMATION_CATALOG``.

        Returns:
            Tuple of (formation, starters, total) or None when no formation
            can be filled
        """
        best: Optional[Tuple[Formation, List[ProjectedPlayer], float]] = None

        for formation in FORMATION_CATALOG:
            requirements = formation.requirements()
            if any(
                len(by_position[pos]) < count for pos, count in requirements.items()
            ):
                continue

            starters: List[ProjectedPlayer] = []
            for pos in POSITION_ORDER:
                starters.extend(by_position[pos][: requirements[pos]])
            total = sum(pp.projected_points for pp in starters)

            if best is None or total > best[2]:
                best = (formation, starters, total)

        return best
