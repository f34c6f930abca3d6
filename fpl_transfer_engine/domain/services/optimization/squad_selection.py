"""Squad selection utilities for FPL optimization.

This module handles:
- Starting XI selection with formation optimization
- Bench ordering
"""

from typing import Iterable, List, Optional

from loguru import logger

from fpl_transfer_engine.domain.common.cancellation import CancellationToken
from fpl_transfer_engine.domain.common.result import DomainError, Result
from fpl_transfer_engine.domain.models.lineup import Lineup
from fpl_transfer_engine.domain.models.player import Position, ProjectedPlayer
from fpl_transfer_engine.domain.models.squad import Squad

from .optimization_base import OptimizationBaseMixin, Window


class SquadSelectionMixin(OptimizationBaseMixin):
    """Mixin providing squad selection functionality.

    Handles starting XI selection and bench ordering.
    Inherits shared utilities from OptimizationBaseMixin.
    """

    def select_best_lineup(
        self,
        squad: Squad,
        window: Iterable[int],
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[Lineup]:
        """Find the best starting XI and formation for a 15-player squad.

        Args:
            squad: Squad to pick from
            window: Gameweek IDs to project over
            cancel_token: Optional cancellation handle

        Returns:
            Result with the Lineup, or an INFEASIBLE / CANCELLED failure

        Raises:
            InvalidSquadError: squad is not the full squad size
        """
        squad.validate_for_optimization(self.engine_config.optimization.squad_size)
        window = self._resolve_window(window)

        if cancel_token is not None and cancel_token.is_cancelled:
            return Result.failure(DomainError.cancelled(cancel_token.reason))

        lineup = self._best_lineup(squad, window)
        if lineup is None:
            composition = {pos.value: n for pos, n in squad.composition().items()}
            logger.warning(f"⚠️ No feasible formation for squad {composition}")
            return Result.failure(
                DomainError.infeasible(
                    "No formation can be filled from this squad",
                    details={"composition": composition},
                )
            )
        return Result.success(lineup)

    def _best_lineup(self, squad: Squad, window: Window) -> Optional[Lineup]:
        """Best lineup for ``squad`` or None when infeasible. No validation."""
        projected = self._project_all(squad.players, window)
        best = self._enumerate_formations(self._group_by_position(projected))
        if best is None:
            return None

        formation, starters, total = best
        starter_ids = {pp.player_id for pp in starters}
        bench = self._order_bench(
            [pp for pp in projected if pp.player_id not in starter_ids]
        )
        logger.debug(f"Best formation {formation.name}: {total:.2f} xP")
        return Lineup(
            formation=formation,
            starters=tuple(starters),
            bench=tuple(bench),
            total_points=total,
        )

    def _order_bench(self, bench: List[ProjectedPlayer]) -> List[ProjectedPlayer]:
        """Goalkeeper slot first, then outfield by projected points."""
        goalkeepers = [pp for pp in bench if pp.position == Position.GKP]
        outfield = sorted(
            (pp for pp in bench if pp.position != Position.GKP),
            key=lambda pp: pp.projected_points,
            reverse=True,
        )
        return goalkeepers + outfield
