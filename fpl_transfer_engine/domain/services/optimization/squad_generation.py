"""Wildcard (full rebuild) construction.

Builds a new starting XI from the whole player universe under one spending
ceiling. Each catalog formation gets an independent greedy fill: players are
ranked by projected points per unit of price within each position and taken
in order, skipping anyone who would break the club cap or the remaining
budget. This is a value-density approximation, not a budgeted knapsack
optimum: it can miss a better XI that pairs a cheap, low-value pick in one
position with a premium elsewhere.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from fpl_transfer_engine.domain.common.cancellation import CancellationToken
from fpl_transfer_engine.domain.common.result import DomainError, Result
from fpl_transfer_engine.domain.models.lineup import (
    FORMATION_CATALOG,
    Formation,
    Lineup,
    WildcardSquad,
)
from fpl_transfer_engine.domain.models.player import (
    POSITION_ORDER,
    Player,
    Position,
    ProjectedPlayer,
)
from fpl_transfer_engine.domain.models.squad import Squad

from .candidate_pool import CandidatePoolMixin


def _value_density(pp: ProjectedPlayer) -> float:
    return pp.projected_points / max(pp.player.price, 1)


class SquadGenerationMixin(CandidatePoolMixin):
    """Mixin providing wildcard squad construction."""

    def wildcard_ceiling(self, squad: Squad) -> int:
        """Spending ceiling for a rebuild: starting XI value plus bank."""
        return squad.starting_value + squad.bank

    def build_wildcard(
        self,
        universe: Sequence[Player],
        ceiling: int,
        window: Iterable[int],
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[WildcardSquad]:
        """Best greedy XI across all catalog formations.

        Args:
            universe: Every player that could be bought
            ceiling: Spending ceiling for the XI (tenths)
            window: Gameweek IDs to project over
            cancel_token: Checked before each projection and formation

        Returns:
            Result with the WildcardSquad, or an INFEASIBLE / CANCELLED failure
        """
        window = self._resolve_window(window)
        token = CancellationToken.ensure(cancel_token)
        eligible = [p for p in universe if not p.is_unavailable]
        logger.info(
            f"🃏 Wildcard build: {len(eligible)} eligible players, "
            f"ceiling £{ceiling / 10:.1f}m"
        )

        ranked: Dict[Position, List[ProjectedPlayer]] = {}
        for position in POSITION_ORDER:
            pool = self.build_candidate_pool(eligible, position, ceiling)
            projected = []
            for player in pool.candidates:
                if token.is_cancelled:
                    return Result.failure(DomainError.cancelled(token.reason))
                projected.append(self.projector.project(player, window))
            projected.sort(key=_value_density, reverse=True)
            ranked[position] = projected

        best: Optional[Tuple[Formation, List[ProjectedPlayer], float, int]] = None
        feasible: List[str] = []
        for formation in FORMATION_CATALOG:
            if token.is_cancelled:
                return Result.failure(DomainError.cancelled(token.reason))
            filled = self._fill_formation(formation, ranked, ceiling)
            if filled is None:
                logger.debug(f"Wildcard {formation.name}: quota cannot be filled")
                continue
            starters, spend = filled
            total = sum(pp.projected_points for pp in starters)
            feasible.append(formation.name)
            logger.debug(
                f"Wildcard {formation.name}: {total:.2f} xP for £{spend / 10:.1f}m"
            )
            if best is None or total > best[2]:
                best = (formation, starters, total, spend)

        if best is None:
            logger.warning("⚠️ No formation can be filled within the wildcard budget")
            return Result.failure(
                DomainError.infeasible(
                    "No feasible wildcard squad within budget",
                    details={"ceiling": ceiling},
                )
            )

        formation, starters, total, spend = best
        wildcard = WildcardSquad(
            lineup=Lineup(
                formation=formation, starters=tuple(starters), total_points=total
            ),
            ceiling=ceiling,
            total_spend=spend,
            formations_evaluated=len(FORMATION_CATALOG),
            feasible_formations=tuple(feasible),
        )
        logger.info(f"✅ {wildcard.budget_summary('Wildcard')}, {total:.2f} xP")
        return Result.success(wildcard)

    def _fill_formation(
        self,
        formation: Formation,
        ranked: Dict[Position, List[ProjectedPlayer]],
        ceiling: int,
    ) -> Optional[Tuple[List[ProjectedPlayer], int]]:
        """Greedy fill in GKP, DEF, MID, FWD order; None if a quota is short."""
        club_counts: Counter = Counter()
        spend = 0
        starters: List[ProjectedPlayer] = []

        for position in POSITION_ORDER:
            need = formation.requirements()[position]
            chosen: List[ProjectedPlayer] = []
            for pp in ranked[position]:
                if len(chosen) == need:
                    break
                player = pp.player
                if club_counts[player.team_id] >= self.club_limit:
                    continue
                if spend + player.price > ceiling:
                    continue
                chosen.append(pp)
                club_counts[player.team_id] += 1
                spend += player.price
            if len(chosen) < need:
                return None
            chosen.sort(key=lambda pp: pp.projected_points, reverse=True)
            starters.extend(chosen)

        return starters, spend
