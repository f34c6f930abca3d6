"""Replacement candidate pools.

Filters the player universe down to legal replacements for one squad slot.
The filter order is part of the contract: squad membership, position, price
ceiling, post-trade club cap, then availability. Club counts are always taken
with the outgoing player already removed.
"""

from typing import Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from fpl_transfer_engine.domain.models.player import (
    UNAVAILABLE_STATUSES,
    Player,
    Position,
)
from fpl_transfer_engine.domain.models.squad import Squad
from fpl_transfer_engine.domain.models.transfer_plan import (
    CandidateFilters,
    CandidatePool,
)

from .optimization_base import OptimizationBaseMixin

_UNAVAILABLE_CODES = sorted(s.value for s in UNAVAILABLE_STATUSES)


class CandidatePoolMixin(OptimizationBaseMixin):
    """Mixin providing candidate pool construction."""

    def _universe_frame(self, universe: Sequence[Player]) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "player_id": [p.player_id for p in universe],
                "web_name": [p.web_name for p in universe],
                "team_id": [p.team_id for p in universe],
                "position": [p.position.value for p in universe],
                "price": [p.price for p in universe],
                "status": [p.status.value for p in universe],
                "form": [p.form for p in universe],
                "total_points": [p.total_points for p in universe],
            }
        )

    def build_candidate_pool(
        self,
        universe: Sequence[Player],
        position: Position,
        ceiling: int,
        squad: Optional[Squad] = None,
        outgoing: Optional[Player] = None,
        filters: Optional[CandidateFilters] = None,
    ) -> CandidatePool:
        """Filter and rank replacement candidates for one slot.

        Args:
            universe: Every player that could be bought
            position: Required position
            ceiling: Maximum price (tenths)
            squad: Current squad, or None for a from-scratch build
            outgoing: Player leaving the slot (removed before club counting)
            filters: Optional user filters

        Returns:
            CandidatePool ranked by form then season points, cut to the
            configured pool size
        """
        filters = filters or CandidateFilters()
        rejected: Dict[str, int] = {}
        players = {p.player_id: p for p in universe}
        df = self._universe_frame(list(players.values()))

        def drop(stage: str, mask: pd.Series) -> pd.DataFrame:
            rejected[stage] = int(mask.sum())
            return df[~mask]

        if squad is not None:
            df = drop("in_squad", df["player_id"].isin(list(squad.player_ids)))
        df = drop("position", df["position"] != position.value)
        df = drop("price", df["price"] > ceiling)

        if squad is not None:
            excluding = outgoing.player_id if outgoing is not None else None
            counts = squad.club_counts(excluding=excluding)
            full_clubs = [
                team for team, n in counts.items() if n >= self.club_limit
            ]
            df = drop("club_cap", df["team_id"].isin(full_clubs))

        if filters.prefer_nailed:
            df = drop("unavailable", df["status"].isin(_UNAVAILABLE_CODES))
        if filters.excluded_team_ids:
            df = drop(
                "excluded_team", df["team_id"].isin(list(filters.excluded_team_ids))
            )
        if filters.excluded_player_ids:
            df = drop(
                "excluded_player",
                df["player_id"].isin(list(filters.excluded_player_ids)),
            )
        if filters.name_contains:
            df = drop(
                "name",
                ~df["web_name"].str.contains(
                    filters.name_contains, case=False, regex=False
                ),
            )

        df = df.sort_values(
            ["form", "total_points"], ascending=[False, False], kind="stable"
        )
        cutoff = self.engine_config.optimization.candidate_pool_cutoff
        if len(df) > cutoff:
            rejected["cutoff"] = len(df) - cutoff
            df = df.head(cutoff)

        candidates: List[Player] = [players[pid] for pid in df["player_id"]]
        label = outgoing.web_name if outgoing is not None else position.value
        logger.debug(
            f"Candidate pool for {label}: {len(candidates)} kept, rejected {rejected}"
        )
        return CandidatePool(
            position=position,
            ceiling=ceiling,
            outgoing=outgoing,
            candidates=tuple(candidates),
            rejected=rejected,
        )

    def candidate_pool_for(
        self,
        outgoing: Player,
        squad: Squad,
        universe: Sequence[Player],
        filters: Optional[CandidateFilters] = None,
        bank: Optional[int] = None,
    ) -> CandidatePool:
        """Pool for replacing ``outgoing``; ceiling is bank + outgoing price."""
        bank = squad.bank if bank is None else bank
        return self.build_candidate_pool(
            universe,
            position=outgoing.position,
            ceiling=bank + outgoing.price,
            squad=squad,
            outgoing=outgoing,
            filters=filters,
        )
