"""Live gameweek scoring.

The ground-truth FPL scoring rule for a team sheet: starters count once, the
captain twice (three times with triple captain), the bench not at all unless
bench boost is active.
"""

from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from loguru import logger

from fpl_transfer_engine.domain.models.picks import (
    ChipType,
    LivePointsBreakdown,
    Pick,
    PickScore,
)
from fpl_transfer_engine.domain.models.squad import Squad


class LivePointsService:
    """Service for deterministic live points calculation."""

    def pick_multiplier(self, pick: Pick, chip: Optional[ChipType] = None) -> int:
        if pick.is_starter:
            if pick.is_captain:
                return 3 if chip == ChipType.TRIPLE_CAPTAIN else 2
            return 1
        return 1 if chip == ChipType.BENCH_BOOST else 0

    def calculate_live_points(
        self,
        picks: Iterable[Pick],
        actual_points: Mapping[int, int],
        active_chip: Union[ChipType, str, None] = None,
    ) -> LivePointsBreakdown:
        """Score a team sheet from per-player actual points.

        Args:
            picks: The 15 picks (slot 1-11 start, 12-15 bench)
            actual_points: Player ID -> gameweek points (missing = 0)
            active_chip: Active chip, as ChipType or FPL ``active_chip`` string

        Returns:
            LivePointsBreakdown with per-pick multipliers and the total

        Raises:
            ValueError: on repeated slots or players, or more than one
                captain or vice-captain
        """
        picks = sorted(picks, key=lambda p: p.slot)
        self._validate_team_sheet(picks)
        chip = self._parse_chip(active_chip)
        scores = [
            PickScore(
                pick=pick,
                base_points=int(actual_points.get(pick.player_id, 0)),
                multiplier=self.pick_multiplier(pick, chip),
            )
            for pick in picks
        ]
        return LivePointsBreakdown(breakdown=tuple(scores), chip=chip)

    def picks_from_squad(self, squad: Squad) -> List[Pick]:
        """Team sheet from a squad's starting and captaincy flags."""
        ordered = list(squad.starters) + list(squad.bench)
        return [
            Pick(
                player_id=player.player_id,
                slot=slot,
                is_captain=player.player_id == squad.captain_id,
                is_vice_captain=player.player_id == squad.vice_captain_id,
            )
            for slot, player in enumerate(ordered, start=1)
        ]

    def build_live_points_map(self, event_live: Mapping) -> Dict[int, int]:
        """Player ID -> total points from an ``/event/{gw}/live`` payload."""
        points: Dict[int, int] = {}
        for element in event_live.get("elements") or []:
            stats = element.get("stats") or {}
            points[int(element["id"])] = int(stats.get("total_points", 0) or 0)
        return points

    def _validate_team_sheet(self, picks: Sequence[Pick]) -> None:
        repeated_slots = sorted(
            slot for slot, n in Counter(p.slot for p in picks).items() if n > 1
        )
        if repeated_slots:
            raise ValueError(f"Slots used more than once: {repeated_slots}")
        repeated_players = sorted(
            pid for pid, n in Counter(p.player_id for p in picks).items() if n > 1
        )
        if repeated_players:
            raise ValueError(f"Players picked more than once: {repeated_players}")
        if sum(p.is_captain for p in picks) > 1:
            raise ValueError("Team sheet has more than one captain")
        if sum(p.is_vice_captain for p in picks) > 1:
            raise ValueError("Team sheet has more than one vice-captain")

    def _parse_chip(self, chip: Union[ChipType, str, None]) -> Optional[ChipType]:
        if chip is None or isinstance(chip, ChipType):
            return chip
        try:
            return ChipType(chip)
        except ValueError:
            logger.warning(f"⚠️ Unknown chip '{chip}', scoring without a chip")
            return None
