"""Gameweek picks and live scoring models."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ChipType(str, Enum):
    """FPL chips, keyed by the API's ``active_chip`` strings."""

    TRIPLE_CAPTAIN = "3xc"
    BENCH_BOOST = "bboost"
    WILDCARD = "wildcard"
    FREE_HIT = "freehit"


class Pick(BaseModel):
    """One slot of a gameweek team sheet."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    player_id: int = Field(..., gt=0, alias="element")
    slot: int = Field(..., ge=1, le=15, alias="position", description="1-11 start")
    is_captain: bool = False
    is_vice_captain: bool = False

    @property
    def is_starter(self) -> bool:
        return self.slot <= 11


class PickScore(BaseModel):
    """Live points for one pick."""

    model_config = ConfigDict(frozen=True)

    pick: Pick
    base_points: int
    multiplier: int = Field(..., ge=0, le=3)

    @property
    def points(self) -> int:
        return self.base_points * self.multiplier


class LivePointsBreakdown(BaseModel):
    """Gameweek total plus the per-pick scoring that produced it."""

    model_config = ConfigDict(frozen=True)

    breakdown: Tuple[PickScore, ...] = Field(default_factory=tuple)
    chip: Optional[ChipType] = None

    @property
    def total(self) -> int:
        return sum(s.points for s in self.breakdown)

    @property
    def bench_points(self) -> int:
        """Points left on the bench (scored as if bench boost were active)."""
        return sum(s.base_points for s in self.breakdown if not s.pick.is_starter)

    @property
    def captain_points(self) -> int:
        return sum(s.points for s in self.breakdown if s.pick.is_captain)
