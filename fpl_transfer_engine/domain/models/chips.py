"""Bench order and chip suggestion models."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .picks import ChipType
from .player import Player


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BenchSlot(BaseModel):
    """One bench player with the gameweek projection behind its priority."""

    model_config = ConfigDict(frozen=True)

    slot: int = Field(..., ge=12, le=15)
    player: Player
    projected_points: float = 0.0
    projected_minutes: float = 0.0
    priority: float = Field(
        default=0.0, description="Blend of xP and minutes; higher subs in first"
    )

    @property
    def player_id(self) -> int:
        return self.player.player_id


class BenchOrderWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    slot: int
    message: str
    reason: str
    impact: float = Field(..., description="Priority gap between the two players")


class BenchOrderAnalysis(BaseModel):
    """Current versus recommended outfield bench order.

    The bench goalkeeper always sits in slot 12 and is reported separately.
    """

    model_config = ConfigDict(frozen=True)

    gameweek: int
    goalkeeper: Optional[BenchSlot] = None
    current_order: Tuple[BenchSlot, ...] = Field(default_factory=tuple)
    optimal_order: Tuple[BenchSlot, ...] = Field(default_factory=tuple)
    warnings: Tuple[BenchOrderWarning, ...] = Field(default_factory=tuple)

    @property
    def is_suboptimal(self) -> bool:
        current = [s.player_id for s in self.current_order]
        return current != [s.player_id for s in self.optimal_order]

    @property
    def total_bench_points(self) -> float:
        total = sum(s.projected_points for s in self.current_order)
        if self.goalkeeper is not None:
            total += self.goalkeeper.projected_points
        return total


class ChipEvaluation(BaseModel):
    """Threshold check for one chip."""

    model_config = ConfigDict(frozen=True)

    chip: ChipType
    triggered: bool
    confidence: Optional[Confidence] = None
    projected_points: float = Field(
        default=0.0, description="Bench total (BB) or captain xP (TC)"
    )
    rationale: str


class ChipAdvice(BaseModel):
    """Chip suggestion for one gameweek; at most one chip is recommended."""

    model_config = ConfigDict(frozen=True)

    gameweek: int
    recommendation: Optional[ChipType] = None
    message: str = "No chip recommended"
    rationale: str = "Current squad setup does not meet chip thresholds"
    confidence: Optional[Confidence] = None
    bench_boost: Optional[ChipEvaluation] = None
    triple_captain: Optional[ChipEvaluation] = None

    @property
    def has_recommendation(self) -> bool:
        return self.recommendation is not None
