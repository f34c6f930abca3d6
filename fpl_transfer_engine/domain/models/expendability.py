"""Expendability ("weakest link") domain models."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .player import Player


class ExpendabilityReason(str, Enum):
    """Why a squad player is a transfer-out candidate."""

    INJURED = "injured"
    SUSPENDED = "suspended"
    DOUBTFUL = "doubtful"
    LOW_MINUTES = "low_minutes"
    ROTATION_RISK = "rotation_risk"
    LOW_XP = "low_xp"
    POOR_FIXTURES = "poor_fixtures"
    BLANKS = "blanks"
    DECLINING_FORM = "declining_form"
    PRICE_DROP = "price_drop"
    LOCKED = "locked"

    @property
    def priority(self) -> int:
        """Tie-break rank between equal impacts (lower first)."""
        return _REASON_PRIORITY[self]

    @property
    def label(self) -> str:
        return _REASON_LABELS[self]


_REASON_PRIORITY = {reason: i for i, reason in enumerate(ExpendabilityReason)}

_REASON_LABELS = {
    ExpendabilityReason.INJURED: "Injured / unavailable",
    ExpendabilityReason.SUSPENDED: "Suspended",
    ExpendabilityReason.DOUBTFUL: "Doubtful",
    ExpendabilityReason.LOW_MINUTES: "Low projected minutes",
    ExpendabilityReason.ROTATION_RISK: "Rotation risk",
    ExpendabilityReason.LOW_XP: "Low projected points",
    ExpendabilityReason.POOR_FIXTURES: "Poor upcoming fixtures",
    ExpendabilityReason.BLANKS: "Blank gameweeks",
    ExpendabilityReason.DECLINING_FORM: "Declining form",
    ExpendabilityReason.PRICE_DROP: "Negative price momentum",
    ExpendabilityReason.LOCKED: "Locked by manager",
}


class ReasonContribution(BaseModel):
    """One reason and the points it adds to the score."""

    model_config = ConfigDict(frozen=True)

    reason: ExpendabilityReason
    impact: int = Field(..., ge=0)
    detail: str = ""

    def __str__(self) -> str:
        detail = f" ({self.detail})" if self.detail else ""
        return f"{self.reason.label}{detail}: +{self.impact}"


class ExpendabilitySignals(BaseModel):
    """Recent performance and outlook signals for one player."""

    model_config = ConfigDict(frozen=True)

    projected_points: float = Field(..., description="Projected points over window")
    window_length: int = Field(default=1, ge=1, description="Gameweeks in window")
    projected_minutes: Optional[float] = Field(
        None, ge=0.0, description="Projected minutes per gameweek"
    )
    average_fixture_difficulty: Optional[float] = Field(None, ge=1.0, le=5.0)
    blank_gameweeks: int = Field(default=0, ge=0)

    @property
    def points_per_gameweek(self) -> float:
        return self.projected_points / self.window_length


class ExpendabilityScore(BaseModel):
    """Bounded 0-100 score with reasons ranked by impact."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    reasons: Tuple[ReasonContribution, ...] = Field(default_factory=tuple)

    @field_validator("reasons")
    @classmethod
    def validate_reason_order(cls, v):
        return tuple(sorted(v, key=lambda c: (-c.impact, c.reason.priority)))

    @property
    def primary_reason(self) -> Optional[ExpendabilityReason]:
        return self.reasons[0].reason if self.reasons else None

    def has_reason(self, reason: ExpendabilityReason) -> bool:
        return any(c.reason == reason for c in self.reasons)


class ExpendabilityAssessment(BaseModel):
    """A squad player's expendability within a ranking run."""

    model_config = ConfigDict(frozen=True)

    player: Player
    signals: ExpendabilitySignals
    score: ExpendabilityScore
    is_locked: bool = False
    is_expendable: bool = False

    @property
    def player_id(self) -> int:
        return self.player.player_id
