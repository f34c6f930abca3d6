"""Formation catalog and lineup domain models."""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .player import Position, ProjectedPlayer


class Formation(BaseModel):
    """Outfield shape of a starting XI. Goalkeepers are always 1."""

    model_config = ConfigDict(frozen=True)

    defenders: int = Field(..., ge=3, le=5)
    midfielders: int = Field(..., ge=2, le=5)
    forwards: int = Field(..., ge=1, le=3)

    @model_validator(mode="after")
    def validate_outfield_total(self):
        total = self.defenders + self.midfielders + self.forwards
        if total != 10:
            raise ValueError(f"Formation must have 10 outfield players, got {total}")
        return self

    @property
    def goalkeepers(self) -> int:
        return 1

    @property
    def name(self) -> str:
        return f"{self.defenders}-{self.midfielders}-{self.forwards}"

    def requirements(self) -> Dict[Position, int]:
        return {
            Position.GKP: self.goalkeepers,
            Position.DEF: self.defenders,
            Position.MID: self.midfielders,
            Position.FWD: self.forwards,
        }

    def __str__(self) -> str:
        return self.name


def _formation(d: int, m: int, f: int) -> Formation:
    return Formation(defenders=d, midfielders=m, forwards=f)


#: Legal formations in evaluation order. Ties between formations resolve to
#: the earlier entry, so the order here is observable behaviour.
FORMATION_CATALOG: Tuple[Formation, ...] = (
    _formation(3, 4, 3),
    _formation(3, 5, 2),
    _formation(4, 4, 2),
    _formation(4, 3, 3),
    _formation(4, 5, 1),
    _formation(5, 4, 1),
    _formation(5, 3, 2),
    _formation(5, 2, 3),
)


class Lineup(BaseModel):
    """A formation filled with 11 projected starters, plus the bench."""

    model_config = ConfigDict(frozen=True)

    formation: Formation
    starters: Tuple[ProjectedPlayer, ...] = Field(..., min_length=11, max_length=11)
    bench: Tuple[ProjectedPlayer, ...] = Field(default_factory=tuple, max_length=4)
    total_points: float = Field(..., description="Summed starter projections")

    @property
    def starter_ids(self) -> Tuple[int, ...]:
        return tuple(p.player_id for p in self.starters)

    @property
    def bench_ids(self) -> Tuple[int, ...]:
        return tuple(p.player_id for p in self.bench)

    def _by_projection(self) -> Tuple[ProjectedPlayer, ...]:
        return tuple(
            sorted(self.starters, key=lambda p: p.projected_points, reverse=True)
        )

    @property
    def captain(self) -> ProjectedPlayer:
        """Highest projected starter."""
        return self._by_projection()[0]

    @property
    def vice_captain(self) -> ProjectedPlayer:
        return self._by_projection()[1]

    def starters_at(self, position: Position) -> Tuple[ProjectedPlayer, ...]:
        return tuple(p for p in self.starters if p.position == position)


class WildcardSquad(BaseModel):
    """Result of a full rebuild under a spending ceiling."""

    model_config = ConfigDict(frozen=True)

    lineup: Lineup
    ceiling: int = Field(..., ge=0, description="Spending ceiling (tenths)")
    total_spend: int = Field(..., ge=0, description="Price of the chosen XI (tenths)")
    formations_evaluated: int = Field(default=0, ge=0)
    feasible_formations: Tuple[str, ...] = Field(default_factory=tuple)

    @property
    def remaining_budget(self) -> int:
        return self.ceiling - self.total_spend

    @property
    def formation(self) -> Formation:
        return self.lineup.formation

    @property
    def total_points(self) -> float:
        return self.lineup.total_points

    def budget_summary(self, label: Optional[str] = None) -> str:
        prefix = f"{label}: " if label else ""
        return (
            f"{prefix}{self.formation.name} £{self.total_spend / 10:.1f}m spent, "
            f"£{self.remaining_budget / 10:.1f}m left"
        )
