"""Transfer plan domain models."""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..common.result import DomainError
from .player import Player, Position
from .squad import DEFAULT_CLUB_LIMIT, Squad


class OptimizerState(str, Enum):
    """States of a greedy optimizer run."""

    SCANNING = "scanning"
    APPLYING = "applying"
    CONVERGED = "converged"
    CAPPED = "capped"
    INFEASIBLE = "infeasible"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self not in (OptimizerState.SCANNING, OptimizerState.APPLYING)


class Move(BaseModel):
    """Single player transfer."""

    model_config = ConfigDict(frozen=True)

    player_out: Player = Field(..., description="Player being transferred out")
    player_in: Player = Field(..., description="Player being transferred in")
    point_delta: float = Field(
        default=0.0, description="Best-lineup point change this move produced"
    )
    penalty: float = Field(default=0.0, ge=0.0, description="Hit paid for this move")

    @model_validator(mode="after")
    def validate_same_position(self):
        if self.player_out.position != self.player_in.position:
            raise ValueError(
                f"Move must keep position: {self.player_out.position.value} out, "
                f"{self.player_in.position.value} in"
            )
        if self.player_out.player_id == self.player_in.player_id:
            raise ValueError("Move must swap two different players")
        return self

    @property
    def position(self) -> Position:
        return self.player_out.position

    @property
    def price_delta(self) -> int:
        """Incoming minus outgoing price (positive = more expensive)."""
        return self.player_in.price - self.player_out.price

    @property
    def is_hit(self) -> bool:
        return self.penalty > 0

    def __str__(self) -> str:
        hit = f" (-{self.penalty:g})" if self.is_hit else ""
        return (
            f"{self.player_out.web_name} -> {self.player_in.web_name} "
            f"[{self.point_delta:+.2f}]{hit}"
        )


class Plan(BaseModel):
    """
    Ordered sequence of moves applied to a base squad.

    Plans are values. ``extend`` validates the move by applying it to the
    current squad first, so a move that breaks the budget or club cap raises
    and is never appended.
    """

    model_config = ConfigDict(frozen=True)

    base_squad: Squad
    squad: Squad
    moves: Tuple[Move, ...] = Field(default_factory=tuple)
    base_points: float = Field(..., description="Best-lineup total of the base squad")
    final_points: float = Field(..., description="Best-lineup total after all moves")
    total_penalty: float = Field(default=0.0, ge=0.0)
    state: OptimizerState = Field(default=OptimizerState.SCANNING)
    is_partial: bool = Field(default=False, description="Run stopped by cancellation")
    errors: Tuple[DomainError, ...] = Field(
        default_factory=tuple, description="Outcomes reported during the run"
    )

    @classmethod
    def start(cls, squad: Squad, base_points: float) -> "Plan":
        """Empty plan rooted at ``squad``."""
        return cls(
            base_squad=squad,
            squad=squad,
            base_points=base_points,
            final_points=base_points,
        )

    @property
    def bank(self) -> int:
        return self.squad.bank

    @property
    def gross_gain(self) -> float:
        return self.final_points - self.base_points

    @property
    def net_gain(self) -> float:
        return self.gross_gain - self.total_penalty

    @property
    def move_count(self) -> int:
        return len(self.moves)

    @property
    def transferred_out_ids(self) -> frozenset:
        return frozenset(m.player_out.player_id for m in self.moves)

    def extend(
        self,
        move: Move,
        points: float,
        penalty: float = 0.0,
        club_limit: int = DEFAULT_CLUB_LIMIT,
    ) -> "Plan":
        """Return a new plan with ``move`` committed.

        Args:
            move: Move to apply to the current squad
            points: Best-lineup total after the move
            penalty: Hit charged for this move

        Raises:
            ConstraintViolation: when the move breaks a squad invariant
        """
        new_squad = self.squad.apply(move, club_limit=club_limit)
        committed = move.model_copy(
            update={"point_delta": points - self.final_points, "penalty": penalty}
        )
        return self.model_copy(
            update={
                "squad": new_squad,
                "moves": self.moves + (committed,),
                "final_points": points,
                "total_penalty": self.total_penalty + penalty,
                "state": OptimizerState.APPLYING,
            }
        )

    def with_state(self, state: OptimizerState, **updates) -> "Plan":
        return self.model_copy(update={"state": state, **updates})

    @property
    def messages(self) -> Tuple[str, ...]:
        return tuple(e.message for e in self.errors)

    def with_error(self, error: DomainError) -> "Plan":
        """Record a reported outcome once; repeats of the same message are dropped."""
        if error.message in self.messages:
            return self
        return self.model_copy(update={"errors": self.errors + (error,)})

    def summary(self) -> str:
        if not self.moves:
            return f"No transfers ({self.state.value})"
        moves = ", ".join(str(m) for m in self.moves)
        return (
            f"{self.move_count} transfer(s): {moves} | gross {self.gross_gain:+.2f}, "
            f"penalty {self.total_penalty:g}, net {self.net_gain:+.2f}"
        )


class ReplacementSuggestion(BaseModel):
    """One ranked replacement for an outgoing player."""

    model_config = ConfigDict(frozen=True)

    player: Player
    projected_points: float
    projected_minutes: float = 0.0
    gain: float = Field(..., description="Candidate minus outgoing projected points")
    reasons: Tuple[str, ...] = Field(default_factory=tuple, description="Why bring in")


class ReplacementSuggestions(BaseModel):
    """Top-K suggestions for one outgoing slot."""

    model_config = ConfigDict(frozen=True)

    outgoing: Player
    outgoing_points: float = 0.0
    suggestions: Tuple[ReplacementSuggestion, ...] = Field(default_factory=tuple)
    evaluated: int = Field(default=0, ge=0, description="Candidates projected")
    is_partial: bool = False
    error: Optional[DomainError] = None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @property
    def best(self) -> Optional[ReplacementSuggestion]:
        return self.suggestions[0] if self.suggestions else None

    def __len__(self) -> int:
        return len(self.suggestions)


class CandidateFilters(BaseModel):
    """User-controlled candidate pool filters."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    prefer_nailed: bool = Field(
        default=False, description="Drop injured, suspended and unavailable players"
    )
    excluded_team_ids: FrozenSet[int] = Field(default_factory=frozenset)
    excluded_player_ids: FrozenSet[int] = Field(default_factory=frozenset)
    name_contains: Optional[str] = Field(
        None, description="Case-insensitive web name substring"
    )

    @field_validator("name_contains")
    @classmethod
    def validate_name_contains(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class CandidatePool(BaseModel):
    """Filtered, quality-ranked replacement candidates for one slot."""

    model_config = ConfigDict(frozen=True)

    position: Position
    ceiling: int = Field(..., description="Spending ceiling (tenths)")
    outgoing: Optional[Player] = None
    candidates: Tuple[Player, ...] = Field(default_factory=tuple)
    rejected: Dict[str, int] = Field(
        default_factory=dict, description="Rejections per filter stage"
    )

    @property
    def is_empty(self) -> bool:
        return not self.candidates

    @property
    def candidate_ids(self) -> List[int]:
        return [p.player_id for p in self.candidates]

    def __len__(self) -> int:
        return len(self.candidates)
