"""Squad domain model with value semantics.

A Squad is never changed in place: ``apply`` validates a move against the
budget and club-cap invariants and returns a new Squad. Rejected moves raise
before anything is built, so a plan can never hold a half-applied transfer.
"""

from collections import Counter
from typing import TYPE_CHECKING, Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..common.errors import (
    BudgetViolation,
    ClubCapViolation,
    DuplicatePlayerError,
    InvalidMoveError,
    InvalidSquadError,
)
from .player import POSITION_ORDER, Player, Position

if TYPE_CHECKING:
    from .transfer_plan import Move

#: Required squad composition (2 GKP, 5 DEF, 5 MID, 3 FWD).
SQUAD_COMPOSITION: Dict[Position, int] = {
    Position.GKP: 2,
    Position.DEF: 5,
    Position.MID: 5,
    Position.FWD: 3,
}

DEFAULT_CLUB_LIMIT = 3


class Squad(BaseModel):
    """A manager's roster plus bank balance."""

    model_config = ConfigDict(frozen=True)

    players: Tuple[Player, ...] = Field(..., description="Squad players in slot order")
    bank: int = Field(default=0, ge=0, description="Bank in tenths of a million")
    starting_ids: FrozenSet[int] = Field(
        default_factory=frozenset, description="Player IDs flagged as starters"
    )
    captain_id: Optional[int] = Field(None, description="Captain player ID")
    vice_captain_id: Optional[int] = Field(None, description="Vice-captain player ID")

    @model_validator(mode="after")
    def validate_membership(self):
        ids = [p.player_id for p in self.players]
        duplicates = sorted(pid for pid, n in Counter(ids).items() if n > 1)
        if duplicates:
            raise ValueError(f"Duplicate players in squad: {duplicates}")
        id_set = set(ids)
        if not self.starting_ids <= id_set:
            raise ValueError("Starting IDs must all belong to the squad")
        for flag in (self.captain_id, self.vice_captain_id):
            if flag is not None and flag not in id_set:
                raise ValueError(f"Captaincy flag {flag} is not in the squad")
        return self

    @property
    def player_ids(self) -> FrozenSet[int]:
        return frozenset(p.player_id for p in self.players)

    @property
    def value(self) -> int:
        """Total price of all squad players (tenths)."""
        return sum(p.price for p in self.players)

    @property
    def starters(self) -> Tuple[Player, ...]:
        """Starters by flag; falls back to the first 11 slots when unflagged."""
        if self.starting_ids:
            return tuple(p for p in self.players if p.player_id in self.starting_ids)
        return self.players[:11]

    @property
    def bench(self) -> Tuple[Player, ...]:
        starter_ids = {p.player_id for p in self.starters}
        return tuple(p for p in self.players if p.player_id not in starter_ids)

    @property
    def starting_value(self) -> int:
        return sum(p.price for p in self.starters)

    def get(self, player_id: int) -> Optional[Player]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def __contains__(self, player_id: object) -> bool:
        return any(p.player_id == player_id for p in self.players)

    def __len__(self) -> int:
        return len(self.players)

    def composition(self) -> Dict[Position, int]:
        counts = Counter(p.position for p in self.players)
        return {pos: counts.get(pos, 0) for pos in POSITION_ORDER}

    @property
    def has_valid_composition(self) -> bool:
        return self.composition() == SQUAD_COMPOSITION

    def club_counts(self, excluding: Optional[int] = None) -> Counter:
        """Players per club, optionally with one (outgoing) player removed."""
        return Counter(p.team_id for p in self.players if p.player_id != excluding)

    def validate_for_optimization(self, squad_size: int = 15) -> None:
        """Reject input no optimizer can scan. Raises InvalidSquadError."""
        if len(self.players) != squad_size:
            raise InvalidSquadError(
                f"Squad must have exactly {squad_size} players, got {len(self.players)}"
            )

    def with_bank(self, bank: int) -> "Squad":
        """Same squad with a different (validated) bank balance."""
        return Squad(
            players=self.players,
            bank=bank,
            starting_ids=self.starting_ids,
            captain_id=self.captain_id,
            vice_captain_id=self.vice_captain_id,
        )

    def apply(self, move: "Move", club_limit: int = DEFAULT_CLUB_LIMIT) -> "Squad":
        """Return a new Squad with ``move`` applied."""
        return self.swap(move.player_out, move.player_in, club_limit=club_limit)

    def swap(
        self,
        player_out: Player,
        player_in: Player,
        club_limit: int = DEFAULT_CLUB_LIMIT,
    ) -> "Squad":
        """Replace ``player_out`` with ``player_in`` after checking every constraint.

        Raises:
            InvalidMoveError: outgoing player not in squad or position mismatch
            DuplicatePlayerError: incoming player already in squad
            BudgetViolation: incoming price exceeds bank + outgoing price
            ClubCapViolation: a club would exceed ``club_limit``
        """
        if player_out.player_id not in self:
            raise InvalidMoveError(
                f"{player_out.web_name} is not in the squad", player_in.player_id
            )
        if player_in.player_id in self:
            raise DuplicatePlayerError(
                f"{player_in.web_name} is already in the squad", player_in.player_id
            )
        if player_in.position != player_out.position:
            raise InvalidMoveError(
                f"Position mismatch: {player_out.position.value} out, "
                f"{player_in.position.value} in",
                player_in.player_id,
            )

        available = self.bank + player_out.price
        if player_in.price > available:
            raise BudgetViolation(
                f"{player_in.web_name} costs {player_in.price}, only {available} available",
                player_in.player_id,
            )

        counts = self.club_counts(excluding=player_out.player_id)
        if counts.get(player_in.team_id, 0) + 1 > club_limit:
            raise ClubCapViolation(
                f"Club {player_in.team_id} already has {counts[player_in.team_id]} players",
                player_in.player_id,
            )

        out_id, in_id = player_out.player_id, player_in.player_id

        def _carry(flag: Optional[int]) -> Optional[int]:
            return in_id if flag == out_id else flag

        starting_ids = self.starting_ids
        if out_id in starting_ids:
            starting_ids = (starting_ids - {out_id}) | {in_id}

        return Squad(
            players=tuple(
                player_in if p.player_id == out_id else p for p in self.players
            ),
            bank=available - player_in.price,
            starting_ids=starting_ids,
            captain_id=_carry(self.captain_id),
            vice_captain_id=_carry(self.vice_captain_id),
        )
