"""Player domain model with strict FPL validation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Position(str, Enum):
    """FPL player positions."""

    GKP = "GKP"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"

    @classmethod
    def from_element_type(cls, element_type: int) -> "Position":
        """Map the FPL API ``element_type`` (1-4) to a position."""
        mapping = {1: cls.GKP, 2: cls.DEF, 3: cls.MID, 4: cls.FWD}
        if element_type not in mapping:
            raise ValueError(f"Unknown element_type: {element_type}")
        return mapping[element_type]


#: Position order used for lineups, bench ordering and wildcard fills.
POSITION_ORDER = (Position.GKP, Position.DEF, Position.MID, Position.FWD)


class AvailabilityStatus(str, Enum):
    """Player availability status."""

    AVAILABLE = "a"
    DOUBTFUL = "d"
    INJURED = "i"
    SUSPENDED = "s"
    UNAVAILABLE = "u"
    NOT_IN_SQUAD = "n"  # Sometimes appears in FPL data


UNAVAILABLE_STATUSES = frozenset(
    {
        AvailabilityStatus.INJURED,
        AvailabilityStatus.SUSPENDED,
        AvailabilityStatus.UNAVAILABLE,
        AvailabilityStatus.NOT_IN_SQUAD,
    }
)


class Player(BaseModel):
    """
    Domain model for FPL players.

    Read-only facts supplied by the roster source. The engine copies players
    into squad slots but never mutates them.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    player_id: int = Field(..., gt=0, description="Unique FPL player ID")
    web_name: str = Field(..., min_length=1, max_length=50, description="Display name")
    team_id: int = Field(..., ge=1, description="Club identifier")
    position: Position = Field(..., description="Player position")
    price: int = Field(
        ..., ge=0, description="Price in tenths of a million (FPL now_cost)"
    )
    status: AvailabilityStatus = Field(
        default=AvailabilityStatus.AVAILABLE, description="Availability status"
    )
    news: str = Field(default="", description="Latest injury/availability news")
    chance_of_playing_next_round: Optional[float] = Field(
        None, ge=0.0, le=100.0, description="Chance of playing next round (%)"
    )
    form: float = Field(default=0.0, description="Recent form score")
    points_per_game: float = Field(default=0.0, description="Season points per game")
    total_points: int = Field(default=0, description="Season total points")
    transfers_in_event: int = Field(default=0, ge=0)
    transfers_out_event: int = Field(default=0, ge=0)
    selected_by_percent: float = Field(default=0.0, ge=0.0, le=100.0)

    @field_validator("news", mode="before")
    @classmethod
    def validate_news(cls, v: Optional[str]) -> str:
        """Treat missing news as an empty string."""
        return v or ""

    @property
    def price_m(self) -> float:
        """Price in millions."""
        return self.price / 10

    @property
    def is_available(self) -> bool:
        return self.status == AvailabilityStatus.AVAILABLE

    @property
    def is_unavailable(self) -> bool:
        """Injured, suspended, unavailable or not in the club's squad."""
        return self.status in UNAVAILABLE_STATUSES

    @property
    def net_transfers_event(self) -> int:
        """Transfers in minus transfers out for the current gameweek."""
        return self.transfers_in_event - self.transfers_out_event

    @property
    def points_per_million(self) -> float:
        if self.price == 0:
            return 0.0
        return self.total_points / self.price_m

    def __str__(self) -> str:
        return f"{self.web_name} ({self.position.value}, £{self.price_m:.1f}m)"


class ProjectedPlayer(BaseModel):
    """A player paired with projection-service output for one window."""

    model_config = ConfigDict(frozen=True)

    player: Player
    projected_points: float = Field(..., description="Projected points over window")
    projected_minutes: float = Field(
        default=0.0, ge=0.0, description="Projected minutes per gameweek"
    )

    @property
    def player_id(self) -> int:
        return self.player.player_id

    @property
    def position(self) -> Position:
        return self.player.position
