"""pandas-backed repository implementations.

Adapters that turn FPL bootstrap-style DataFrames (players, picks,
projections, fixtures) into the engine's domain models.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from fpl_transfer_engine.domain.common.errors import ProjectionUnavailableError
from fpl_transfer_engine.domain.common.result import DomainError, ErrorType, Result
from fpl_transfer_engine.domain.models.fixture import TeamFixture
from fpl_transfer_engine.domain.models.player import (
    AvailabilityStatus,
    Player,
    Position,
)
from fpl_transfer_engine.domain.models.squad import Squad
from fpl_transfer_engine.domain.repositories.projection_repository import (
    ProjectionProvider,
)
from fpl_transfer_engine.domain.repositories.roster_repository import (
    RosterRepository,
)


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and pd.isna(value))


class RawPlayerRow(BaseModel):
    """Pydantic model for validating one raw player row."""

    player_id: int = Field(..., gt=0)
    web_name: str = Field(..., min_length=1)
    team_id: int = Field(..., ge=1)
    position: str = Field(..., description="Position code or element_type")
    price: int = Field(..., ge=0, description="Price in 0.1m units")
    status: str = Field(default="a")
    news: Optional[str] = None
    chance_of_playing_next_round: Optional[float] = None
    form: Optional[Union[str, float]] = None
    points_per_game: Optional[Union[str, float]] = None
    total_points: Optional[Union[str, int, float]] = None
    transfers_in_event: Optional[Union[str, int, float]] = None
    transfers_out_event: Optional[Union[str, int, float]] = None
    selected_by_percent: Optional[Union[str, float]] = None

    @field_validator("*", mode="before")
    @classmethod
    def validate_missing(cls, v):
        """Treat pandas NaN as missing and unwrap numpy scalars."""
        if _is_missing(v):
            return None
        if hasattr(v, "item") and not isinstance(v, (str, bytes)):
            return v.item()
        return v

    @field_validator("position", mode="before")
    @classmethod
    def validate_position(cls, v) -> str:
        return str(v)

    def to_numeric(self, field_name: str, default: float = 0.0) -> float:
        """Safely convert a str/int/float field to float."""
        value = getattr(self, field_name)
        if value is None or value == "":
            return default
        try:
            return float(value)
        except (ValueError, TypeError):
            raise ValueError(f"Invalid numeric value for {field_name}: {value}")

    def to_domain(self) -> Player:
        return Player(
            player_id=self.player_id,
            web_name=self.web_name,
            team_id=self.team_id,
            position=_map_position(self.position),
            price=self.price,
            status=_map_status(self.status),
            news=self.news,
            chance_of_playing_next_round=self.chance_of_playing_next_round,
            form=self.to_numeric("form"),
            points_per_game=self.to_numeric("points_per_game"),
            total_points=int(self.to_numeric("total_points")),
            transfers_in_event=int(self.to_numeric("transfers_in_event")),
            transfers_out_event=int(self.to_numeric("transfers_out_event")),
            selected_by_percent=self.to_numeric("selected_by_percent"),
        )


def _map_position(position: str) -> Position:
    """Map a position code, name or element_type to the Position enum."""
    position_mapping = {
        "GKP": Position.GKP,
        "DEF": Position.DEF,
        "MID": Position.MID,
        "FWD": Position.FWD,
        "Goalkeeper": Position.GKP,
        "Defender": Position.DEF,
        "Midfielder": Position.MID,
        "Forward": Position.FWD,
    }
    if position in position_mapping:
        return position_mapping[position]
    try:
        return Position.from_element_type(int(float(position)))
    except ValueError:
        raise ValueError(f"Unknown position: {position}")


def _map_status(status: Optional[str]) -> AvailabilityStatus:
    if not status:
        return AvailabilityStatus.AVAILABLE
    try:
        return AvailabilityStatus(status)
    except ValueError:
        return AvailabilityStatus.UNAVAILABLE


def _first_present(row: pd.Series, *columns: str):
    for column in columns:
        if column in row.index and not _is_missing(row[column]):
            return row[column]
    return None


class DataFrameRosterRepository(RosterRepository):
    """Roster repository over a players frame and a picks frame.

    Players use FPL bootstrap columns (``id``/``player_id``, ``web_name``,
    ``team``/``team_id``, ``element_type``/``position``, ``now_cost``/``price``,
    ``status`` ...). Picks use the ``/entry/{id}/event/{gw}/picks`` columns
    (``element``, ``position`` slot, ``is_captain``, ``is_vice_captain``) plus
    an optional ``event`` column when several gameweeks are stored together.
    """

    def __init__(
        self,
        players_df: pd.DataFrame,
        picks_df: Optional[pd.DataFrame] = None,
        bank: int = 0,
        max_validation_error_rate: float = 0.1,
    ):
        self.players_df = players_df
        self.picks_df = picks_df if picks_df is not None else pd.DataFrame()
        self.bank = bank
        self.max_validation_error_rate = max_validation_error_rate

    def _row_to_player(self, row: pd.Series) -> Player:
        raw = RawPlayerRow(
            player_id=_first_present(row, "player_id", "id"),
            web_name=_first_present(row, "web_name"),
            team_id=_first_present(row, "team_id", "team"),
            position=_first_present(row, "position", "element_type"),
            price=_first_present(row, "now_cost", "price"),
            status=_first_present(row, "status") or "a",
            news=_first_present(row, "news"),
            chance_of_playing_next_round=_first_present(
                row, "chance_of_playing_next_round"
            ),
            form=_first_present(row, "form"),
            points_per_game=_first_present(row, "points_per_game"),
            total_points=_first_present(row, "total_points"),
            transfers_in_event=_first_present(row, "transfers_in_event"),
            transfers_out_event=_first_present(row, "transfers_out_event"),
            selected_by_percent=_first_present(row, "selected_by_percent"),
        )
        return raw.to_domain()

    def get_player_universe(self) -> Result[List[Player]]:
        """All players with row-level Pydantic validation."""
        try:
            if self.players_df.empty:
                return Result.failure(
                    DomainError.data_not_found("No player data available")
                )

            players: List[Player] = []
            validation_errors: List[str] = []
            for _, row in self.players_df.iterrows():
                try:
                    players.append(self._row_to_player(row))
                except (ValidationError, ValueError) as e:
                    pid = _first_present(row, "player_id", "id")
                    validation_errors.append(f"Player {pid}: {e}")

            error_rate = len(validation_errors) / len(self.players_df)
            if error_rate > self.max_validation_error_rate:
                return Result.failure(
                    DomainError.validation_error(
                        f"Too many validation errors: {len(validation_errors)}/"
                        f"{len(self.players_df)} ({error_rate:.1%}). "
                        f"Sample errors: {validation_errors[:3]}"
                    )
                )
            if validation_errors:
                logger.warning(
                    f"⚠️ {len(validation_errors)} players failed validation "
                    f"(within tolerance): {validation_errors[:3]}"
                )

            logger.debug(f"✅ Loaded {len(players)} players")
            return Result.success(players)

        except Exception as e:
            return Result.failure(
                DomainError(
                    error_type=ErrorType.DATA_ACCESS_ERROR,
                    message=f"Failed to load players: {str(e)}",
                )
            )

    def get_current_squad(self, gameweek: int) -> Result[Squad]:
        """The manager's squad for ``gameweek`` from the picks frame."""
        picks = self.picks_df
        if not picks.empty and "event" in picks.columns:
            picks = picks[picks["event"] == gameweek]
        if picks.empty:
            return Result.failure(
                DomainError.data_not_found(
                    f"No picks for gameweek {gameweek}", details={"gameweek": gameweek}
                )
            )

        universe = self.get_player_universe()
        if universe.is_failure:
            return Result.failure(universe.error)
        by_id = {p.player_id: p for p in universe.value}

        picks = picks.sort_values("position", kind="stable")
        missing = [int(e) for e in picks["element"] if int(e) not in by_id]
        if missing:
            return Result.failure(
                DomainError.data_not_found(
                    f"Picked players missing from player data: {missing}",
                    details={"missing": missing},
                )
            )

        players = tuple(by_id[int(e)] for e in picks["element"])
        starting_ids = frozenset(
            int(r["element"]) for _, r in picks.iterrows() if int(r["position"]) <= 11
        )
        captain_id = self._flagged(picks, "is_captain")
        vice_captain_id = self._flagged(picks, "is_vice_captain")

        try:
            squad = Squad(
                players=players,
                bank=self.bank,
                starting_ids=starting_ids,
                captain_id=captain_id,
                vice_captain_id=vice_captain_id,
            )
        except ValidationError as e:
            return Result.failure(
                DomainError.validation_error(f"Invalid squad for GW{gameweek}: {e}")
            )
        return Result.success(squad)

    @staticmethod
    def _flagged(picks: pd.DataFrame, column: str) -> Optional[int]:
        if column not in picks.columns:
            return None
        flagged = picks[picks[column].fillna(False).astype(bool)]
        return int(flagged["element"].iloc[0]) if not flagged.empty else None


class DataFrameProjectionProvider(ProjectionProvider):
    """Projection provider over a long-format projections frame.

    ``projections_df`` has one row per (``player_id``, ``gameweek``) with an
    ``xP`` column and optionally ``expected_minutes``. ``minutes_df`` can
    supply minutes separately (``player_id``, ``expected_minutes``).
    Gameweeks without a row count as 0 (blank). Unknown players raise
    ``ProjectionUnavailableError``.
    """

    def __init__(
        self,
        projections_df: pd.DataFrame,
        minutes_df: Optional[pd.DataFrame] = None,
        xp_column: str = "xP",
    ):
        self._points: Dict[int, Dict[int, float]] = {}
        for row in projections_df.itertuples(index=False):
            pid, gw = int(row.player_id), int(row.gameweek)
            xp = getattr(row, xp_column)
            self._points.setdefault(pid, {})[gw] = 0.0 if pd.isna(xp) else float(xp)

        source = minutes_df if minutes_df is not None else projections_df
        self._minutes: Dict[int, float] = {}
        if "expected_minutes" in source.columns:
            minutes = source.dropna(subset=["expected_minutes"])
            self._minutes = {
                int(pid): float(mins)
                for pid, mins in minutes.groupby("player_id")["expected_minutes"]
                .mean()
                .items()
            }

    def projected_points(self, player: Player, gameweeks: Sequence[int]) -> float:
        per_gw = self._points.get(player.player_id)
        if per_gw is None:
            raise ProjectionUnavailableError(player.player_id, "no projection rows")
        return sum(per_gw.get(int(gw), 0.0) for gw in gameweeks)

    def projected_minutes(self, player: Player) -> float:
        if player.player_id not in self._minutes:
            raise ProjectionUnavailableError(player.player_id, "no expected minutes")
        return self._minutes[player.player_id]


def build_fixtures_by_team(
    fixtures_df: pd.DataFrame, window: Optional[Iterable[int]] = None
) -> Dict[int, List[TeamFixture]]:
    """Split FPL fixture rows into per-team fixture lists.

    Args:
        fixtures_df: Rows with ``event``, ``team_h``, ``team_a``,
            ``team_h_difficulty`` and ``team_a_difficulty``
        window: Optional gameweeks to keep

    Returns:
        Team ID -> fixtures ordered by gameweek
    """
    df = fixtures_df.dropna(subset=["event"])
    if window is not None:
        df = df[df["event"].isin(list(window))]

    by_team: Dict[int, List[TeamFixture]] = {}
    for row in df.sort_values("event", kind="stable").itertuples(index=False):
        event = int(row.event)
        home, away = int(row.team_h), int(row.team_a)
        by_team.setdefault(home, []).append(
            TeamFixture(
                event=event,
                team_id=home,
                opponent_id=away,
                is_home=True,
                difficulty=int(row.team_h_difficulty),
            )
        )
        by_team.setdefault(away, []).append(
            TeamFixture(
                event=event,
                team_id=away,
                opponent_id=home,
                is_home=False,
                difficulty=int(row.team_a_difficulty),
            )
        )
    return by_team
