"""Shared fixtures: player/squad factories and an in-memory projection service."""

from typing import Dict, Iterable, Optional, Sequence

import pandas as pd
import pytest

from fpl_transfer_engine.config import EngineConfig
from fpl_transfer_engine.domain.common.errors import ProjectionUnavailableError
from fpl_transfer_engine.domain.models.player import Player, Position
from fpl_transfer_engine.domain.models.squad import Squad
from fpl_transfer_engine.domain.repositories.projection_repository import (
    ProjectionProvider,
)
from fpl_transfer_engine.domain.services.optimization_service import (
    OptimizationService,
)

# Standard squad slot layout: ids 1-2 GKP, 3-7 DEF, 8-12 MID, 13-15 FWD
SQUAD_LAYOUT = (
    [Position.GKP] * 2 + [Position.DEF] * 5 + [Position.MID] * 5 + [Position.FWD] * 3
)


class FakeProjections(ProjectionProvider):
    """Per-gameweek points and minutes from dictionaries."""

    def __init__(
        self,
        points: Dict[int, float],
        minutes: Optional[Dict[int, float]] = None,
        default_minutes: float = 90.0,
        failing: Iterable[int] = (),
    ):
        self.points = points
        self.minutes = minutes or {}
        self.default_minutes = default_minutes
        self.failing = set(failing)
        self.calls = 0

    def projected_points(self, player: Player, gameweeks: Sequence[int]) -> float:
        self.calls += 1
        if player.player_id in self.failing:
            raise ProjectionUnavailableError(player.player_id, "model timeout")
        return self.points.get(player.player_id, 0.0) * len(gameweeks)

    def projected_minutes(self, player: Player) -> float:
        if player.player_id in self.failing:
            raise ProjectionUnavailableError(player.player_id, "model timeout")
        return self.minutes.get(player.player_id, self.default_minutes)


def _make_player(
    player_id: int,
    position: Position = Position.MID,
    team_id: Optional[int] = None,
    price: int = 50,
    **kwargs,
) -> Player:
    return Player(
        player_id=player_id,
        web_name=kwargs.pop("web_name", f"P{player_id}"),
        team_id=team_id if team_id is not None else player_id,
        position=position,
        price=price,
        **kwargs,
    )


def _make_squad(
    bank: int = 0,
    teams: Optional[Dict[int, int]] = None,
    prices: Optional[Dict[int, int]] = None,
    **squad_kwargs,
) -> Squad:
    teams = teams or {}
    prices = prices or {}
    players = tuple(
        _make_player(
            pid,
            position,
            team_id=teams.get(pid, pid),
            price=prices.get(pid, 50),
        )
        for pid, position in enumerate(SQUAD_LAYOUT, start=1)
    )
    return Squad(players=players, bank=bank, **squad_kwargs)


@pytest.fixture
def make_player():
    """Factory for players; team defaults to the player ID (one per club)."""
    return _make_player


@pytest.fixture
def make_squad():
    """Factory for a valid 2/5/5/3 squad of 15 players priced 5.0m."""
    return _make_squad


@pytest.fixture
def make_projections():
    """Factory for in-memory projection providers."""
    return FakeProjections


@pytest.fixture
def engine_config():
    """Default configuration, isolated from FPL_* environment variables."""
    return EngineConfig()


@pytest.fixture
def make_service(engine_config):
    """Factory building an OptimizationService over FakeProjections."""

    def _build(points: Dict[int, float], config: Optional[EngineConfig] = None, **kw):
        provider = FakeProjections(points, **kw)
        return OptimizationService(provider, config or engine_config)

    return _build


@pytest.fixture
def bootstrap_frames():
    """FPL-style frames for one manager over gameweeks 1-2.

    Squad ids 1-15 use the standard slot layout with ``flat_points`` xP per
    gameweek. Non-squad players: 101 is a 9 xP forward, 102 an injured
    midfielder.
    """
    element_types = {Position.GKP: 1, Position.DEF: 2, Position.MID: 3, Position.FWD: 4}
    rows = [
        {
            "id": pid,
            "web_name": f"P{pid}",
            "team": pid,
            "element_type": element_types[position],
            "now_cost": 50,
            "status": "a",
            "form": "3.0",
            "points_per_game": "3.5",
            "total_points": 30,
            "selected_by_percent": "5.0",
        }
        for pid, position in enumerate(SQUAD_LAYOUT, start=1)
    ]
    rows.append(
        {
            "id": 101,
            "web_name": "Wissa",
            "team": 16,
            "element_type": 4,
            "now_cost": 50,
            "status": "a",
            "form": "7.0",
            "points_per_game": "5.0",
            "total_points": 60,
            "selected_by_percent": "2.5",
        }
    )
    rows.append(
        {
            "id": 102,
            "web_name": "Odegaard",
            "team": 17,
            "element_type": 3,
            "now_cost": 50,
            "status": "i",
            "news": "Ankle injury",
            "chance_of_playing_next_round": 0.0,
            "form": "1.0",
            "points_per_game": "4.0",
            "total_points": 40,
            "selected_by_percent": "12.0",
        }
    )
    players_df = pd.DataFrame(rows)

    picks_df = pd.DataFrame(
        {
            "event": [1] * 15,
            "element": list(range(1, 16)),
            "position": list(range(1, 16)),
            "is_captain": [pid == 8 for pid in range(1, 16)],
            "is_vice_captain": [pid == 9 for pid in range(1, 16)],
        }
    )

    xp = {pid: 5.0 for pid in range(1, 16)}
    xp.update({2: 1.0, 7: 1.0, 12: 1.0, 15: 1.0, 101: 9.0, 102: 2.0})
    projections_df = pd.DataFrame(
        [
            {
                "player_id": pid,
                "gameweek": gw,
                "xP": points,
                "expected_minutes": 85.0 if pid == 101 else 90.0,
            }
            for pid, points in xp.items()
            for gw in (1, 2)
        ]
    )

    fixtures_df = pd.DataFrame(
        {
            "event": [1, 2, None],
            "team_h": [1, 3, 5],
            "team_a": [2, 1, 6],
            "team_h_difficulty": [2, 3, 3],
            "team_a_difficulty": [4, 5, 3],
        }
    )
    return {
        "players": players_df,
        "picks": picks_df,
        "projections": projections_df,
        "fixtures": fixtures_df,
    }


@pytest.fixture
def flat_points():
    """5 xP for the 4-4-2 core, 1 xP for the fringe (GK2, DEF7, MID12, FWD15).

    The best lineup is 4-4-2 with a 55 point total.
    """
    points = {pid: 5.0 for pid in range(1, 16)}
    points.update({2: 1.0, 7: 1.0, 12: 1.0, 15: 1.0})
    return points
