"""Tests for Player and ProjectedPlayer models."""

import pytest

from fpl_transfer_engine.domain.models.player import (
    AvailabilityStatus,
    Player,
    Position,
    ProjectedPlayer,
)


class TestPlayer:
    """Test Player model validation and derived fields."""

    def test_valid_player_creation(self):
        """Test creating a valid player."""
        player = Player(
            player_id=1,
            web_name="Haaland",
            team_id=11,
            position=Position.FWD,
            price=150,
            form=8.5,
            total_points=120,
            selected_by_percent=55.2,
        )

        assert player.price_m == 15.0
        assert player.is_available is True
        assert player.is_unavailable is False
        assert player.points_per_million == pytest.approx(8.0)
        assert str(player) == "Haaland (FWD, £15.0m)"

    def test_player_validation_errors(self):
        """Test various validation errors."""
        base = {"player_id": 1, "web_name": "Test", "team_id": 1, "position": "GKP"}

        with pytest.raises(ValueError):
            Player(**{**base, "price": -1})
        with pytest.raises(ValueError):
            Player(**{**base, "price": 45, "player_id": 0})
        with pytest.raises(ValueError):
            Player(**{**base, "price": 45, "chance_of_playing_next_round": 120})
        with pytest.raises(ValueError):
            Player(**{**base, "price": 45, "position": "ST"})

    def test_player_is_frozen(self):
        """Players are read-only facts."""
        player = Player(
            player_id=1, web_name="Test", team_id=1, position=Position.MID, price=50
        )
        with pytest.raises(ValueError):
            player.price = 60

    @pytest.mark.parametrize(
        "status,unavailable",
        [("a", False), ("d", False), ("i", True), ("s", True), ("u", True), ("n", True)],
    )
    def test_unavailable_statuses(self, make_player, status, unavailable):
        """Injured, suspended, unavailable and not-in-squad count as unavailable."""
        player = make_player(1, status=AvailabilityStatus(status))
        assert player.is_unavailable is unavailable

    def test_news_none_becomes_empty(self, make_player):
        assert make_player(1, news=None).news == ""

    def test_net_transfers_event(self, make_player):
        player = make_player(1, transfers_in_event=1000, transfers_out_event=61000)
        assert player.net_transfers_event == -60000

    def test_position_from_element_type(self):
        assert Position.from_element_type(1) == Position.GKP
        assert Position.from_element_type(4) == Position.FWD
        with pytest.raises(ValueError, match="Unknown element_type"):
            Position.from_element_type(5)


class TestProjectedPlayer:
    def test_delegates_identity(self, make_player):
        pp = ProjectedPlayer(
            player=make_player(7, Position.DEF), projected_points=4.2
        )
        assert pp.player_id == 7
        assert pp.position == Position.DEF
        assert pp.projected_minutes == 0.0
