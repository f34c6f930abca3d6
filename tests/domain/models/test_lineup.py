"""Tests for formations, the catalog, lineups and wildcard results."""

import pytest

from fpl_transfer_engine.domain.models.lineup import (
    FORMATION_CATALOG,
    Formation,
    Lineup,
    WildcardSquad,
)
from fpl_transfer_engine.domain.models.player import Position, ProjectedPlayer


def _starters(make_player, points):
    layout = [Position.GKP] + [Position.DEF] * 4 + [Position.MID] * 4 + [Position.FWD] * 2
    return tuple(
        ProjectedPlayer(player=make_player(i, pos), projected_points=pts)
        for i, (pos, pts) in enumerate(zip(layout, points), start=1)
    )


class TestFormation:
    def test_catalog_order_and_shape(self):
        """Catalog order is observable (it breaks ties), so pin it."""
        assert [f.name for f in FORMATION_CATALOG] == [
            "3-4-3",
            "3-5-2",
            "4-4-2",
            "4-3-3",
            "4-5-1",
            "5-4-1",
            "5-3-2",
            "5-2-3",
        ]
        for formation in FORMATION_CATALOG:
            assert sum(formation.requirements().values()) == 11
            assert formation.requirements()[Position.GKP] == 1

    def test_outfield_must_total_ten(self):
        with pytest.raises(ValueError, match="10 outfield"):
            Formation(defenders=4, midfielders=4, forwards=3)

    def test_bounds(self):
        with pytest.raises(ValueError):
            Formation(defenders=2, midfielders=5, forwards=3)

    def test_formations_are_hashable_constants(self):
        assert Formation(defenders=4, midfielders=4, forwards=2) == FORMATION_CATALOG[2]
        assert len(set(FORMATION_CATALOG)) == len(FORMATION_CATALOG)


class TestLineup:
    def test_captain_and_vice(self, make_player):
        points = [5, 4, 4, 4, 4, 6, 6, 9, 6, 7, 3]
        lineup = Lineup(
            formation=FORMATION_CATALOG[2],
            starters=_starters(make_player, points),
            total_points=sum(points),
        )

        assert lineup.captain.player_id == 8
        assert lineup.vice_captain.player_id == 10
        assert len(lineup.starters_at(Position.DEF)) == 4

    def test_requires_eleven_starters(self, make_player):
        with pytest.raises(ValueError):
            Lineup(
                formation=FORMATION_CATALOG[2],
                starters=_starters(make_player, [1.0] * 10),
                total_points=10.0,
            )


class TestWildcardSquad:
    def test_remaining_budget(self, make_player):
        lineup = Lineup(
            formation=FORMATION_CATALOG[2],
            starters=_starters(make_player, [2.0] * 11),
            total_points=22.0,
        )
        wildcard = WildcardSquad(lineup=lineup, ceiling=830, total_spend=815)

        assert wildcard.remaining_budget == 15
        assert wildcard.total_points == 22.0
        assert wildcard.budget_summary() == "4-4-2 £81.5m spent, £1.5m left"
