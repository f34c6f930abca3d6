"""Tests for the Squad value model and its move constraints."""

import pytest

from fpl_transfer_engine.domain.common.errors import (
    BudgetViolation,
    ClubCapViolation,
    DuplicatePlayerError,
    InvalidMoveError,
    InvalidSquadError,
)
from fpl_transfer_engine.domain.models.player import Position
from fpl_transfer_engine.domain.models.squad import SQUAD_COMPOSITION, Squad
from fpl_transfer_engine.domain.models.transfer_plan import Move


class TestSquadValidation:
    """Test squad construction rules."""

    def test_standard_squad(self, make_squad):
        squad = make_squad(bank=15)

        assert len(squad) == 15
        assert squad.has_valid_composition
        assert squad.composition() == SQUAD_COMPOSITION
        assert squad.value == 750
        assert squad.bank == 15

    def test_duplicate_players_rejected(self, make_player):
        p = make_player(1)
        with pytest.raises(ValueError, match="Duplicate players"):
            Squad(players=(p, p))

    def test_negative_bank_rejected(self, make_squad):
        with pytest.raises(ValueError):
            make_squad(bank=-1)

    def test_starting_ids_must_belong_to_squad(self, make_squad):
        with pytest.raises(ValueError, match="Starting IDs"):
            make_squad(starting_ids=frozenset({99}))

    def test_captain_must_belong_to_squad(self, make_squad):
        with pytest.raises(ValueError, match="Captaincy flag"):
            make_squad(captain_id=99)

    def test_validate_for_optimization_requires_fifteen(self, make_squad):
        squad = make_squad()
        short = Squad(players=squad.players[:14])

        squad.validate_for_optimization()
        with pytest.raises(InvalidSquadError, match="exactly 15"):
            short.validate_for_optimization()

    def test_starters_fall_back_to_first_eleven(self, make_squad):
        squad = make_squad()
        assert [p.player_id for p in squad.starters] == list(range(1, 12))
        assert [p.player_id for p in squad.bench] == [12, 13, 14, 15]

    def test_starting_value_uses_flags(self, make_squad):
        flagged = frozenset(range(1, 12))
        squad = make_squad(starting_ids=flagged, prices={1: 100})
        assert squad.starting_value == 100 + 10 * 50

    def test_club_counts_excluding_outgoing(self, make_squad):
        squad = make_squad(teams={3: 20, 4: 20, 5: 20})
        assert squad.club_counts()[20] == 3
        assert squad.club_counts(excluding=3)[20] == 2


class TestSquadApply:
    """Test Squad.apply value semantics and constraint checks."""

    def test_apply_returns_new_squad(self, make_squad, make_player):
        squad = make_squad(bank=5, captain_id=13, starting_ids=frozenset(range(5, 16)))
        incoming = make_player(101, Position.FWD, price=54)

        new_squad = squad.apply(Move(player_out=squad.get(13), player_in=incoming))

        assert 13 in squad and 101 not in squad
        assert 101 in new_squad and 13 not in new_squad
        assert new_squad.bank == 1
        assert new_squad.captain_id == 101
        assert 101 in new_squad.starting_ids
        # Incoming inherits the outgoing slot
        assert new_squad.players[12].player_id == 101

    def test_budget_boundary(self, make_squad, make_player):
        """Outgoing 5.0 with 0.5 in the bank: 5.5 is affordable, 5.6 is not."""
        squad = make_squad(bank=5)
        outgoing = squad.get(13)

        assert squad.swap(outgoing, make_player(101, Position.FWD, price=55)).bank == 0
        with pytest.raises(BudgetViolation):
            squad.swap(outgoing, make_player(102, Position.FWD, price=56))

    def test_club_cap_counts_after_removal(self, make_squad, make_player):
        squad = make_squad(teams={3: 20, 4: 20, 5: 20})

        # Replacing a club-20 defender with another club-20 defender keeps 3
        same_club = squad.swap(squad.get(3), make_player(101, Position.DEF, team_id=20))
        assert same_club.club_counts()[20] == 3

        with pytest.raises(ClubCapViolation):
            squad.swap(squad.get(6), make_player(102, Position.DEF, team_id=20))

    def test_duplicate_incoming_rejected(self, make_squad):
        squad = make_squad()
        with pytest.raises(DuplicatePlayerError):
            squad.swap(squad.get(3), squad.get(4))

    def test_outgoing_must_be_in_squad(self, make_squad, make_player):
        squad = make_squad()
        with pytest.raises(InvalidMoveError, match="not in the squad"):
            squad.swap(make_player(200, Position.DEF), make_player(201, Position.DEF))

    def test_position_mismatch_rejected(self, make_squad, make_player):
        squad = make_squad()
        with pytest.raises(InvalidMoveError, match="Position mismatch"):
            squad.swap(squad.get(3), make_player(101, Position.MID))

    def test_with_bank_validates(self, make_squad):
        squad = make_squad(bank=0)
        assert squad.with_bank(20).bank == 20
        with pytest.raises(ValueError):
            squad.with_bank(-5)
