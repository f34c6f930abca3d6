"""Tests for transfer plan domain models."""

import pytest

from fpl_transfer_engine.domain.common.errors import BudgetViolation
from fpl_transfer_engine.domain.common.result import DomainError, ErrorType
from fpl_transfer_engine.domain.models.player import Position
from fpl_transfer_engine.domain.models.transfer_plan import (
    CandidateFilters,
    Move,
    OptimizerState,
    Plan,
)


class TestMove:
    """Test Move model validation."""

    def test_valid_move(self, make_player):
        move = Move(
            player_out=make_player(1, Position.MID, price=75),
            player_in=make_player(2, Position.MID, price=80),
        )
        assert move.price_delta == 5
        assert move.position == Position.MID
        assert move.is_hit is False

    def test_move_must_keep_position(self, make_player):
        with pytest.raises(ValueError, match="keep position"):
            Move(
                player_out=make_player(1, Position.MID),
                player_in=make_player(2, Position.FWD),
            )

    def test_move_needs_two_players(self, make_player):
        p = make_player(1)
        with pytest.raises(ValueError, match="different players"):
            Move(player_out=p, player_in=p)


class TestPlan:
    """Test incremental plan building."""

    def test_start_is_empty(self, make_squad):
        plan = Plan.start(make_squad(bank=10), base_points=55.0)

        assert plan.move_count == 0
        assert plan.gross_gain == 0.0
        assert plan.net_gain == 0.0
        assert plan.bank == 10
        assert plan.state == OptimizerState.SCANNING

    def test_extend_commits_move_and_penalty(self, make_squad, make_player):
        squad = make_squad(bank=10)
        plan = Plan.start(squad, base_points=55.0)
        first = Move(player_out=squad.get(13), player_in=make_player(101, Position.FWD))
        second = Move(player_out=squad.get(8), player_in=make_player(102, Position.MID))

        plan = plan.extend(first, points=61.0)
        plan = plan.extend(second, points=66.0, penalty=4.0)

        assert plan.move_count == 2
        assert plan.moves[0].point_delta == 6.0
        assert plan.moves[1].point_delta == 5.0
        assert plan.moves[1].is_hit
        assert plan.total_penalty == 4.0
        assert plan.gross_gain == 11.0
        assert plan.net_gain == plan.gross_gain - plan.total_penalty == 7.0
        assert plan.base_squad is squad
        assert plan.transferred_out_ids == {13, 8}

    def test_rejected_move_is_never_appended(self, make_squad, make_player):
        squad = make_squad(bank=0)
        plan = Plan.start(squad, base_points=55.0)
        too_expensive = Move(
            player_out=squad.get(13), player_in=make_player(101, Position.FWD, price=60)
        )

        with pytest.raises(BudgetViolation):
            plan.extend(too_expensive, points=70.0)
        assert plan.move_count == 0
        assert plan.squad is squad

    def test_messages_deduplicated(self, make_squad):
        plan = Plan.start(make_squad(), 0.0)
        plan = plan.with_error(DomainError.no_legal_replacement("P1"))
        plan = plan.with_error(DomainError.no_legal_replacement("P1"))

        assert plan.messages == ("No legal replacement for P1",)
        assert plan.errors[0].error_type == ErrorType.NO_LEGAL_REPLACEMENT

    def test_summary(self, make_squad, make_player):
        squad = make_squad()
        plan = Plan.start(squad, 55.0).extend(
            Move(player_out=squad.get(13), player_in=make_player(101, Position.FWD)),
            points=61.0,
        )
        assert "P13 -> P101" in plan.summary()
        assert Plan.start(squad, 55.0).summary() == "No transfers (scanning)"

    def test_terminal_states(self):
        assert OptimizerState.CONVERGED.is_terminal
        assert OptimizerState.CANCELLED.is_terminal
        assert not OptimizerState.SCANNING.is_terminal


class TestCandidateFilters:
    def test_blank_name_filter_is_none(self):
        assert CandidateFilters(name_contains="  ").name_contains is None
        assert CandidateFilters(name_contains=" Sal ").name_contains == "Sal"
