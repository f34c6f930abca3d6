"""Tests for bench order analysis and Bench Boost / Triple Captain advice.

The squad starts a 5-4-1 with player 8 captain, leaving goalkeeper 2 and
outfielders 12, 14 and 15 (slots 13-15) on the bench.
"""

import pytest

from fpl_transfer_engine.domain.common.result import ErrorType
from fpl_transfer_engine.domain.models.chips import Confidence
from fpl_transfer_engine.domain.models.fixture import TeamFixture
from fpl_transfer_engine.domain.models.picks import ChipType

STARTERS = frozenset({1, 3, 4, 5, 6, 7, 8, 9, 10, 11, 13})


@pytest.fixture
def squad(make_squad):
    return make_squad(starting_ids=STARTERS, captain_id=8)


def _points(flat_points, **overrides):
    points = dict(flat_points)
    points.update({int(k[1:]): v for k, v in overrides.items()})
    return points


def _home_fixture(team_id, difficulty=2):
    return {
        team_id: [
            TeamFixture(
                event=1,
                team_id=team_id,
                opponent_id=20,
                is_home=True,
                difficulty=difficulty,
            )
        ]
    }


class TestBenchOrder:
    def test_suboptimal_order_warns(self, make_service, squad, flat_points):
        service = make_service(
            _points(flat_points, p2=1.0, p12=2.0, p14=6.0, p15=4.0),
            minutes={15: 30.0},
        )

        analysis = service.analyze_bench_order(squad, 1).value

        assert analysis.goalkeeper.player_id == 2
        assert analysis.goalkeeper.slot == 12
        assert [s.player_id for s in analysis.current_order] == [12, 14, 15]
        assert [s.player_id for s in analysis.optimal_order] == [14, 12, 15]
        assert [s.slot for s in analysis.optimal_order] == [13, 14, 15]
        assert analysis.is_suboptimal
        assert analysis.total_bench_points == 13.0

        (warning,) = analysis.warnings
        assert warning.slot == 13
        assert warning.message == "Slot 13: P14 should be ahead of P12"
        assert warning.reason == (
            "P14 has higher priority (6.0 xP, 90'). P12 (2.0 xP, 90')"
        )
        assert warning.impact == pytest.approx(0.4)

    def test_minutes_lower_priority(self, make_service, squad, flat_points):
        service = make_service(
            _points(flat_points, p12=4.0, p14=4.0, p15=4.0), minutes={12: 0.0}
        )

        analysis = service.analyze_bench_order(squad, 1).value

        assert [s.player_id for s in analysis.optimal_order] == [14, 15, 12]
        assert analysis.optimal_order[0].priority == pytest.approx(0.8)
        assert analysis.current_order[0].priority == pytest.approx(0.4)

    def test_optimal_order_has_no_warnings(self, make_service, squad, flat_points):
        service = make_service(_points(flat_points, p12=6.0, p14=4.0, p15=2.0))

        analysis = service.analyze_bench_order(squad, 1).value

        assert not analysis.is_suboptimal
        assert analysis.warnings == ()

    def test_bench_size_must_be_four(self, make_service, make_squad, flat_points):
        squad = make_squad(starting_ids=STARTERS - {13})

        result = make_service(flat_points).analyze_bench_order(squad, 1)

        assert result.is_failure
        assert result.error.error_type == ErrorType.VALIDATION_ERROR
        assert "expected 4 players, got 5" in result.error.message


class TestBenchBoost:
    @pytest.mark.parametrize(
        "bench_points, confidence",
        [
            ({"p2": 4.0, "p12": 4.0, "p14": 5.0, "p15": 5.0}, Confidence.HIGH),
            ({"p2": 3.0, "p12": 3.0, "p14": 4.0, "p15": 5.0}, Confidence.MEDIUM),
        ],
    )
    def test_triggered(
        self, make_service, squad, flat_points, bench_points, confidence
    ):
        service = make_service(_points(flat_points, **bench_points))

        bench_boost = service.evaluate_chips(squad, 1, ["bboost"]).bench_boost

        assert bench_boost.triggered
        assert bench_boost.confidence == confidence

    def test_rationale_names_best_player(self, make_service, squad, flat_points):
        service = make_service(
            _points(flat_points, p2=4.0, p12=4.0, p14=5.0, p15=5.0)
        )

        advice = service.evaluate_chips(
            squad, 1, [ChipType.BENCH_BOOST], fixtures_by_team=_home_fixture(14, 3)
        )

        assert advice.recommendation == ChipType.BENCH_BOOST
        assert advice.message == "Bench Boost recommended"
        assert advice.rationale == (
            "Bench total: 18.0 xP. All 4 players have fixtures with avg 4.5 xP "
            "each. Best: P14 (5.0 xP vs FDR 3)."
        )

    def test_weak_bench_player_blocks(self, make_service, squad, flat_points):
        service = make_service(
            _points(flat_points, p2=1.0, p12=6.0, p14=6.0, p15=6.0)
        )

        bench_boost = service.evaluate_chips(squad, 1, ["bboost"]).bench_boost

        assert not bench_boost.triggered
        assert bench_boost.projected_points == 19.0
        assert bench_boost.rationale == (
            "BB not recommended: P2 below minimum threshold."
        )

    def test_every_issue_reported(self, make_service, squad, flat_points):
        service = make_service(
            _points(flat_points, p2=0.0, p12=5.0, p14=5.0, p15=2.0)
        )

        advice = service.evaluate_chips(squad, 1, ["bboost"])

        assert not advice.has_recommendation
        assert advice.bench_boost.rationale == (
            "BB not recommended: bench total 12.0 xP < 14 threshold; "
            "1 player(s) have blank GW; P2, P15 below minimum threshold."
        )

    def test_invalid_bench(self, make_service, make_squad, flat_points):
        squad = make_squad(starting_ids=STARTERS - {13})

        bench_boost = make_service(flat_points).evaluate_chips(
            squad, 1, ["bboost"]
        ).bench_boost

        assert not bench_boost.triggered
        assert bench_boost.rationale == "Invalid bench configuration"


class TestTripleCaptain:
    def test_high_confidence(self, make_service, squad, flat_points):
        service = make_service(_points(flat_points, p8=10.0))

        advice = service.evaluate_chips(
            squad, 1, ["3xc"], fixtures_by_team=_home_fixture(8)
        )

        assert advice.recommendation == ChipType.TRIPLE_CAPTAIN
        assert advice.confidence == Confidence.HIGH
        assert advice.rationale == (
            "P8: 10.0 xP, nailed (90' projected), home vs FDR 2 fixture. "
            "Strong floor + ceiling for triple points."
        )

    @pytest.mark.parametrize(
        "xp, minutes", [(9.0, 90.0), (10.0, 82.0)]
    )
    def test_medium_confidence(self, make_service, squad, flat_points, xp, minutes):
        service = make_service(_points(flat_points, p8=xp), minutes={8: minutes})

        advice = service.evaluate_chips(
            squad, 1, ["3xc"], fixtures_by_team=_home_fixture(8)
        )

        assert advice.triple_captain.triggered
        assert advice.confidence == Confidence.MEDIUM

    def test_unknown_fixture_assumes_average_difficulty(
        self, make_service, squad, flat_points
    ):
        service = make_service(_points(flat_points, p8=10.0))

        triple_captain = service.evaluate_chips(squad, 1, ["3xc"]).triple_captain

        assert not triple_captain.triggered
        assert triple_captain.rationale == (
            "TC not recommended for P8: FDR 3 > 2 (tough fixture)."
        )

    def test_rotation_risk(self, make_service, squad, flat_points):
        service = make_service(_points(flat_points, p8=6.0), minutes={8: 60.0})

        triple_captain = service.evaluate_chips(
            squad, 1, ["3xc"], fixtures_by_team=_home_fixture(8)
        ).triple_captain

        assert triple_captain.rationale == (
            "TC not recommended for P8: xP 6.0 < 8 threshold; "
            "projected 60' < 81' (rotation risk)."
        )

    def test_captain_from_best_lineup(self, make_service, make_squad, flat_points):
        squad = make_squad(starting_ids=STARTERS)
        service = make_service(_points(flat_points, p10=12.0))

        advice = service.evaluate_chips(
            squad, 1, ["3xc"], fixtures_by_team=_home_fixture(10)
        )

        assert advice.recommendation == ChipType.TRIPLE_CAPTAIN
        assert advice.rationale.startswith("P10: 12.0 xP")


class TestChipChoice:
    def test_bench_boost_preferred(self, make_service, squad, flat_points):
        service = make_service(
            _points(flat_points, p2=4.0, p12=4.0, p14=5.0, p15=5.0, p8=10.0)
        )

        advice = service.evaluate_chips(
            squad, 1, ["bboost", "3xc"], fixtures_by_team=_home_fixture(8)
        )

        assert advice.triple_captain.triggered
        assert advice.recommendation == ChipType.BENCH_BOOST

    def test_no_chips_available(self, make_service, squad, flat_points):
        advice = make_service(flat_points).evaluate_chips(squad, 1, [])

        assert advice.recommendation is None
        assert advice.message == "No chip recommended"
        assert advice.bench_boost is None
        assert advice.triple_captain is None

    def test_unknown_chip_ignored(self, make_service, squad, flat_points):
        service = make_service(_points(flat_points, p8=10.0))

        advice = service.evaluate_chips(
            squad, 1, ["mystery", "3xc"], fixtures_by_team=_home_fixture(8)
        )

        assert advice.bench_boost is None
        assert advice.recommendation == ChipType.TRIPLE_CAPTAIN
