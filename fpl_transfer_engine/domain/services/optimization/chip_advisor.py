"""Bench order analysis and conservative chip suggestions.

Bench order ranks the outfield bench by a blend of gameweek xP and projected
minutes, since the first sub in is the one most likely to be needed. Chip
suggestions fire only when every threshold is met, and Bench Boost wins over
Triple Captain when both qualify.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

from loguru import logger

from fpl_transfer_engine.domain.common.result import DomainError, Result
from fpl_transfer_engine.domain.models.chips import (
    BenchOrderAnalysis,
    BenchOrderWarning,
    BenchSlot,
    ChipAdvice,
    ChipEvaluation,
    Confidence,
)
from fpl_transfer_engine.domain.models.fixture import TeamFixture
from fpl_transfer_engine.domain.models.picks import ChipType
from fpl_transfer_engine.domain.models.player import Player, Position
from fpl_transfer_engine.domain.models.squad import Squad

from .optimization_base import Window
from .squad_selection import SquadSelectionMixin

FixturesByTeam = Dict[int, Sequence[TeamFixture]]


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class ChipAdvisorMixin(SquadSelectionMixin):
    """Mixin providing bench order checks and Bench Boost / Triple Captain advice."""

    def analyze_bench_order(
        self, squad: Squad, gameweek: int
    ) -> Result[BenchOrderAnalysis]:
        """Compare the squad's outfield bench order with the recommended one.

        Args:
            squad: Squad whose non-starters, in slot order, form the bench
            gameweek: Gameweek to project

        Returns:
            Result containing the analysis, or a validation error when the
            bench is not exactly 4 players
        """
        bench = squad.bench
        if len(bench) != 4:
            return Result.failure(
                DomainError.validation_error(
                    f"Invalid bench size: expected 4 players, got {len(bench)}",
                    {"bench_ids": [p.player_id for p in bench]},
                )
            )

        window = (gameweek,)
        goalkeeper = next((p for p in bench if p.position == Position.GKP), None)
        outfield = [p for p in bench if p is not goalkeeper]
        first_slot = 16 - len(outfield)

        current = tuple(
            self._bench_slot(p, window, first_slot + i) for i, p in enumerate(outfield)
        )
        by_priority = sorted(current, key=lambda s: s.priority, reverse=True)
        optimal = tuple(
            s.model_copy(update={"slot": first_slot + i})
            for i, s in enumerate(by_priority)
        )

        margin = self.engine_config.chips.bench_warning_margin
        warnings: List[BenchOrderWarning] = []
        for cur, best in zip(current, optimal):
            gap = best.priority - cur.priority
            if cur.player_id == best.player_id or gap <= margin:
                continue
            warnings.append(
                BenchOrderWarning(
                    slot=cur.slot,
                    message=(
                        f"Slot {cur.slot}: {best.player.web_name} should be ahead "
                        f"of {cur.player.web_name}"
                    ),
                    reason=(
                        f"{best.player.web_name} has higher priority "
                        f"({best.projected_points:.1f} xP, "
                        f"{best.projected_minutes:.0f}'). {cur.player.web_name} "
                        f"({cur.projected_points:.1f} xP, {cur.projected_minutes:.0f}')"
                    ),
                    impact=gap,
                )
            )

        analysis = BenchOrderAnalysis(
            gameweek=gameweek,
            goalkeeper=(
                self._bench_slot(goalkeeper, window, 12) if goalkeeper else None
            ),
            current_order=current,
            optimal_order=optimal,
            warnings=tuple(warnings),
        )
        if analysis.is_suboptimal:
            logger.info(f"🪑 Bench order could improve: {len(warnings)} warning(s)")
        return Result.success(analysis)

    def evaluate_chips(
        self,
        squad: Squad,
        gameweek: int,
        chips_available: Iterable[Union[ChipType, str]],
        fixtures_by_team: Optional[FixturesByTeam] = None,
    ) -> ChipAdvice:
        """Suggest Bench Boost or Triple Captain for ``gameweek``, if either fits.

        The captain is the squad's flagged captain, or the best lineup's
        top projected starter when none is flagged. A chip is recommended
        only when triggered with at least medium confidence.
        """
        available = set()
        for chip in chips_available:
            try:
                available.add(ChipType(chip))
            except ValueError:
                logger.warning(f"⚠️ Unknown chip '{chip}' ignored")

        bench_boost = None
        if ChipType.BENCH_BOOST in available:
            bench_boost = self._evaluate_bench_boost(
                squad.bench, gameweek, fixtures_by_team
            )

        triple_captain = None
        if ChipType.TRIPLE_CAPTAIN in available:
            captain = self._chip_captain(squad, gameweek)
            if captain is not None:
                triple_captain = self._evaluate_triple_captain(
                    captain, gameweek, fixtures_by_team
                )

        advice = ChipAdvice(
            gameweek=gameweek,
            bench_boost=bench_boost,
            triple_captain=triple_captain,
        )
        for evaluation, message in (
            (bench_boost, "Bench Boost recommended"),
            (triple_captain, "Triple Captain recommended"),
        ):
            if (
                evaluation is not None
                and evaluation.triggered
                and evaluation.confidence != Confidence.LOW
            ):
                advice = advice.model_copy(
                    update={
                        "recommendation": evaluation.chip,
                        "message": message,
                        "rationale": evaluation.rationale,
                        "confidence": evaluation.confidence,
                    }
                )
                logger.info(
                    f"🎯 GW{gameweek}: {message} ({evaluation.confidence.value})"
                )
                break
        return advice

    def _bench_slot(self, player: Player, window: Window, slot: int) -> BenchSlot:
        c = self.engine_config.chips
        points = self.projector.points(player, window)
        minutes = self.projector.minutes(player)
        priority = c.bench_xp_weight * _clamp(
            points / c.bench_xp_scale
        ) + c.bench_minutes_weight * _clamp(minutes / 90.0)
        return BenchSlot(
            slot=slot,
            player=player,
            projected_points=points,
            projected_minutes=minutes,
            priority=priority,
        )

    def _chip_captain(self, squad: Squad, gameweek: int) -> Optional[Player]:
        if squad.captain_id is not None:
            return squad.get(squad.captain_id)
        lineup = self.select_best_lineup(squad, [gameweek])
        if lineup.is_failure:
            logger.warning(
                f"⚠️ No captain for Triple Captain: {lineup.error.message}"
            )
            return None
        return lineup.value.captain.player

    def _fixture_for(
        self,
        player: Player,
        gameweek: int,
        fixtures_by_team: Optional[FixturesByTeam],
    ) -> Optional[TeamFixture]:
        for fixture in (fixtures_by_team or {}).get(player.team_id, ()):
            if fixture.event == gameweek:
                return fixture
        return None

    def _evaluate_bench_boost(
        self,
        bench: Sequence[Player],
        gameweek: int,
        fixtures_by_team: Optional[FixturesByTeam],
    ) -> ChipEvaluation:
        c = self.engine_config.chips
        if len(bench) != 4:
            return ChipEvaluation(
                chip=ChipType.BENCH_BOOST,
                triggered=False,
                rationale="Invalid bench configuration",
            )

        points = [self.projector.points(p, (gameweek,)) for p in bench]
        total = sum(points)
        blanks = [p for p, xp in zip(bench, points) if xp <= 0]
        weak = [
            p for p, xp in zip(bench, points) if xp < c.bench_boost_min_player_xp
        ]
        triggered = total >= c.bench_boost_min_bench_xp and not blanks and not weak

        if not triggered:
            issues = []
            if total < c.bench_boost_min_bench_xp:
                issues.append(
                    f"bench total {total:.1f} xP < {c.bench_boost_min_bench_xp:g} "
                    "threshold"
                )
            if blanks:
                issues.append(f"{len(blanks)} player(s) have blank GW")
            if weak:
                names = ", ".join(p.web_name for p in weak)
                issues.append(f"{names} below minimum threshold")
            return ChipEvaluation(
                chip=ChipType.BENCH_BOOST,
                triggered=False,
                projected_points=total,
                rationale=f"BB not recommended: {'; '.join(issues)}.",
            )

        if total >= c.bench_boost_high_confidence_xp:
            confidence = Confidence.HIGH
        elif total >= c.bench_boost_medium_confidence_xp:
            confidence = Confidence.MEDIUM
        else:
            confidence = Confidence.LOW

        best_xp = max(points)
        best = bench[points.index(best_xp)]
        fixture = self._fixture_for(best, gameweek, fixtures_by_team)
        fdr = fixture.difficulty if fixture else "?"
        return ChipEvaluation(
            chip=ChipType.BENCH_BOOST,
            triggered=True,
            confidence=confidence,
            projected_points=total,
            rationale=(
                f"Bench total: {total:.1f} xP. All 4 players have fixtures with avg "
                f"{total / 4:.1f} xP each. Best: {best.web_name} ({best_xp:.1f} xP "
                f"vs FDR {fdr})."
            ),
        )

    def _evaluate_triple_captain(
        self,
        captain: Player,
        gameweek: int,
        fixtures_by_team: Optional[FixturesByTeam],
    ) -> ChipEvaluation:
        c = self.engine_config.chips
        xp = self.projector.points(captain, (gameweek,))
        minutes = self.projector.minutes(captain)
        fixture = self._fixture_for(captain, gameweek, fixtures_by_team)
        fdr = fixture.difficulty if fixture else c.default_fixture_difficulty

        has_fixture = xp > 0
        meets_xp = xp >= c.triple_captain_min_xp
        meets_minutes = minutes >= c.triple_captain_min_minutes
        meets_fdr = fdr <= c.triple_captain_max_fdr

        if not (has_fixture and meets_xp and meets_minutes and meets_fdr):
            issues = []
            if not has_fixture:
                issues.append("blank gameweek")
            if not meets_xp:
                issues.append(f"xP {xp:.1f} < {c.triple_captain_min_xp:g} threshold")
            if not meets_minutes:
                issues.append(
                    f"projected {minutes:.0f}' < {c.triple_captain_min_minutes:.0f}' "
                    "(rotation risk)"
                )
            if not meets_fdr:
                issues.append(
                    f"FDR {fdr} > {c.triple_captain_max_fdr} (tough fixture)"
                )
            return ChipEvaluation(
                chip=ChipType.TRIPLE_CAPTAIN,
                triggered=False,
                projected_points=xp,
                rationale=(
                    f"TC not recommended for {captain.web_name}: {'; '.join(issues)}."
                ),
            )

        if (
            xp >= c.triple_captain_high_confidence_xp
            and minutes >= c.triple_captain_high_confidence_minutes
        ):
            confidence = Confidence.HIGH
        elif xp >= c.triple_captain_medium_confidence_xp:
            confidence = Confidence.MEDIUM
        else:
            confidence = Confidence.LOW

        venue = ""
        if fixture is not None:
            venue = "home " if fixture.is_home else "away "
        return ChipEvaluation(
            chip=ChipType.TRIPLE_CAPTAIN,
            triggered=True,
            confidence=confidence,
            projected_points=xp,
            rationale=(
                f"{captain.web_name}: {xp:.1f} xP, "
                f"nailed ({minutes:.0f}' projected), {venue}vs FDR {fdr} fixture. "
                "Strong floor + ceiling for triple points."
            ),
        )
