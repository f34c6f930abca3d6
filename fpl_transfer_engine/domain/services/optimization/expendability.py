"""Expendability scoring for squad players.

Scores how replaceable each squad member is (0-100, higher = weaker link)
from availability, projected minutes and points, fixtures, form and price
momentum. Used to rank transfer-out candidates and to respect locked players.
"""

import math
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from fpl_transfer_engine.domain.common.cancellation import CancellationToken
from fpl_transfer_engine.domain.common.result import DomainError, Result
from fpl_transfer_engine.domain.models.expendability import (
    ExpendabilityAssessment,
    ExpendabilityReason,
    ExpendabilityScore,
    ExpendabilitySignals,
    ReasonContribution,
)
from fpl_transfer_engine.domain.models.fixture import TeamFixture
from fpl_transfer_engine.domain.models.player import AvailabilityStatus, Player
from fpl_transfer_engine.domain.models.squad import Squad

from .optimization_base import OptimizationBaseMixin

_INJURY_STATUSES = (
    AvailabilityStatus.INJURED,
    AvailabilityStatus.NOT_IN_SQUAD,
    AvailabilityStatus.UNAVAILABLE,
)


class ExpendabilityMixin(OptimizationBaseMixin):
    """Mixin providing weakest-link scoring and squad ranking."""

    def score_expendability(
        self, player: Player, signals: ExpendabilitySignals
    ) -> ExpendabilityScore:
        """Score one player. Pure: reads the player and signals only.

        Args:
            player: Squad player (status, chance of playing, form, transfers)
            signals: Projected points/minutes and fixture outlook

        Returns:
            Score capped to [0, 100] with reasons ranked by impact
        """
        w = self.engine_config.expendability
        contributions: List[ReasonContribution] = []

        def add(reason: ExpendabilityReason, impact: float, detail: str = "") -> None:
            impact = int(round(impact))
            if impact > 0:
                contributions.append(
                    ReasonContribution(reason=reason, impact=impact, detail=detail)
                )

        # Availability
        if player.status in _INJURY_STATUSES:
            add(ExpendabilityReason.INJURED, w.injured_penalty, player.news)
        elif player.status == AvailabilityStatus.SUSPENDED:
            add(ExpendabilityReason.SUSPENDED, w.suspended_penalty, player.news)
        elif player.status == AvailabilityStatus.DOUBTFUL:
            chance = player.chance_of_playing_next_round
            if chance is None:
                chance = w.doubtful_default_chance
            add(
                ExpendabilityReason.DOUBTFUL,
                (100 - chance) * w.doubtful_weight,
                f"{chance:.0f}% chance",
            )

        # Playing time
        minutes = signals.projected_minutes
        if minutes is not None:
            if minutes < w.low_minutes_threshold:
                add(
                    ExpendabilityReason.LOW_MINUTES,
                    w.low_minutes_penalty,
                    f"{minutes:.0f} mins",
                )
            elif minutes < w.rotation_minutes_threshold:
                add(
                    ExpendabilityReason.ROTATION_RISK,
                    w.rotation_penalty,
                    f"{minutes:.0f} mins",
                )

        # Output
        per_gw = signals.points_per_gameweek
        if per_gw < w.low_xp_per_gw_threshold:
            add(
                ExpendabilityReason.LOW_XP,
                (w.low_xp_per_gw_threshold - per_gw) * w.low_xp_weight,
                f"{per_gw:.2f} xP/GW",
            )

        # Fixtures
        fdr = signals.average_fixture_difficulty
        if fdr is not None and fdr > w.poor_fixture_threshold:
            add(
                ExpendabilityReason.POOR_FIXTURES,
                (fdr - w.poor_fixture_baseline) * w.poor_fixture_weight,
                f"avg FDR {fdr:.1f}",
            )
        if signals.blank_gameweeks:
            add(
                ExpendabilityReason.BLANKS,
                signals.blank_gameweeks * w.blank_penalty,
                f"{signals.blank_gameweeks} blank(s)",
            )

        # Form
        ppg = player.points_per_game
        if ppg > 0 and player.form < w.declining_form_ratio * ppg:
            add(
                ExpendabilityReason.DECLINING_FORM,
                (1 - player.form / ppg) * w.declining_form_weight,
                f"form {player.form:.1f} vs {ppg:.1f} ppg",
            )

        # Price momentum
        net_out = -player.net_transfers_event
        if net_out > w.price_drop_net_transfers:
            add(
                ExpendabilityReason.PRICE_DROP,
                w.price_drop_penalty,
                f"-{net_out / 1000:.0f}k net",
            )

        score = max(0, min(100, sum(c.impact for c in contributions)))
        return ExpendabilityScore(score=score, reasons=tuple(contributions))

    def build_expendability_signals(
        self,
        player: Player,
        window: Iterable[int],
        fixtures_by_team: Optional[Dict[int, Sequence[TeamFixture]]] = None,
    ) -> ExpendabilitySignals:
        """Collect projection and fixture signals for one player."""
        window = self._resolve_window(window)
        fdr = None
        blanks = 0
        if fixtures_by_team is not None:
            in_window = [
                f for f in fixtures_by_team.get(player.team_id, ()) if f.event in window
            ]
            if in_window:
                fdr = sum(f.difficulty for f in in_window) / len(in_window)
            playing = {f.event for f in in_window}
            blanks = sum(1 for gw in window if gw not in playing)

        return ExpendabilitySignals(
            projected_points=self.projector.points(player, window),
            window_length=len(window),
            projected_minutes=self.projector.minutes(player),
            average_fixture_difficulty=fdr,
            blank_gameweeks=blanks,
        )

    def assess_expendability(
        self,
        player: Player,
        window: Iterable[int],
        fixtures_by_team: Optional[Dict[int, Sequence[TeamFixture]]] = None,
    ) -> ExpendabilityAssessment:
        signals = self.build_expendability_signals(player, window, fixtures_by_team)
        return ExpendabilityAssessment(
            player=player,
            signals=signals,
            score=self.score_expendability(player, signals),
        )

    def rank_squad_by_expendability(
        self,
        squad: Squad,
        window: Iterable[int],
        locked_ids: Optional[Iterable[int]] = None,
        fixtures_by_team: Optional[Dict[int, Sequence[TeamFixture]]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[List[ExpendabilityAssessment]]:
        """Rank squad players most-expendable first.

        Locked players score 0 with a LOCKED reason and sort last. The top
        ``min(expendable_max_flagged, ceil(expendable_fraction * size))``
        unlocked players with a positive score are flagged ``is_expendable``.
        """
        window = self._resolve_window(window)
        locked = frozenset(locked_ids or ())
        token = CancellationToken.ensure(cancel_token)

        assessments: List[ExpendabilityAssessment] = []
        for player in squad.players:
            if token.is_cancelled:
                return Result.failure(DomainError.cancelled(token.reason))
            if player.player_id in locked:
                signals = self.build_expendability_signals(
                    player, window, fixtures_by_team
                )
                score = ExpendabilityScore(
                    score=0,
                    reasons=(
                        ReasonContribution(
                            reason=ExpendabilityReason.LOCKED, impact=0
                        ),
                    ),
                )
                assessments.append(
                    ExpendabilityAssessment(
                        player=player, signals=signals, score=score, is_locked=True
                    )
                )
            else:
                assessments.append(
                    self.assess_expendability(player, window, fixtures_by_team)
                )

        assessments.sort(key=lambda a: (a.is_locked, -a.score.score))

        opt = self.engine_config.optimization
        n_flagged = min(
            opt.expendable_max_flagged,
            math.ceil(opt.expendable_fraction * len(squad.players)),
        )
        ranked: List[ExpendabilityAssessment] = []
        for assessment in assessments:
            flag = (
                n_flagged > 0
                and not assessment.is_locked
                and assessment.score.score > 0
            )
            if flag:
                n_flagged -= 1
                assessment = assessment.model_copy(update={"is_expendable": True})
            ranked.append(assessment)

        flagged = [a.player.web_name for a in ranked if a.is_expendable]
        logger.info(f"🔍 Expendable players: {', '.join(flagged) or 'none'}")
        return Result.success(ranked)
