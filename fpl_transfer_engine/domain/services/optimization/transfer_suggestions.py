"""Single-swap replacement suggestions.

Ranks the candidates of a pool by marginal projected gain over the outgoing
player. This is the atomic "who instead of X" operation; every multi-move
optimizer reuses it.
"""

from typing import Iterable, List, Optional, Tuple

from loguru import logger

from fpl_transfer_engine.domain.common.cancellation import CancellationToken
from fpl_transfer_engine.domain.common.result import DomainError
from fpl_transfer_engine.domain.models.player import AvailabilityStatus, Player
from fpl_transfer_engine.domain.models.transfer_plan import (
    CandidatePool,
    ReplacementSuggestion,
    ReplacementSuggestions,
)

from .optimization_base import OptimizationBaseMixin


class TransferSuggestionMixin(OptimizationBaseMixin):
    """Mixin providing ranked replacements for one outgoing player."""

    def suggest_replacements(
        self,
        outgoing: Player,
        pool: CandidatePool,
        window: Iterable[int],
        top_k: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ReplacementSuggestions:
        """Top-K replacements for ``outgoing`` by projected gain.

        Args:
            outgoing: Player being replaced
            pool: Candidates already filtered for this slot
            window: Gameweek IDs to project over
            top_k: Suggestions to return (defaults to config, must be positive)
            cancel_token: Checked before every candidate evaluation

        Returns:
            ReplacementSuggestions, flagged partial when cancelled mid-scan

        Raises:
            ValueError: if ``top_k`` is below 1
        """
        window = self._resolve_window(window)
        if top_k is None:
            top_k = self.engine_config.optimization.suggestion_top_k
        if top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {top_k}")
        token = CancellationToken.ensure(cancel_token)

        if pool.is_empty:
            logger.debug(f"No legal replacement for {outgoing.web_name}")
            return ReplacementSuggestions(
                outgoing=outgoing,
                error=DomainError.no_legal_replacement(
                    outgoing.web_name,
                    {"position": outgoing.position.value, "rejected": pool.rejected},
                ),
            )

        outgoing_points = self.projector.points(outgoing, window)
        ranked: List[ReplacementSuggestion] = []
        is_partial = False

        for candidate in pool.candidates:
            if token.is_cancelled:
                is_partial = True
                logger.info(
                    f"⏹️ Suggestions for {outgoing.web_name} cancelled after "
                    f"{len(ranked)}/{len(pool)} candidates"
                )
                break
            projected = self.projector.project(candidate, window)
            ranked.append(
                ReplacementSuggestion(
                    player=candidate,
                    projected_points=projected.projected_points,
                    projected_minutes=projected.projected_minutes,
                    gain=projected.projected_points - outgoing_points,
                    reasons=self._why_in(
                        candidate,
                        projected.projected_points,
                        projected.projected_minutes,
                        len(window),
                    ),
                )
            )

        evaluated = len(ranked)
        ranked.sort(key=lambda s: s.gain, reverse=True)
        return ReplacementSuggestions(
            outgoing=outgoing,
            outgoing_points=outgoing_points,
            suggestions=tuple(ranked[:top_k]),
            evaluated=evaluated,
            is_partial=is_partial,
        )

    def _why_in(
        self, candidate: Player, points: float, minutes: float, window_length: int
    ) -> Tuple[str, ...]:
        """Short notes on why a candidate is worth bringing in."""
        t = self.engine_config.replacement
        reasons: List[str] = []

        per_gw = points / window_length
        if per_gw > t.high_xp_per_gw:
            reasons.append(f"High xP ({per_gw:.2f}/GW)")
        nailed = candidate.status == AvailabilityStatus.AVAILABLE
        if nailed and minutes >= t.nailed_minutes:
            reasons.append(f"Nailed ({minutes:.0f}')")
        if candidate.form >= t.in_form:
            reasons.append(f"In form ({candidate.form:.1f})")
        ppm = candidate.points_per_million
        if ppm > t.value_points_per_million:
            reasons.append(f"Value pick ({ppm:.1f} pts/£m)")
        if candidate.net_transfers_event > t.price_rise_net_transfers:
            reasons.append(
                f"Price rise potential (+{candidate.net_transfers_event / 1000:.0f}k)"
            )
        if candidate.selected_by_percent < t.differential_ownership:
            reasons.append(f"Differential ({candidate.selected_by_percent:.1f}%)")

        return tuple(reasons)
