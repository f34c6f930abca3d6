"""Roll, hold, transfer or hit: the weekly transfer decision.

Runs the single-move bounded optimizer and the hit-aware optimizer, then
weighs their gains against the configured thresholds:

- 2+ FTs and no transfer worth ``min_gain_threshold``: roll
- a single transfer worth it: take it, unless a hit plan beats it by more
  than ``hit_threshold``
- 1 FT and nothing worth it: roll
- otherwise hold
"""

from typing import Iterable, Optional, Sequence, Tuple

from loguru import logger

from fpl_transfer_engine.domain.common.cancellation import CancellationToken
from fpl_transfer_engine.domain.models.player import Player
from fpl_transfer_engine.domain.models.squad import Squad
from fpl_transfer_engine.domain.models.transfer_plan import (
    CandidateFilters,
    OptimizerState,
    Plan,
)
from fpl_transfer_engine.domain.models.transfer_recommendation import (
    TransferAction,
    TransferRecommendation,
)

from .greedy_transfers import GreedyTransferMixin


class TransferRecommendationMixin(GreedyTransferMixin):
    """Mixin turning optimizer plans into a weekly transfer decision."""

    def recommend_transfers(
        self,
        squad: Squad,
        universe: Sequence[Player],
        window: Iterable[int],
        free_transfers: Optional[int] = None,
        hit_cost: Optional[float] = None,
        hits_enabled: Optional[bool] = None,
        budget: Optional[int] = None,
        locked_ids: Optional[Iterable[int]] = None,
        filters: Optional[CandidateFilters] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> TransferRecommendation:
        """Recommend rolling, holding, one free transfer or a hit plan.

        Args:
            squad: Base squad (15 players)
            universe: Players available to buy
            window: Gameweek IDs to project over
            free_transfers: FTs available (defaults to config)
            hit_cost: Points per extra transfer (defaults to config)
            hits_enabled: Consider hit plans (defaults to config)
            budget: Bank to use instead of ``squad.bank`` (tenths)
            locked_ids: Players never offered as outgoing
            filters: Candidate pool filters
            cancel_token: Optional cancellation handle

        Returns:
            TransferRecommendation holding both plans and the chosen action
        """
        opt = self.engine_config.optimization
        rec = self.engine_config.recommendation
        if free_transfers is None:
            free_transfers = opt.free_transfers
        hit_cost = opt.hit_cost if hit_cost is None else hit_cost
        hits_enabled = rec.hits_enabled if hits_enabled is None else hits_enabled
        if free_transfers < 0 or hit_cost < 0:
            raise ValueError("free_transfers and hit_cost must be non-negative")
        window = self._resolve_window(window)
        token = CancellationToken.ensure(cancel_token)

        single = self.optimize_bounded(
            squad,
            universe,
            window,
            max_moves=1,
            budget=budget,
            locked_ids=locked_ids,
            filters=filters,
            cancel_token=token,
        )
        # A move made with no free transfers left is itself a hit
        single_net = single.gross_gain
        if free_transfers == 0:
            single_net -= hit_cost * single.move_count

        hit: Optional[Plan] = None
        if hits_enabled and not token.is_cancelled:
            hit = self.optimize_with_hits(
                squad,
                universe,
                window,
                free_transfers=free_transfers,
                hit_cost=hit_cost,
                budget=budget,
                locked_ids=locked_ids,
                filters=filters,
                cancel_token=token,
            )

        action, reason = self._decide_action(
            single, single_net, hit, free_transfers, hit_cost
        )
        chosen = {TransferAction.TRANSFER: single, TransferAction.HIT: hit}.get(action)
        moves_used = chosen.move_count if chosen is not None else 0
        free_after = min(
            rec.max_banked_free_transfers, max(free_transfers - moves_used, 0) + 1
        )

        recommendation = TransferRecommendation(
            action=action,
            reason=reason,
            free_transfers=free_transfers,
            free_transfers_after=free_after,
            single=single,
            single_net_gain=single_net,
            hit=hit,
            is_partial=single.is_partial or (hit is not None and hit.is_partial),
        )
        logger.info(f"🧭 {recommendation}")
        return recommendation

    def _decide_action(
        self,
        single: Plan,
        single_net: float,
        hit: Optional[Plan],
        free_transfers: int,
        hit_cost: float,
    ) -> Tuple[TransferAction, str]:
        rec = self.engine_config.recommendation
        if single.state == OptimizerState.INFEASIBLE:
            return TransferAction.HOLD, single.messages[0]

        worth_it = single.move_count > 0 and single_net >= rec.min_gain_threshold
        hit_option = (
            hit
            if hit is not None
            and hit.total_penalty > 0
            and hit.net_gain >= rec.hit_threshold
            else None
        )

        if free_transfers >= 2 and not worth_it:
            return (
                TransferAction.ROLL,
                "No transfer offers compelling value. Bank your FT.",
            )
        if worth_it:
            if (
                hit_option is not None
                and hit_option.net_gain > single_net + rec.hit_threshold
            ):
                return (
                    TransferAction.HIT,
                    f"Take -{hit_option.total_penalty:g} hit for "
                    f"{hit_option.net_gain:+.1f} net gain",
                )
            if free_transfers == 0:
                return (
                    TransferAction.TRANSFER,
                    f"Take -{hit_cost:g} hit for {single_net:+.1f} net gain",
                )
            return TransferAction.TRANSFER, f"Use FT for {single_net:+.1f} xP gain"
        if free_transfers == 1:
            return (
                TransferAction.ROLL,
                "Save your FT, no transfer offers enough value.",
            )
        return TransferAction.HOLD, "Current squad is optimal for the horizon."
