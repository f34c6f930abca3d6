"""Greedy multi-transfer optimization.

Two optimizers share one hill-climbing loop:

- ``optimize_bounded`` commits the best single swap per step until the move
  cap is reached or no swap improves the best-lineup total.
- ``optimize_with_hits`` charges ``hit_cost`` for every move beyond the free
  transfers and keeps going while the net (gain minus hits) strictly improves,
  up to a safety ceiling.

Every candidate swap is scored by recomputing the whole best lineup, since
improving one position can change which formation wins. Neither variant is a
global optimum; they are greedy by construction.
"""

from typing import FrozenSet, Iterable, NamedTuple, Optional, Sequence, Tuple

from loguru import logger

from fpl_transfer_engine.domain.common.cancellation import CancellationToken
from fpl_transfer_engine.domain.common.errors import (
    ConstraintViolation,
    OperationCancelledError,
)
from fpl_transfer_engine.domain.common.result import DomainError
from fpl_transfer_engine.domain.models.lineup import Lineup
from fpl_transfer_engine.domain.models.player import Player
from fpl_transfer_engine.domain.models.squad import Squad
from fpl_transfer_engine.domain.models.transfer_plan import (
    CandidateFilters,
    Move,
    OptimizerState,
    Plan,
)

from .candidate_pool import CandidatePoolMixin
from .optimization_base import Window
from .squad_selection import SquadSelectionMixin
from .transfer_suggestions import TransferSuggestionMixin


class _ScoredMove(NamedTuple):
    move: Move
    lineup: Lineup
    net: float
    penalty: float


class GreedyTransferMixin(
    SquadSelectionMixin, CandidatePoolMixin, TransferSuggestionMixin
):
    """Mixin providing bounded and hit-aware greedy transfer chains."""

    def optimize_bounded(
        self,
        squad: Squad,
        universe: Sequence[Player],
        window: Iterable[int],
        max_moves: Optional[int] = None,
        budget: Optional[int] = None,
        locked_ids: Optional[Iterable[int]] = None,
        filters: Optional[CandidateFilters] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Plan:
        """Chain up to ``max_moves`` free transfers, best swap first.

        Args:
            squad: Base squad (15 players)
            universe: Players available to buy
            window: Gameweek IDs to project over
            max_moves: Move cap (defaults to config)
            budget: Bank to use instead of ``squad.bank`` (tenths)
            locked_ids: Players never offered as outgoing
            filters: Candidate pool filters
            cancel_token: Optional cancellation handle

        Returns:
            Plan in state CONVERGED, CAPPED, INFEASIBLE or CANCELLED
        """
        max_moves = (
            self.engine_config.optimization.bounded_max_moves
            if max_moves is None
            else max_moves
        )
        if max_moves < 0:
            raise ValueError(f"max_moves must be non-negative, got {max_moves}")

        logger.info(f"🔄 Bounded transfer search: up to {max_moves} move(s)")
        return self._run_greedy(
            squad,
            universe,
            window,
            max_moves=max_moves,
            free_transfers=max_moves,
            hit_cost=0.0,
            budget=budget,
            locked_ids=locked_ids,
            filters=filters,
            cancel_token=cancel_token,
        )

    def optimize_with_hits(
        self,
        squad: Squad,
        universe: Sequence[Player],
        window: Iterable[int],
        free_transfers: Optional[int] = None,
        hit_cost: Optional[float] = None,
        budget: Optional[int] = None,
        locked_ids: Optional[Iterable[int]] = None,
        filters: Optional[CandidateFilters] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Plan:
        """Chain transfers while the net gain after hits strictly improves.

        Each move beyond ``free_transfers`` costs ``hit_cost``. The plan is
        returned even when its net gain is negative; applying it is the
        caller's decision.
        """
        opt = self.engine_config.optimization
        if free_transfers is None:
            free_transfers = opt.free_transfers
        hit_cost = opt.hit_cost if hit_cost is None else hit_cost
        if free_transfers < 0 or hit_cost < 0:
            raise ValueError("free_transfers and hit_cost must be non-negative")

        logger.info(
            f"🔄 Hit-aware transfer search: {free_transfers} FT, "
            f"-{hit_cost:g} per extra move"
        )
        return self._run_greedy(
            squad,
            universe,
            window,
            max_moves=opt.hit_safety_ceiling,
            free_transfers=free_transfers,
            hit_cost=hit_cost,
            budget=budget,
            locked_ids=locked_ids,
            filters=filters,
            cancel_token=cancel_token,
        )

    def _run_greedy(
        self,
        squad: Squad,
        universe: Sequence[Player],
        window: Iterable[int],
        max_moves: int,
        free_transfers: int,
        hit_cost: float,
        budget: Optional[int],
        locked_ids: Optional[Iterable[int]],
        filters: Optional[CandidateFilters],
        cancel_token: Optional[CancellationToken],
    ) -> Plan:
        squad.validate_for_optimization(self.engine_config.optimization.squad_size)
        window = self._resolve_window(window)
        token = CancellationToken.ensure(cancel_token)
        locked = frozenset(locked_ids or ())
        filters = filters or CandidateFilters()
        if budget is not None:
            squad = squad.with_bank(budget)

        base = self._best_lineup(squad, window)
        if base is None:
            logger.warning("⚠️ No feasible lineup for the base squad")
            return (
                Plan.start(squad, 0.0)
                .with_state(OptimizerState.INFEASIBLE)
                .with_error(
                    DomainError.infeasible("No feasible formation for the current squad")
                )
            )

        plan = Plan.start(squad, base.total_points)
        if max_moves == 0:
            return plan.with_state(OptimizerState.CAPPED)

        lineup = base
        while True:
            if token.is_cancelled:
                return self._cancelled_plan(plan, token)
            plan = plan.with_state(OptimizerState.SCANNING)

            try:
                best, plan = self._scan_moves(
                    plan,
                    lineup,
                    universe,
                    window,
                    locked,
                    filters,
                    token,
                    free_transfers,
                    hit_cost,
                )
            except OperationCancelledError:
                return self._cancelled_plan(plan, token)

            if best is None or best.net <= plan.net_gain:
                logger.info(
                    f"✅ Converged after {plan.move_count} move(s): "
                    f"net {plan.net_gain:+.2f}"
                )
                return plan.with_state(OptimizerState.CONVERGED)

            if token.is_cancelled:
                return self._cancelled_plan(plan, token)

            plan = plan.extend(
                best.move,
                best.lineup.total_points,
                penalty=best.penalty,
                club_limit=self.club_limit,
            )
            lineup = best.lineup
            logger.info(
                f"➡️ Move {plan.move_count}: {plan.moves[-1]} "
                f"({lineup.formation.name}, net {plan.net_gain:+.2f})"
            )

            if plan.move_count >= max_moves:
                logger.info(f"🛑 Move cap reached ({max_moves})")
                return plan.with_state(OptimizerState.CAPPED)

    def _scan_moves(
        self,
        plan: Plan,
        lineup: Lineup,
        universe: Sequence[Player],
        window: Window,
        locked: FrozenSet[int],
        filters: CandidateFilters,
        token: CancellationToken,
        free_transfers: int,
        hit_cost: float,
    ) -> Tuple[Optional[_ScoredMove], Plan]:
        """Best next move for the plan's current squad.

        Net for a candidate = (new lineup total - base total) minus the hits
        owed once this move is made. Returns the plan too, since slots with
        no legal replacement record an error on it.
        """
        squad = plan.squad
        penalty = hit_cost if plan.move_count + 1 > free_transfers else 0.0
        penalty_after = plan.total_penalty + penalty
        scan_filters = filters.model_copy(
            update={
                "excluded_player_ids": filters.excluded_player_ids
                | plan.transferred_out_ids
            }
        )

        best: Optional[_ScoredMove] = None
        for starter in lineup.starters:
            outgoing = starter.player
            if outgoing.player_id in locked:
                continue
            token.raise_if_cancelled()

            pool = self.candidate_pool_for(outgoing, squad, universe, scan_filters)
            suggestions = self.suggest_replacements(
                outgoing, pool, window, cancel_token=token
            )
            if suggestions.is_partial:
                raise OperationCancelledError(token.reason or "cancelled")

            legal = 0
            for suggestion in suggestions.suggestions:
                token.raise_if_cancelled()
                move = Move(player_out=outgoing, player_in=suggestion.player)
                try:
                    trial = squad.apply(move, club_limit=self.club_limit)
                except ConstraintViolation as e:
                    logger.debug(f"Skipping {move}: {e}")
                    continue
                legal += 1

                trial_lineup = self._best_lineup(trial, window)
                if trial_lineup is None:
                    continue
                net = trial_lineup.total_points - plan.base_points - penalty_after
                if best is None or net > best.net:
                    best = _ScoredMove(move, trial_lineup, net, penalty)

            if legal == 0:
                plan = plan.with_error(
                    DomainError.no_legal_replacement(
                        outgoing.web_name,
                        {"player_id": outgoing.player_id, "candidates": len(pool)},
                    )
                )

        return best, plan

    def _cancelled_plan(self, plan: Plan, token: CancellationToken) -> Plan:
        logger.info(
            f"⏹️ Transfer search cancelled ({token.reason}); "
            f"keeping {plan.move_count} committed move(s)"
        )
        return plan.with_state(OptimizerState.CANCELLED, is_partial=True)
