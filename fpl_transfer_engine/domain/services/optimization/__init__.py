"""Optimization module for FPL squad and transfer optimization.

This module provides:
- Starting XI and bench selection
- Expendability scoring
- Candidate pools and single-swap suggestions
- Bounded and hit-aware greedy transfer chains
- Wildcard squad construction
- Roll / hold / transfer / hit recommendations
- Bench order analysis and chip suggestions

Usage:
    from fpl_transfer_engine.domain.services import OptimizationService

    service = OptimizationService(projection_provider)
    plan = service.optimize_bounded(squad, universe, window=[10, 11, 12])
"""

from .optimization_base import OptimizationBaseMixin, SafeProjector
from .squad_selection import SquadSelectionMixin
from .expendability import ExpendabilityMixin
from .candidate_pool import CandidatePoolMixin
from .transfer_suggestions import TransferSuggestionMixin
from .greedy_transfers import GreedyTransferMixin
from .squad_generation import SquadGenerationMixin
from .transfer_recommendation import TransferRecommendationMixin
from .chip_advisor import ChipAdvisorMixin

__all__ = [
    "OptimizationBaseMixin",
    "SafeProjector",
    "SquadSelectionMixin",
    "ExpendabilityMixin",
    "CandidatePoolMixin",
    "TransferSuggestionMixin",
    "GreedyTransferMixin",
    "SquadGenerationMixin",
    "TransferRecommendationMixin",
    "ChipAdvisorMixin",
]
