"""Optimization service for FPL squad and transfer optimization.

This service contains the engine's optimization algorithms:
- Starting XI selection with formation optimization
- Expendability (weakest link) scoring
- Candidate pools and single-swap suggestions
- Bounded multi-transfer chains
- Hit-aware transfer chains
- Wildcard squad construction
- Weekly transfer recommendations (roll, hold, transfer, hit)
- Bench order checks and Bench Boost / Triple Captain suggestions

Every algorithm is a greedy heuristic. Callers depend only on this facade, so
an exact solver can replace the mixins without changing call sites.

This is a thin facade that composes all optimization mixins.
"""

from typing import Optional

from fpl_transfer_engine.config import EngineConfig, config
from fpl_transfer_engine.domain.repositories.projection_repository import (
    ProjectionProvider,
)

from .optimization import (
    ChipAdvisorMixin,
    ExpendabilityMixin,
    SafeProjector,
    SquadGenerationMixin,
    TransferRecommendationMixin,
)


class OptimizationService(
    TransferRecommendationMixin,
    ExpendabilityMixin,
    SquadGenerationMixin,
    ChipAdvisorMixin,
):
    """Service for FPL optimization algorithms and constraint satisfaction.

    This class composes all optimization functionality through mixins:
    - OptimizationBaseMixin: Shared utilities (inherited via other mixins)
    - SquadSelectionMixin: Starting XI and bench (via the transfer mixins)
    - CandidatePoolMixin: Replacement filtering (via GreedyTransferMixin)
    - TransferSuggestionMixin: Single-swap ranking (via GreedyTransferMixin)
    - GreedyTransferMixin: Bounded and hit-aware transfer chains
    - TransferRecommendationMixin: Roll / hold / transfer / hit decision
    - ExpendabilityMixin: Weakest link scoring
    - SquadGenerationMixin: Wildcard construction
    - ChipAdvisorMixin: Bench order and chip suggestions
    """

    def __init__(
        self,
        projection_provider: ProjectionProvider,
        engine_config: Optional[EngineConfig] = None,
    ):
        """Initialize optimization service.

        Args:
            projection_provider: External projection service
            engine_config: Optional configuration override (defaults to global)
        """
        self.engine_config = engine_config or config
        self.projector = SafeProjector(
            projection_provider, memoize=self.engine_config.projection.memoize
        )

    def clear_projection_cache(self) -> None:
        """Forget memoised projections, e.g. after new data arrives."""
        self.projector.clear()
