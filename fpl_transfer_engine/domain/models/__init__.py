"""Domain models with strict data contracts for the transfer engine."""

from .chips import (
    BenchOrderAnalysis,
    BenchOrderWarning,
    BenchSlot,
    ChipAdvice,
    ChipEvaluation,
    Confidence,
)
from .expendability import (
    ExpendabilityAssessment,
    ExpendabilityReason,
    ExpendabilityScore,
    ExpendabilitySignals,
    ReasonContribution,
)
from .fixture import TeamFixture
from .lineup import FORMATION_CATALOG, Formation, Lineup, WildcardSquad
from .picks import ChipType, LivePointsBreakdown, Pick, PickScore
from .player import (
    POSITION_ORDER,
    UNAVAILABLE_STATUSES,
    AvailabilityStatus,
    Player,
    Position,
    ProjectedPlayer,
)
from .squad import DEFAULT_CLUB_LIMIT, SQUAD_COMPOSITION, Squad
from .transfer_plan import (
    CandidateFilters,
    CandidatePool,
    Move,
    OptimizerState,
    Plan,
    ReplacementSuggestion,
    ReplacementSuggestions,
)
from .transfer_recommendation import TransferAction, TransferRecommendation

__all__ = [
    "Player",
    "ProjectedPlayer",
    "Position",
    "POSITION_ORDER",
    "AvailabilityStatus",
    "UNAVAILABLE_STATUSES",
    "Squad",
    "SQUAD_COMPOSITION",
    "DEFAULT_CLUB_LIMIT",
    "Formation",
    "FORMATION_CATALOG",
    "Lineup",
    "WildcardSquad",
    "Move",
    "Plan",
    "OptimizerState",
    "CandidateFilters",
    "CandidatePool",
    "ReplacementSuggestion",
    "ReplacementSuggestions",
    "ExpendabilityReason",
    "ExpendabilitySignals",
    "ExpendabilityScore",
    "ExpendabilityAssessment",
    "ReasonContribution",
    "TeamFixture",
    "Pick",
    "PickScore",
    "ChipType",
    "LivePointsBreakdown",
    "TransferAction",
    "TransferRecommendation",
    "BenchSlot",
    "BenchOrderWarning",
    "BenchOrderAnalysis",
    "ChipEvaluation",
    "ChipAdvice",
    "Confidence",
]
