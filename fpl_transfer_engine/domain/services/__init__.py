"""Domain services for business logic."""

from .live_points_service import LivePointsService
from .optimization_service import OptimizationService

__all__ = [
    "OptimizationService",
    "LivePointsService",
]
