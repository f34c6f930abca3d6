"""
FPL Transfer Engine Configuration Module

Provides centralized configuration management for the engine.
Import the global config instance to access all configuration values.

Usage:
    from fpl_transfer_engine.config import config

    club_limit = config.optimization.club_limit
    injured_penalty = config.expendability.injured_penalty
"""

from .settings import (
    ChipConfig,
    EngineConfig,
    ExpendabilityConfig,
    OptimizationConfig,
    ProjectionConfig,
    RecommendationConfig,
    ReplacementConfig,
    config,
    load_config,
)

__all__ = [
    "EngineConfig",
    "OptimizationConfig",
    "ExpendabilityConfig",
    "ProjectionConfig",
    "ReplacementConfig",
    "RecommendationConfig",
    "ChipConfig",
    "config",
    "load_config",
]
