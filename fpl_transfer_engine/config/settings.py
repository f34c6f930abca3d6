"""
Global Configuration System for the FPL Transfer Engine

Centralized configuration for every tunable constant used by the optimizers.
Provides type-safe configuration with validation and environment variable support.
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional

from loguru import logger
from pydantic import BaseModel, Field, model_validator


class OptimizationConfig(BaseModel):
    """Squad rules and greedy search limits"""

    # FPL squad rules
    squad_size: int = Field(default=15, description="Players in a full squad", ge=11)
    club_limit: int = Field(
        default=3, description="Maximum players from one club", ge=1, le=15
    )

    # Transfer costs and penalties
    free_transfers: int = Field(
        default=1, description="Free transfers before hits apply", ge=0, le=15
    )
    hit_cost: float = Field(
        default=4.0,
        description="Points penalty per transfer beyond free transfers",
        ge=0.0,
        le=20.0,
    )

    # Greedy search limits
    bounded_max_moves: int = Field(
        default=3, description="Default move cap for the bounded optimizer", ge=0, le=15
    )
    hit_safety_ceiling: int = Field(
        default=8,
        description="Hard stop for the hit-aware optimizer regardless of gains",
        ge=1,
        le=15,
    )
    suggestion_top_k: int = Field(
        default=3, description="Replacements returned per outgoing player", ge=1, le=50
    )
    candidate_pool_cutoff: int = Field(
        default=250,
        description="Candidates kept after quality ranking. Bounds projection calls, "
        "not a correctness rule.",
        ge=1,
        le=2000,
    )

    # Weakest link flagging
    expendable_max_flagged: int = Field(
        default=5, description="Maximum squad players flagged expendable", ge=0, le=15
    )
    expendable_fraction: float = Field(
        default=0.3, description="Share of the squad flagged expendable", ge=0.0, le=1.0
    )


class ExpendabilityConfig(BaseModel):
    """Expendability scoring weights (0-100 score, higher = more replaceable)"""

    injured_penalty: int = Field(default=50, description="Status i/n/u", ge=0, le=100)
    suspended_penalty: int = Field(default=40, description="Status s", ge=0, le=100)
    doubtful_weight: float = Field(
        default=0.3, description="Penalty per missing chance-of-playing point", ge=0.0
    )
    doubtful_default_chance: float = Field(
        default=50.0,
        description="Chance of playing assumed when a doubtful player has none",
        ge=0.0,
        le=100.0,
    )

    low_minutes_threshold: float = Field(default=45.0, ge=0.0, le=90.0)
    low_minutes_penalty: int = Field(default=25, ge=0, le=100)
    rotation_minutes_threshold: float = Field(default=60.0, ge=0.0, le=90.0)
    rotation_penalty: int = Field(default=15, ge=0, le=100)

    low_xp_per_gw_threshold: float = Field(default=2.5, ge=0.0)
    low_xp_weight: float = Field(default=15.0, ge=0.0)

    poor_fixture_threshold: float = Field(
        default=3.5, description="Average FDR above this is flagged", ge=1.0, le=5.0
    )
    poor_fixture_baseline: float = Field(default=3.0, ge=1.0, le=5.0)
    poor_fixture_weight: float = Field(default=10.0, ge=0.0)
    blank_penalty: int = Field(default=8, description="Per blank gameweek", ge=0)

    declining_form_ratio: float = Field(
        default=0.7, description="Form below this share of ppg is flagged", ge=0.0
    )
    declining_form_weight: float = Field(default=15.0, ge=0.0)

    price_drop_net_transfers: int = Field(
        default=50000, description="Net event transfers out that signal a drop", ge=0
    )
    price_drop_penalty: int = Field(default=10, ge=0, le=100)


class ReplacementConfig(BaseModel):
    """Thresholds for the "why bring in" notes on replacement suggestions"""

    high_xp_per_gw: float = Field(
        default=5.0, description="Projected points per gameweek above this", ge=0.0
    )
    nailed_minutes: float = Field(default=80.0, ge=0.0, le=90.0)
    in_form: float = Field(default=6.0, description="FPL form at or above this", ge=0.0)
    value_points_per_million: float = Field(default=15.0, ge=0.0)
    price_rise_net_transfers: int = Field(
        default=50000, description="Net event transfers in that signal a rise", ge=0
    )
    differential_ownership: float = Field(
        default=10.0, description="Ownership (%) below this", ge=0.0, le=100.0
    )


class RecommendationConfig(BaseModel):
    """Roll, hold, transfer or hit decision thresholds"""

    min_gain_threshold: float = Field(
        default=1.5, description="Net xP gain needed to recommend any transfer", ge=0.0
    )
    hit_threshold: float = Field(
        default=4.0,
        description="Net gain a hit plan must reach, and its margin over the best "
        "single transfer",
        ge=0.0,
    )
    hits_enabled: bool = Field(default=True, description="Consider plans with hits")
    max_banked_free_transfers: int = Field(
        default=5, description="Free transfers that can be rolled over", ge=1, le=15
    )


class ChipConfig(BaseModel):
    """Bench Boost, Triple Captain and bench order thresholds"""

    # Bench Boost
    bench_boost_min_bench_xp: float = Field(default=14.0, ge=0.0)
    bench_boost_min_player_xp: float = Field(
        default=3.0, description="Every bench player must reach this", ge=0.0
    )
    bench_boost_high_confidence_xp: float = Field(default=18.0, ge=0.0)
    bench_boost_medium_confidence_xp: float = Field(default=14.0, ge=0.0)

    # Triple Captain
    triple_captain_min_xp: float = Field(default=8.0, ge=0.0)
    triple_captain_min_minutes: float = Field(default=81.0, ge=0.0, le=90.0)
    triple_captain_max_fdr: int = Field(default=2, ge=1, le=5)
    triple_captain_high_confidence_xp: float = Field(default=10.0, ge=0.0)
    triple_captain_high_confidence_minutes: float = Field(
        default=85.0, ge=0.0, le=90.0
    )
    triple_captain_medium_confidence_xp: float = Field(default=8.0, ge=0.0)
    default_fixture_difficulty: int = Field(
        default=3, description="FDR assumed when no fixture is known", ge=1, le=5
    )

    # Bench order priority: weighted blend of xP and minutes
    bench_xp_weight: float = Field(default=0.6, ge=0.0, le=1.0)
    bench_minutes_weight: float = Field(default=0.4, ge=0.0, le=1.0)
    bench_xp_scale: float = Field(
        default=6.0, description="Gameweek xP that counts as a full score", gt=0.0
    )
    bench_warning_margin: float = Field(
        default=0.1, description="Priority gap needed before warning", ge=0.0
    )


class ProjectionConfig(BaseModel):
    """Projection lookups"""

    default_window_length: int = Field(
        default=3, description="Gameweeks projected when no window is given", ge=1, le=10
    )
    memoize: bool = Field(
        default=True, description="Cache projections per service instance"
    )


class EngineConfig(BaseModel):
    """Master Engine Configuration Container"""

    optimization: OptimizationConfig = Field(
        default_factory=OptimizationConfig, description="Optimization Configuration"
    )
    expendability: ExpendabilityConfig = Field(
        default_factory=ExpendabilityConfig,
        description="Expendability Scoring Configuration",
    )
    replacement: ReplacementConfig = Field(
        default_factory=ReplacementConfig,
        description="Replacement Suggestion Configuration",
    )
    recommendation: RecommendationConfig = Field(
        default_factory=RecommendationConfig,
        description="Transfer Recommendation Configuration",
    )
    chips: ChipConfig = Field(
        default_factory=ChipConfig, description="Chip and Bench Configuration"
    )
    projection: ProjectionConfig = Field(
        default_factory=ProjectionConfig, description="Projection Configuration"
    )

    @model_validator(mode="after")
    def validate_config_consistency(self):
        """Validate cross-field consistency"""
        exp = self.expendability
        if exp.rotation_minutes_threshold < exp.low_minutes_threshold:
            raise ValueError(
                "expendability.rotation_minutes_threshold must not be below "
                "low_minutes_threshold"
            )
        if exp.poor_fixture_threshold < exp.poor_fixture_baseline:
            raise ValueError(
                "expendability.poor_fixture_threshold must not be below "
                "poor_fixture_baseline"
            )
        chips = self.chips
        if (
            chips.bench_boost_high_confidence_xp
            < chips.bench_boost_medium_confidence_xp
        ):
            raise ValueError(
                "chips.bench_boost_high_confidence_xp must not be below "
                "bench_boost_medium_confidence_xp"
            )
        if (
            chips.triple_captain_high_confidence_xp
            < chips.triple_captain_medium_confidence_xp
        ):
            raise ValueError(
                "chips.triple_captain_high_confidence_xp must not be below "
                "triple_captain_medium_confidence_xp"
            )
        return self


def _coerce_env_value(value: str):
    """Convert an environment string to bool/int/float where it looks like one."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    if "." in value:
        try:
            return float(value)
        except ValueError:
            return value
    return value


def load_config(
    config_path: Optional[Path] = None, config_data: Optional[Dict] = None
) -> EngineConfig:
    """
    Load configuration with environment variable overrides and optional config file

    Args:
        config_path: Optional path to a JSON configuration file
        config_data: Optional dictionary of configuration data

    Environment variables can override any config value using the pattern:
    FPL_{SECTION}_{FIELD} = value

    Example: FPL_OPTIMIZATION_HIT_COST=8
    """
    config_dict: Dict = {}

    if config_path and config_path.exists():
        try:
            with open(config_path, "r") as f:
                if config_path.suffix.lower() == ".json":
                    config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Failed to load config file {config_path}: {e}")

    if config_data:
        for section, fields in config_data.items():
            if isinstance(fields, dict):
                config_dict.setdefault(section, {}).update(fields)
            else:
                config_dict[section] = fields

    # Environment variable overrides
    sections = set(EngineConfig.model_fields)
    for env_var, value in os.environ.items():
        if not env_var.startswith("FPL_"):
            continue
        parts = env_var.split("_")[1:]
        if len(parts) < 2:
            continue
        section = parts[0].lower()
        if section not in sections:
            continue
        field = "_".join(parts[1:]).lower()
        config_dict.setdefault(section, {})[field] = _coerce_env_value(value)

    try:
        return EngineConfig(**config_dict)
    except ValueError as e:
        logger.warning(f"⚠️ Configuration validation failed: {e}")
        logger.warning("Using default configuration...")
        return EngineConfig()


# Global configuration instance
config = load_config()
