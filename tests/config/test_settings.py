"""Tests for engine configuration loading."""

import json

import pytest

from fpl_transfer_engine.config.settings import EngineConfig, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Strip FPL_* variables so each test controls overrides."""
    import os

    for key in list(os.environ):
        if key.startswith("FPL_"):
            monkeypatch.delenv(key, raising=False)


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()

        assert config.optimization.club_limit == 3
        assert config.optimization.free_transfers == 1
        assert config.optimization.hit_cost == 4.0
        assert config.optimization.suggestion_top_k == 3
        assert config.expendability.injured_penalty == 50
        assert config.replacement.high_xp_per_gw == 5.0
        assert config.projection.default_window_length == 3
        assert config.recommendation.min_gain_threshold == 1.5
        assert config.recommendation.hit_threshold == 4.0
        assert config.recommendation.max_banked_free_transfers == 5
        assert config.chips.bench_boost_min_bench_xp == 14.0
        assert config.chips.triple_captain_max_fdr == 2

    def test_cross_field_validation(self):
        with pytest.raises(ValueError, match="rotation_minutes_threshold"):
            EngineConfig(
                expendability={
                    "low_minutes_threshold": 70.0,
                    "rotation_minutes_threshold": 60.0,
                }
            )


    @pytest.mark.parametrize(
        "chips",
        [
            {"bench_boost_high_confidence_xp": 12.0},
            {"triple_captain_medium_confidence_xp": 11.0},
        ],
    )
    def test_confidence_thresholds_ordered(self, chips):
        with pytest.raises(ValueError, match="confidence_xp must not be below"):
            EngineConfig(chips=chips)


class TestLoadConfig:
    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("FPL_OPTIMIZATION_HIT_COST", "8")
        monkeypatch.setenv("FPL_PROJECTION_MEMOIZE", "false")

        config = load_config()

        assert config.optimization.hit_cost == 8.0
        assert config.projection.memoize is False

    def test_decision_sections_from_environment(self, monkeypatch):
        monkeypatch.setenv("FPL_RECOMMENDATION_HIT_THRESHOLD", "6")
        monkeypatch.setenv("FPL_RECOMMENDATION_HITS_ENABLED", "false")
        monkeypatch.setenv("FPL_CHIPS_TRIPLE_CAPTAIN_MIN_XP", "9.5")

        config = load_config()

        assert config.recommendation.hit_threshold == 6.0
        assert config.recommendation.hits_enabled is False
        assert config.chips.triple_captain_min_xp == 9.5

    def test_unknown_section_ignored(self, monkeypatch):
        monkeypatch.setenv("FPL_DATABASE_URL", "sqlite://")
        assert load_config() == EngineConfig()

    def test_config_data_merges(self):
        config = load_config(config_data={"optimization": {"free_transfers": 2}})

        assert config.optimization.free_transfers == 2
        assert config.optimization.hit_cost == 4.0

    def test_environment_beats_config_data(self, monkeypatch):
        monkeypatch.setenv("FPL_OPTIMIZATION_FREE_TRANSFERS", "3")
        config = load_config(config_data={"optimization": {"free_transfers": 2}})
        assert config.optimization.free_transfers == 3

    def test_json_file(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"optimization": {"bounded_max_moves": 5}}))

        assert load_config(config_path=path).optimization.bounded_max_moves == 5

    def test_unreadable_file_logs_and_uses_defaults(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text("{not json")

        assert load_config(config_path=path) == EngineConfig()

    def test_invalid_values_fall_back_to_defaults(self, monkeypatch):
        monkeypatch.setenv("FPL_OPTIMIZATION_CLUB_LIMIT", "0")
        assert load_config().optimization.club_limit == 3
