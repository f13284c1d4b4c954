"""Tests for configuration schema and loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from grammar_miner.commonality.profiles import DEFAULT_PROFILES
from grammar_miner.config.loader import load_config
from grammar_miner.config.schema import AnalysisConfig, ProfileDef, ScoringConfig


class TestScoringConfig:
    def test_defaults(self):
        cfg = ScoringConfig()
        assert cfg.strong_multiplier == 5
        assert cfg.weak_multiplier == 2
        assert cfg.verb_frame_score == 40
        assert cfg.semicoherent_threshold == 0.95
        assert cfg.correct_quality_threshold == 0.68
        assert cfg.incorrect_quality_threshold == 0.45
        assert cfg.incorrect_answers_per_question == 3

    def test_multiplier(self):
        cfg = ScoringConfig(strong_multiplier=7)
        assert cfg.multiplier("strong") == 7
        assert cfg.multiplier("weak") == 2
        with pytest.raises(ValueError, match="Unknown strength"):
            cfg.multiplier("medium")

    def test_threshold_out_of_range(self):
        with pytest.raises(ValidationError):
            ScoringConfig(semicoherent_threshold=1.5)


class TestAnalysisConfig:
    def test_defaults(self):
        cfg = AnalysisConfig()
        assert cfg.output_dir == Path("output")
        assert cfg.log_level == "INFO"
        assert cfg.verb_frames == {}
        assert cfg.debug_modules == []
        assert cfg.inputs.examples is None
        assert cfg.feature_profiles() == DEFAULT_PROFILES

    def test_custom_profiles(self):
        cfg = AnalysisConfig(
            profiles=[ProfileDef(name="words", lemmas=True), ProfileDef(pos=True, relation_types=True, max_height=3)]
        )
        profiles = cfg.feature_profiles()
        assert [p.name for p in profiles] == ["words", "POS and GR types"]
        assert profiles[1].salient_heights() == [3, 2]

    def test_profile_height_validated(self):
        with pytest.raises(ValidationError):
            ProfileDef(lemmas=True, max_height=0)


class TestLoader:
    def test_load_test_config(self, config_path: Path):
        cfg = load_config(config_path)
        assert cfg.log_level == "WARNING"
        assert cfg.scoring.incorrect_answers_per_question == 2
        assert cfg.verb_frames["chase"] == ["NP V NP", "NP V NP PP"]

    def test_relative_paths_resolved(self, config_path: Path):
        cfg = load_config(config_path)
        assert cfg.inputs.examples == config_path.parent / "examples.jsonl"
        assert cfg.inputs.examples.exists()
        assert cfg.output_dir == config_path.parent / "output"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        cfg = load_config(path)
        assert cfg.inputs.corpus is None
        assert cfg.output_dir == tmp_path / "output"

    def test_absolute_paths_kept(self, tmp_path: Path):
        target = tmp_path / "elsewhere" / "ex.jsonl"
        path = tmp_path / "cfg.yaml"
        path.write_text(f"inputs:\n  examples: {target.as_posix()}\n", encoding="utf-8")
        assert load_config(path).inputs.examples == target
