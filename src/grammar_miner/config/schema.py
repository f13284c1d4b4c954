"""Pydantic v2 configuration models for mining and ranking runs."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from grammar_miner.commonality.profiles import DEFAULT_PROFILES, FeatureProfile


class ScoringConfig(BaseModel):
    """Weights and thresholds used when scoring a corpus."""

    strong_multiplier: float = 5.0
    weak_multiplier: float = 2.0
    verb_frame_score: float = 40.0
    # share of a top sentence's total that its dominant scores make up
    semicoherent_threshold: float = 0.95
    correct_quality_threshold: float = 0.68
    incorrect_quality_threshold: float = 0.45
    incorrect_answers_per_question: int = 3
    coherence_window: int = 10
    coherence_window_divisor: int = 5
    coherence_large_corpus: int = 100
    fragment_min_length: int = 5
    counter_example_fragment_min_length: int = 2

    @field_validator(
        "semicoherent_threshold", "correct_quality_threshold", "incorrect_quality_threshold"
    )
    @classmethod
    def _fraction(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {v}")
        return v

    def multiplier(self, strength: str) -> float:
        if strength == "strong":
            return self.strong_multiplier
        if strength == "weak":
            return self.weak_multiplier
        raise ValueError(f"Unknown strength: {strength}")


class ProfileDef(BaseModel):
    """One feature profile as written in YAML."""

    name: str = ""
    lemmas: bool = False
    pos: bool = False
    supertags: bool = False
    relation_types: bool = False
    recurse_hierarchy: bool = False
    base_score: float = 1.0
    depth_bonus: float = 1.0
    max_height: int = Field(default=1, ge=1)

    def to_profile(self) -> FeatureProfile:
        return FeatureProfile(
            lemmas=self.lemmas,
            pos=self.pos,
            supertags=self.supertags,
            relation_types=self.relation_types,
            recurse_hierarchy=self.recurse_hierarchy,
            base_score=self.base_score,
            depth_bonus=self.depth_bonus,
            max_height=self.max_height,
            name=self.name,
        )


class InputConfig(BaseModel):
    """Where parsed graphs are read from (JSON array or NDJSON)."""

    examples: Path | None = None
    counter_examples: Path | None = None
    corpus: Path | None = None


class AnalysisConfig(BaseModel):
    """Top-level configuration."""

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    profiles: list[ProfileDef] | None = None
    verb_frames: dict[str, list[str]] = Field(default_factory=dict)
    inputs: InputConfig = Field(default_factory=InputConfig)
    output_dir: Path = Path("output")
    log_level: str = "INFO"
    # modules logged at DEBUG whatever log_level says
    debug_modules: list[str] = Field(default_factory=list)

    def feature_profiles(self) -> tuple[FeatureProfile, ...]:
        if self.profiles is None:
            return DEFAULT_PROFILES
        return tuple(p.to_profile() for p in self.profiles)
