"""Feature profiles: which token and relation attributes take part in a comparison.

A profile also fixes how tall the mined twigs may be and how a twig that
matches is scored. Heights alternate between token level (odd) and
relation level (even); a profile only examines the heights whose top item
carries a feature it tracks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from grammar_miner.utils.text import format_for_printing

if TYPE_CHECKING:
    from grammar_miner.commonality.twig import Twig


@dataclass(frozen=True)
class FeatureProfile:
    lemmas: bool = False
    pos: bool = False
    supertags: bool = False
    relation_types: bool = False
    recurse_hierarchy: bool = False
    base_score: float = 1.0
    depth_bonus: float = 1.0
    max_height: int = 1
    name: str = field(default="")

    def __post_init__(self) -> None:
        if self.max_height < 1:
            raise ValueError(f"max_height must be at least 1, got {self.max_height}")
        if not (self.tracks_tokens or self.tracks_relations):
            raise ValueError("A feature profile must track at least one feature")
        if not self.name:
            object.__setattr__(self, "name", self.description)

    @property
    def tracks_tokens(self) -> bool:
        return self.lemmas or self.pos or self.supertags

    @property
    def tracks_relations(self) -> bool:
        return self.relation_types

    @property
    def description(self) -> str:
        features = []
        if self.lemmas:
            features.append("lemmas")
        if self.pos:
            features.append("POS")
        if self.supertags:
            features.append("supertags")
        if self.relation_types:
            features.append("GR types")
        return format_for_printing(features)

    def lower_salient_height(self, height: int) -> int:
        """Next lower height worth examining, or 0 when there is none.

        Supertags alone do not make a token level salient. When token and
        relation features are mixed, height 1 is skipped: a lone token
        without its relation says too little.
        """
        salient_tokens = self.lemmas or self.pos
        floor = 1 if self.relation_types and salient_tokens else 0
        height -= 1
        while height > floor:
            if height % 2 == 1:
                if salient_tokens:
                    return height
            elif self.relation_types:
                return height
            height -= 1
        return 0

    def salient_heights(self) -> list[int]:
        """``max_height`` followed by every lower salient height, descending."""
        heights = [self.max_height]
        lower = self.lower_salient_height(self.max_height)
        while lower > 0:
            heights.append(lower)
            lower = self.lower_salient_height(lower)
        return heights

    def reductions(self, height: int) -> int:
        count = 0
        lower = self.lower_salient_height(height)
        while lower > 0:
            count += 1
            lower = self.lower_salient_height(lower)
        return count

    def score(self, twig: Twig) -> float:
        """Base score plus a bonus per salient reduction, scaled by genericness."""
        return (self.base_score + self.depth_bonus * self.reductions(twig.height)) * twig.weight

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "lemmas": self.lemmas,
            "pos": self.pos,
            "supertags": self.supertags,
            "relation_types": self.relation_types,
            "recurse_hierarchy": self.recurse_hierarchy,
            "base_score": self.base_score,
            "depth_bonus": self.depth_bonus,
            "max_height": self.max_height,
        }


def _profile(lemmas, pos, supertags, relation_types, recurse, base, bonus, max_height) -> FeatureProfile:
    return FeatureProfile(
        lemmas=lemmas,
        pos=pos,
        supertags=supertags,
        relation_types=relation_types,
        recurse_hierarchy=recurse,
        base_score=base,
        depth_bonus=bonus,
        max_height=max_height,
    )


# Most specific first.
DEFAULT_PROFILES: tuple[FeatureProfile, ...] = (
    #        lemmas pos    suptag rel    recurse base bonus height
    _profile(True,  True,  False, True,  False, 100, 50, 3),
    _profile(True,  False, False, True,  True,  40,  22, 5),
    _profile(False, True,  False, True,  True,  14,  8,  5),
    _profile(False, False, True,  True,  True,  16,  10, 5),
    _profile(True,  True,  False, False, True,  12,  15, 3),
    _profile(True,  False, True,  False, True,  14,  18, 3),
    _profile(True,  False, False, False, False, 5,   1,  1),
    _profile(False, True,  False, False, True,  1,   1,  1),
    _profile(False, False, True,  False, False, 2,   1,  1),
    _profile(False, False, False, True,  True,  1,   1,  2),
)


def profile_by_name(name: str, profiles: tuple[FeatureProfile, ...] = DEFAULT_PROFILES) -> FeatureProfile:
    for profile in profiles:
        if profile.name == name:
            return profile
    raise KeyError(f"No feature profile named {name!r}")
