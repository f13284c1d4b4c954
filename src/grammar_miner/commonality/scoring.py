"""Score records and scored graphs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from grammar_miner.graph.models import DependencyGraph


class Strength(str, Enum):
    """STRONG evidence excludes counter-examples; WEAK ignores them."""

    STRONG = "strong"
    WEAK = "weak"


def _format_points(value: float) -> str:
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


@dataclass(frozen=True)
class Score:
    """One piece of evidence. ``value`` already includes the strength multiplier.

    Equality ignores ``actual`` so that the same mined evidence is recognised
    across different sentences.
    """

    value: float
    description: str
    strength: Strength
    expected: Any = None
    actual: Any = field(default=None, compare=False)

    def negated(self) -> Score:
        return replace(self, value=-self.value)

    def __str__(self) -> str:
        parts = []
        if self.expected is not None:
            parts.append(f"expected: {self.expected}; actual: ")
        if self.actual is not None:
            parts.append(f"{_render(self.actual)}; ")
        parts.append(f"strength: {self.strength.value}; points: {_format_points(self.value)}")
        return f"{self.description} ({''.join(parts)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "description": self.description,
            "strength": self.strength.value,
            "expected": None if self.expected is None else _render(self.expected),
            "actual": None if self.actual is None else _render(self.actual),
        }


def _render(obj: Any) -> str:
    if isinstance(obj, (set, frozenset)):
        return "{" + ", ".join(sorted(str(o) for o in obj)) + "}"
    return str(obj)


@dataclass(frozen=True)
class ScoredGraph:
    """A candidate graph with its evidence, highest contribution first."""

    graph: DependencyGraph
    scores: tuple[Score, ...] = ()

    @classmethod
    def from_scores(cls, graph: DependencyGraph, scores: Iterable[Score]) -> ScoredGraph:
        return cls(graph, tuple(sorted(scores, key=lambda s: -s.value)))

    @property
    def total(self) -> float:
        return sum(s.value for s in self.scores)

    @property
    def sentence(self) -> str:
        return self.graph.sentence

    @property
    def breakdown(self) -> str:
        return "[" + ", ".join(str(s) for s in self.scores) + "]"

    @property
    def sort_key(self) -> tuple:
        return (-self.total, self.graph.sort_key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sentence": self.sentence,
            "total": self.total,
            "scores": [s.to_dict() for s in self.scores],
        }
