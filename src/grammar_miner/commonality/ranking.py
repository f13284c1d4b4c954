"""Ranking helpers: wrong-answer re-ranking, fragment filtering and thresholds."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from grammar_miner.commonality.scoring import Score, ScoredGraph
from grammar_miner.config.schema import ScoringConfig
from grammar_miner.graph.models import DependencyGraph

logger = logging.getLogger(__name__)

# Fractions, currency words and symbols: stock quotes are syntactically boring.
_FIGURE = re.compile(r"[0-9]+/[0-9]+|yen|dollars|cents|francs|[A-Z]*[£$%]")


def rank(scored: Iterable[ScoredGraph]) -> list[ScoredGraph]:
    """Highest total first; ties broken by the graphs' stable order."""
    return sorted(scored, key=lambda s: s.sort_key)


def coherence_window(n_candidates: int, config: ScoringConfig) -> int:
    if n_candidates > config.coherence_large_corpus:
        return config.coherence_window
    return n_candidates // config.coherence_window_divisor


def dominant_scores(sentence: ScoredGraph, threshold: float) -> set[Score]:
    """Largest contributions that together stay below ``threshold`` of the total."""
    limit = sentence.total * threshold
    accounted = 0.0
    dominant: set[Score] = set()
    for score in sentence.scores:
        accounted += score.value
        if accounted < limit:
            dominant.add(score)
    return dominant


def find_coherent_wrong_answers(
    sorted_sentences: Sequence[ScoredGraph], config: ScoringConfig
) -> list[ScoredGraph]:
    """Re-rank candidates so that subtly similar sentences rise to the top.

    The dominant contributions of the top-scoring window are blacklisted.
    Every candidate keeps all its contributions, with the blacklisted ones
    negated, and the list is re-sorted. Input must be sorted best first.
    """
    window = coherence_window(len(sorted_sentences), config)
    blacklist: set[Score] = set()
    for sentence in sorted_sentences[:window]:
        blacklist |= dominant_scores(sentence, config.semicoherent_threshold)
    logger.info("Blacklisted %d dominant scores from the top %d candidates", len(blacklist), window)

    reranked = [
        ScoredGraph.from_scores(
            sentence.graph,
            (score.negated() if score in blacklist else score for score in sentence.scores),
        )
        for sentence in sorted_sentences
    ]
    return rank(reranked)


def is_fragment(graph: DependencyGraph, min_length: int) -> bool:
    """Heuristic test for text that is not a complete sentence."""
    sentence = graph.sentence
    if len(sentence.split(" ")) < min_length:
        return True
    if not sentence or not ("A" <= sentence[0] <= "Z"):
        return True
    if sentence[-1] not in ".!?":
        return True

    verb_found = False
    lowercase_initial = False
    figures = 0
    for token in graph.tokens:
        word = token.word or ""
        if _FIGURE.fullmatch(word):
            figures += 1
        elif token.is_verb:
            verb_found = True
        if "a" <= word[:1] <= "z":
            lowercase_initial = True
    return not verb_found or not lowercase_initial or figures > 1


def filter_fragments(
    wrong_answers: Sequence[ScoredGraph],
    counter_examples: Sequence[DependencyGraph],
    config: ScoringConfig,
) -> list[ScoredGraph]:
    """Drop fragments, unless the counter-examples are fragments themselves."""
    if any(is_fragment(c, config.counter_example_fragment_min_length) for c in counter_examples):
        logger.info("Counter-examples contain fragments; keeping fragmentary wrong answers")
        return list(wrong_answers)
    kept = [s for s in wrong_answers if not is_fragment(s.graph, config.fragment_min_length)]
    logger.info("Removed %d fragmentary wrong answers", len(wrong_answers) - len(kept))
    return kept


@runtime_checkable
class ScoreThresholder(Protocol):
    """Decides where the list of good matches is cut."""

    def apply(self, ranked: Sequence[ScoredGraph]) -> list[ScoredGraph]:
        ...


class UnsupervisedScoreThresholder:
    """Keep matches scoring at least a fixed fraction of the best one."""

    def __init__(self, quality_threshold: float = 0.68) -> None:
        self.quality_threshold = quality_threshold

    def apply(self, ranked: Sequence[ScoredGraph]) -> list[ScoredGraph]:
        if not ranked:
            return []
        cut = ranked[0].total * self.quality_threshold
        kept = []
        for sentence in ranked:
            if sentence.total < cut:
                break
            kept.append(sentence)
        return kept


def select_wrong_answers(
    wrong_answers: Sequence[ScoredGraph], n_good: int, config: ScoringConfig
) -> list[ScoredGraph]:
    """Keep the upper part of the wrong-answer range, at most a few per good answer."""
    if not wrong_answers:
        return []
    top = wrong_answers[0].total
    bottom = wrong_answers[-1].total
    limit = n_good * config.incorrect_answers_per_question
    kept = []
    for sentence in wrong_answers:
        if sentence.total - bottom < (top - bottom) * config.incorrect_quality_threshold:
            break
        if len(kept) >= limit:
            break
        kept.append(sentence)
    return kept


@dataclass(frozen=True)
class RankedSentence:
    sentence: str
    total: float | None
    breakdown: str = ""

    @classmethod
    def from_scored(cls, scored: ScoredGraph) -> RankedSentence:
        return cls(scored.sentence, scored.total, scored.breakdown)

    def to_dict(self) -> dict[str, Any]:
        return {"sentence": self.sentence, "total": self.total, "breakdown": self.breakdown}
