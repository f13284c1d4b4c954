"""What the example sentences have in common, and how a corpus measures up.

:class:`Commonality` mines, for every feature profile and salient height,
three kinds of twig sets:

* STRONG positive: in every example and in no counter-example,
* STRONG negative: in every counter-example and in no example,
* WEAK positive: in every example, counter-examples disregarded,

plus the same three over verb frames. The mined sets are pruned once and
then used to score arbitrary corpus graphs.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from grammar_miner.commonality.mining import find_struct_commonality, find_verb_frame_commonality
from grammar_miner.commonality.profiles import DEFAULT_PROFILES, FeatureProfile
from grammar_miner.commonality.pruning import CommonalityKey, prune_structures
from grammar_miner.commonality.ranking import (
    RankedSentence,
    ScoreThresholder,
    UnsupervisedScoreThresholder,
    filter_fragments,
    find_coherent_wrong_answers,
    rank,
    select_wrong_answers,
)
from grammar_miner.commonality.scoring import Score, ScoredGraph, Strength
from grammar_miner.commonality.twig import Twig, partial_structures
from grammar_miner.config.schema import ScoringConfig
from grammar_miner.graph.models import DependencyGraph, Token
from grammar_miner.semantics.verb_frames import NullVerbFrameLexicon, VerbFrameLexicon

logger = logging.getLogger(__name__)

FrameKey = tuple[Strength, bool]


class AnalysisCancelled(RuntimeError):
    """Corpus scoring was stopped by the caller's cancellation check."""


class Commonality:
    def __init__(
        self,
        examples: Sequence[DependencyGraph],
        counter_examples: Sequence[DependencyGraph] = (),
        profiles: Sequence[FeatureProfile] | None = None,
        lexicon: VerbFrameLexicon | None = None,
        config: ScoringConfig | None = None,
    ) -> None:
        if not examples:
            raise ValueError("At least one example sentence is required")
        self.examples = tuple(examples)
        self.counter_examples = tuple(counter_examples)
        self.profiles = tuple(profiles) if profiles is not None else DEFAULT_PROFILES
        self.lexicon = lexicon if lexicon is not None else NullVerbFrameLexicon()
        self.config = config if config is not None else ScoringConfig()

        self.verb_frames: dict[FrameKey, dict[str, list[Token]]] = self._mine_verb_frames()
        self.structures: dict[CommonalityKey, set[Twig]] = prune_structures(self._mine_structures())
        logger.info(
            "Mined %d twig buckets and %d verb frames from %d examples and %d counter-examples",
            len(self.structures),
            sum(len(f) for f in self.verb_frames.values()),
            len(self.examples),
            len(self.counter_examples),
        )

    def _plan(self) -> list[tuple[Strength, bool, Sequence[DependencyGraph], Sequence[DependencyGraph] | None]]:
        return [
            (Strength.STRONG, True, self.examples, self.counter_examples),
            (Strength.STRONG, False, self.counter_examples, self.examples),
            (Strength.WEAK, True, self.examples, None),
        ]

    def _mine_structures(self) -> dict[CommonalityKey, set[Twig]]:
        structures: dict[CommonalityKey, set[Twig]] = {}
        for profile in self.profiles:
            for strength, positive, positives, negatives in self._plan():
                if not positives:
                    continue
                mined = find_struct_commonality(positives, negatives, profile)
                for height, twigs in mined.items():
                    structures[CommonalityKey(strength, positive, profile, height)] = twigs
        return structures

    def _mine_verb_frames(self) -> dict[FrameKey, dict[str, list[Token]]]:
        frames: dict[FrameKey, dict[str, list[Token]]] = {}
        for strength, positive, positives, negatives in self._plan():
            frames[(strength, positive)] = (
                find_verb_frame_commonality(positives, negatives, self.lexicon) if positives else {}
            )
        return frames

    def bucket(self, strength: Strength, positive: bool, profile: FeatureProfile, height: int) -> set[Twig]:
        return self.structures.get(CommonalityKey(strength, positive, profile, height), set())

    def _buckets(self, strength: Strength, positive: bool) -> dict[tuple[FeatureProfile, int], set[Twig]]:
        return {
            (key.profile, key.height): twigs
            for key, twigs in self.structures.items()
            if key.strength is strength and key.positive == positive
        }

    def _score(
        self, points: float, description: str, strength: Strength, expected: Any = None, actual: Any = None
    ) -> Score:
        return Score(
            value=points * self.config.multiplier(strength.value),
            description=description,
            strength=strength,
            expected=expected,
            actual=actual,
        )

    def _score_structures(self, candidate: DependencyGraph, strength: Strength) -> list[Score]:
        positives = {k: sorted(v, key=lambda t: t.sort_key) for k, v in self._buckets(strength, True).items()}
        negatives = {k: sorted(v, key=lambda t: t.sort_key) for k, v in self._buckets(strength, False).items()}
        order = {profile: i for i, profile in enumerate(self.profiles)}
        wanted = sorted(set(positives) | set(negatives), key=lambda ph: (order.get(ph[0], len(order)), -ph[1]))

        scores: list[Score] = []
        observed: dict[tuple[FeatureProfile, int], set[Twig]] = defaultdict(set)
        credited: set[tuple[FeatureProfile, int, Twig]] = set()
        for token in candidate.tokens:
            for profile, height in wanted:
                own = partial_structures(candidate, token.index, profile, height, generalise=False)
                observed[(profile, height)].update(own)
                mined = positives.get((profile, height))
                if not mined:
                    continue
                for twig in own:
                    for pattern in mined:
                        if (profile, height, pattern) in credited or not pattern.subsumes(twig):
                            continue
                        credited.add((profile, height, pattern))
                        scores.append(
                            self._score(
                                profile.score(pattern),
                                f"{height}-level structure ({profile.description})",
                                strength,
                                expected=pattern,
                                actual=twig,
                            )
                        )

        for profile, height in wanted:
            mined = negatives.get((profile, height))
            if not mined:
                continue
            own = observed.get((profile, height), set())
            for pattern in mined:
                if any(pattern.subsumes(twig) for twig in own):
                    continue
                scores.append(
                    self._score(profile.score(pattern), f"Absence of {height}-level structure", strength, expected=pattern)
                )
        return scores

    def _score_verb_frames(self, candidate: DependencyGraph, strength: Strength) -> list[Score]:
        positive = self.verb_frames.get((strength, True), {})
        negative = self.verb_frames.get((strength, False), {})
        points = self.config.verb_frame_score

        scores: list[Score] = []
        credited: set[str] = set()
        seen: set[str] = set()
        for token in candidate.tokens:
            if not token.is_verb:
                continue
            frames = self.lexicon.accepting_frames(token)
            seen |= frames
            matched = frames.intersection(positive) - credited
            if matched:
                credited |= matched
                scores.append(self._score(points, "verb frames", strength, actual=frozenset(matched)))

        for frame in sorted(negative):
            if frame not in seen:
                # at most once per sentence
                scores.append(self._score(points, "Absence of verb frame", strength, actual=frame))
                break
        return scores

    def find_similar(
        self,
        corpus: Iterable[DependencyGraph],
        should_cancel: Callable[[], bool] | None = None,
    ) -> list[ScoredGraph]:
        """Score every candidate against the mined evidence, best first.

        Candidates that earn no evidence at all are left out.
        """
        scored: list[ScoredGraph] = []
        seen = 0
        for candidate in corpus:
            if should_cancel is not None and should_cancel():
                raise AnalysisCancelled(f"Cancelled after scoring {seen} candidates")
            seen += 1
            scores: list[Score] = []
            for strength in Strength:
                scores.extend(self._score_verb_frames(candidate, strength))
                scores.extend(self._score_structures(candidate, strength))
            if scores:
                scored.append(ScoredGraph.from_scores(candidate, scores))
        logger.info("Scored %d candidates; %d earned evidence", seen, len(scored))
        return rank(scored)

    def find_corpus_matches(
        self,
        corpus: Iterable[DependencyGraph],
        should_cancel: Callable[[], bool] | None = None,
    ) -> tuple[list[ScoredGraph], list[ScoredGraph]]:
        """Ranked good matches and ranked coherent wrong answers."""
        similar = self.find_similar(corpus, should_cancel)
        wrong = find_coherent_wrong_answers(similar, self.config)
        wrong = filter_fragments(wrong, self.counter_examples, self.config)
        return similar, wrong

    def find_corpus_matches_as_text(
        self,
        corpus: Iterable[DependencyGraph],
        thresholder: ScoreThresholder | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ) -> tuple[list[RankedSentence], list[RankedSentence]]:
        """Thresholded good matches (examples appended) and wrong answers as text."""
        if thresholder is None:
            thresholder = UnsupervisedScoreThresholder(self.config.correct_quality_threshold)
        similar, wrong = self.find_corpus_matches(corpus, should_cancel)

        good = [RankedSentence.from_scored(s) for s in thresholder.apply(similar)]
        good.extend(RankedSentence(example.sentence, None) for example in self.examples)
        incorrect = [RankedSentence.from_scored(s) for s in select_wrong_answers(wrong, len(good), self.config)]
        logger.info("Selected %d good matches and %d wrong answers", len(good), len(incorrect))
        return good, incorrect

    def to_dict(self) -> dict[str, Any]:
        """Mined patterns in a JSON-friendly form, for inspection."""
        order = {profile: i for i, profile in enumerate(self.profiles)}
        keys = sorted(
            self.structures,
            key=lambda k: (k.strength is not Strength.STRONG, not k.positive, order.get(k.profile, 0), -k.height),
        )
        return {
            "structures": [
                {**key.to_dict(), "twigs": [t.to_dict() for t in sorted(self.structures[key], key=lambda t: t.sort_key)]}
                for key in keys
            ],
            "verb_frames": [
                {
                    "strength": strength.value,
                    "positive": positive,
                    "frames": {frame: [str(t) for t in tokens] for frame, tokens in sorted(frames.items())},
                }
                for (strength, positive), frames in self.verb_frames.items()
            ],
        }
