"""Tests for wrong-answer re-ranking, fragment filtering and thresholds."""

from __future__ import annotations

import pytest

from grammar_miner.commonality.ranking import (
    RankedSentence,
    ScoreThresholder,
    UnsupervisedScoreThresholder,
    coherence_window,
    dominant_scores,
    filter_fragments,
    find_coherent_wrong_answers,
    is_fragment,
    rank,
    select_wrong_answers,
)
from grammar_miner.commonality.scoring import Score, ScoredGraph, Strength
from grammar_miner.config.schema import ScoringConfig
from grammar_miner.graph.builder import GraphBuilder


def _scored(graph, *values: float) -> ScoredGraph:
    return ScoredGraph.from_scores(graph, [Score(v, f"s{v}", Strength.STRONG) for v in values])


def _words(*tokens: tuple[str, str]):
    b = GraphBuilder()
    for i, (word, pos) in enumerate(tokens):
        b.add_token(i, word, word.lower(), pos)
    return b.build()


@pytest.fixture
def corpus(svo):
    return [
        svo("cat", "chased", "chase", "mouse"),
        svo("dog", "chased", "chase", "cat"),
        svo("boy", "kicked", "kick", "ball"),
        svo("girl", "threw", "throw", "ball"),
        svo("man", "ate", "eat", "apple"),
    ]


class TestCoherenceWindow:
    def test_small_corpus(self):
        assert coherence_window(10, ScoringConfig()) == 2
        assert coherence_window(4, ScoringConfig()) == 0

    def test_large_corpus(self):
        assert coherence_window(150, ScoringConfig()) == 10


class TestDominantScores:
    def test_largest_first_below_threshold(self, cat_chased_mouse):
        sentence = _scored(cat_chased_mouse, 50, 30, 20)
        assert {s.value for s in dominant_scores(sentence, 0.95)} == {50, 30}

    def test_low_threshold(self, cat_chased_mouse):
        assert dominant_scores(_scored(cat_chased_mouse, 50, 30, 20), 0.4) == set()


class TestFindCoherentWrongAnswers:
    def test_blacklisted_scores_negated(self, corpus):
        shared = Score(100.0, "shared", Strength.STRONG)
        sentences = rank(
            [
                ScoredGraph.from_scores(corpus[0], [shared, Score(10.0, "a", Strength.WEAK)]),
                ScoredGraph.from_scores(corpus[1], [shared, Score(20.0, "b", Strength.WEAK)]),
                ScoredGraph.from_scores(corpus[2], [Score(60.0, "c", Strength.WEAK)]),
                ScoredGraph.from_scores(corpus[3], [Score(50.0, "d", Strength.WEAK)]),
                ScoredGraph.from_scores(corpus[4], [Score(40.0, "e", Strength.WEAK)]),
            ]
        )
        wrong = find_coherent_wrong_answers(sentences, ScoringConfig())

        assert [s.total for s in wrong] == [60.0, 50.0, 40.0, -80.0, -90.0]
        assert wrong[-1].graph == corpus[0]
        assert wrong[-1].scores[-1] == shared.negated()

    def test_preserves_candidates(self, corpus):
        sentences = rank(_scored(g, 10 * (i + 1)) for i, g in enumerate(corpus))
        wrong = find_coherent_wrong_answers(sentences, ScoringConfig())
        assert {s.graph for s in wrong} == set(corpus)

    def test_empty(self):
        assert find_coherent_wrong_answers([], ScoringConfig()) == []


class TestFragments:
    def test_complete_sentence(self, cat_chased_mouse):
        assert not is_fragment(cat_chased_mouse, 5)

    def test_too_short(self, cat_chased_mouse):
        assert is_fragment(cat_chased_mouse, 6)

    def test_lowercase_start(self):
        g = _words(("cats", "NNS"), ("chase", "VBP"), ("all", "DT"), ("mice", "NNS"), ("daily", "RB"), (".", "."))
        assert is_fragment(g, 5)

    def test_no_terminal_punctuation(self):
        g = _words(("Cats", "NNS"), ("chase", "VBP"), ("all", "DT"), ("the", "DT"), ("mice", "NNS"))
        assert is_fragment(g, 5)

    def test_no_verb(self):
        g = _words(("The", "DT"), ("big", "JJ"), ("black", "JJ"), ("cat", "NN"), ("here", "RB"), (".", "."))
        assert is_fragment(g, 5)

    def test_wordless_tokens_not_counted(self):
        b = GraphBuilder()
        b.add_token(0, "Cats", "cat", "NNS")
        for i in range(1, 4):
            b.add_token(i, lemma="pro", pos="PRP")
        b.add_token(4, "sleep", "sleep", "VBP")
        b.add_token(5, ".", ".", ".")
        assert is_fragment(b.build(), 5)

    def test_stock_quote(self):
        b = GraphBuilder()
        for i, (word, pos) in enumerate(
            [("Shares", "NNS"), ("rose", "VBD"), ("3/4", "CD"), ("to", "TO"), ("$", "$"), ("12", "CD"), (".", ".")]
        ):
            b.add_token(i, word, word.lower(), pos)
        assert is_fragment(b.build(), 5)

    def test_filter_drops_fragments(self, cat_chased_mouse):
        short = _words(("Run", "VB"), ("!", "."))
        wrong = [_scored(cat_chased_mouse, 5), _scored(short, 3)]
        kept = filter_fragments(wrong, [cat_chased_mouse], ScoringConfig())
        assert [s.graph for s in kept] == [cat_chased_mouse]

    def test_fragmentary_counter_examples_keep_everything(self, cat_chased_mouse):
        short = _words(("Run", "VB"), ("!", "."))
        wrong = [_scored(cat_chased_mouse, 5), _scored(short, 3)]
        kept = filter_fragments(wrong, [_words(("run", "VB"))], ScoringConfig())
        assert len(kept) == 2


class TestThresholds:
    def test_unsupervised_threshold(self, corpus):
        ranked = rank([_scored(corpus[0], 100), _scored(corpus[1], 70), _scored(corpus[2], 60)])
        kept = UnsupervisedScoreThresholder(0.68).apply(ranked)
        assert [s.total for s in kept] == [100, 70]
        assert isinstance(UnsupervisedScoreThresholder(), ScoreThresholder)

    def test_threshold_on_empty(self):
        assert UnsupervisedScoreThresholder().apply([]) == []

    def test_select_wrong_answers(self, corpus):
        wrong = rank([_scored(corpus[0], 10), _scored(corpus[1], 8), _scored(corpus[2], 5), _scored(corpus[3], 0)])
        assert [s.total for s in select_wrong_answers(wrong, 1, ScoringConfig())] == [10, 8, 5]
        assert [s.total for s in select_wrong_answers(wrong, 1, ScoringConfig(incorrect_answers_per_question=2))] == [
            10,
            8,
        ]
        assert select_wrong_answers(wrong, 0, ScoringConfig()) == []
        assert select_wrong_answers([], 3, ScoringConfig()) == []


class TestRankedSentence:
    def test_from_scored(self, cat_chased_mouse):
        ranked = RankedSentence.from_scored(_scored(cat_chased_mouse, 4))
        assert ranked.sentence == "The cat chased the mouse."
        assert ranked.total == 4
        assert ranked.to_dict()["breakdown"].startswith("[s4")
