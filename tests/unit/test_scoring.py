"""Tests for score records and scored graphs."""

from __future__ import annotations

from grammar_miner.commonality.scoring import Score, ScoredGraph, Strength
from grammar_miner.commonality.twig import RelationItem, TokenItem, Twig
from grammar_miner.hierarchy.relations import relation_type


class TestScore:
    def test_str_with_expected_and_actual(self):
        expected = Twig((TokenItem("cat"), RelationItem(relation_type("subj"))))
        actual = Twig((TokenItem("cat"), RelationItem(relation_type("ncsubj"))))
        score = Score(1250.0, "2-level structure (lemmas and GR types)", Strength.STRONG, expected, actual)
        assert str(score) == (
            "2-level structure (lemmas and GR types) "
            "(expected: <cat>(subj); actual: <cat>(ncsubj); strength: strong; points: 1,250)"
        )

    def test_str_with_frame_set(self):
        score = Score(200.0, "verb frames", Strength.STRONG, actual=frozenset({"b", "a"}))
        assert str(score) == "verb frames ({a, b}; strength: strong; points: 200)"

    def test_fractional_points(self):
        assert str(Score(2.5, "x", Strength.WEAK)) == "x (strength: weak; points: 2.5)"

    def test_negated(self):
        score = Score(10.0, "x", Strength.WEAK)
        assert score.negated().value == -10.0
        assert score.negated().negated() == score

    def test_equality_ignores_actual(self):
        a = Score(10.0, "x", Strength.WEAK, expected="p", actual="one")
        b = Score(10.0, "x", Strength.WEAK, expected="p", actual="two")
        assert a == b
        assert len({a, b}) == 1

    def test_to_dict(self):
        d = Score(10.0, "verb frames", Strength.STRONG, actual=frozenset({"NP V"})).to_dict()
        assert d == {
            "value": 10.0,
            "description": "verb frames",
            "strength": "strong",
            "expected": None,
            "actual": "{NP V}",
        }


class TestScoredGraph:
    def test_scores_sorted_and_totalled(self, cat_chased_mouse):
        scored = ScoredGraph.from_scores(
            cat_chased_mouse,
            [Score(1.0, "a", Strength.WEAK), Score(5.0, "b", Strength.STRONG), Score(-2.0, "c", Strength.WEAK)],
        )
        assert [s.value for s in scored.scores] == [5.0, 1.0, -2.0]
        assert scored.total == 4.0
        assert scored.sentence == "The cat chased the mouse."

    def test_breakdown(self, cat_chased_mouse):
        scored = ScoredGraph.from_scores(cat_chased_mouse, [Score(3.0, "a", Strength.WEAK)])
        assert scored.breakdown == "[a (strength: weak; points: 3)]"

    def test_sort_key_prefers_higher_total(self, cat_chased_mouse, dog_ate_bone):
        low = ScoredGraph.from_scores(cat_chased_mouse, [Score(1.0, "a", Strength.WEAK)])
        high = ScoredGraph.from_scores(dog_ate_bone, [Score(9.0, "a", Strength.WEAK)])
        assert sorted([low, high], key=lambda s: s.sort_key) == [high, low]

    def test_to_dict(self, cat_chased_mouse):
        d = ScoredGraph.from_scores(cat_chased_mouse, [Score(3.0, "a", Strength.WEAK)]).to_dict()
        assert d["sentence"] == "The cat chased the mouse."
        assert d["total"] == 3.0
        assert len(d["scores"]) == 1
