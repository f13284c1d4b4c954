"""Tests for detokenisation and list formatting."""

from __future__ import annotations

import pytest

from grammar_miner.utils.text import detokenise, format_for_printing


class TestDetokenise:
    @pytest.mark.parametrize(
        "tokens,expected",
        [
            ("The cat sat .", "The cat sat."),
            ("He did n't go , did he ?", "He didn't go, did he?"),
            ("It 's the cat 's toy", "It's the cat's toy"),
            ("They 're sure we 've won", "They're sure we've won"),
            ("a -LRB- small -RRB- cat", "a (small) cat"),
            ("It cost $ 5", "It cost $5"),
            ("up 5 %", "up 5%"),
        ],
    )
    def test_examples(self, tokens, expected):
        assert detokenise(tokens) == expected

    def test_double_quotes_alternate(self):
        assert detokenise('He said " hello " and " bye "') == 'He said "hello" and "bye"'

    def test_lone_single_quote_is_possessive(self):
        assert detokenise("the dogs ' bowls") == "the dogs' bowls"

    def test_paired_single_quotes(self):
        assert detokenise("a ' word ' here") == "a 'word' here"

    def test_dashes(self):
        assert detokenise("wait -- no") == "wait ‒ no"
        assert detokenise("1990--1995") == "1990–1995"

    def test_empty(self):
        assert detokenise("") == ""


class TestFormatForPrinting:
    def test_single(self):
        assert format_for_printing(["lemmas"]) == "lemmas"

    def test_pair(self):
        assert format_for_printing(["lemmas", "POS"]) == "lemmas and POS"

    def test_three(self):
        assert format_for_printing(["a", "b", "c"]) == "a, b and c"

    def test_limit(self):
        assert format_for_printing(["a", "b", "c", "d"], limit=2) == "a, b... (2 more)"

    def test_limit_not_reached(self):
        assert format_for_printing(["a", "b"], limit=5) == "a and b"

    def test_empty(self):
        assert format_for_printing([]) == ""
