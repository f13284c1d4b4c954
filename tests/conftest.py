"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from grammar_miner.graph.builder import GraphBuilder
from grammar_miner.graph.models import DependencyGraph

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _svo(
    subject: str,
    verb: str,
    verb_lemma: str,
    obj: str,
    determiners: tuple[str, str] = ("The", "the"),
    verb_pos: str = "VBD",
) -> DependencyGraph:
    """Build 'Det Noun Verb Det Noun .' with the usual C&C relations."""
    b = GraphBuilder()
    b.add_token(0, determiners[0], determiners[0].lower(), "DT")
    b.add_token(1, subject, subject, "NN")
    b.add_token(2, verb, verb_lemma, verb_pos)
    b.add_token(3, determiners[1], determiners[1].lower(), "DT")
    b.add_token(4, obj, obj, "NN")
    b.add_token(5, ".", ".", ".")
    b.add_relation("det", 1, 0)
    b.add_relation("ncsubj", 2, 1)
    b.add_relation("dobj", 2, 4)
    b.add_relation("det", 4, 3)
    return b.build()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def config_path() -> Path:
    return FIXTURES_DIR / "config_test.yaml"


@pytest.fixture
def svo() -> Callable[..., DependencyGraph]:
    return _svo


@pytest.fixture
def cat_chased_mouse() -> DependencyGraph:
    return _svo("cat", "chased", "chase", "mouse")


@pytest.fixture
def mouse_chased_cat() -> DependencyGraph:
    return _svo("mouse", "chased", "chase", "cat")


@pytest.fixture
def dog_ate_bone() -> DependencyGraph:
    return _svo("dog", "ate", "eat", "bone", determiners=("A", "a"))
