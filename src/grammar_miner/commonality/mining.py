"""Commonality mining: patterns shared by every example and absent from every counter-example."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from grammar_miner.commonality.profiles import FeatureProfile
from grammar_miner.commonality.twig import Twig, partial_structures
from grammar_miner.graph.models import DependencyGraph, Token
from grammar_miner.semantics.verb_frames import VerbFrameLexicon

logger = logging.getLogger(__name__)


def _ordered(graphs: Sequence[DependencyGraph]) -> list[DependencyGraph]:
    """Distinct graphs in their stable order."""
    return sorted(set(graphs), key=lambda g: g.sort_key)


def _twigs_by_height(graph: DependencyGraph, profile: FeatureProfile) -> dict[int, set[Twig]]:
    found: dict[int, set[Twig]] = defaultdict(set)
    for token in graph.tokens:
        for height in profile.salient_heights():
            found[height].update(partial_structures(graph, token.index, profile, height))
    return found


def find_struct_commonality(
    examples: Sequence[DependencyGraph],
    counter_examples: Sequence[DependencyGraph] | None,
    profile: FeatureProfile,
) -> dict[int, set[Twig]]:
    """Twigs, per height, observed in all examples and in no counter-example.

    A single occurrence in any counter-example disqualifies a twig.
    """
    ordered = _ordered(examples)
    sources: dict[int, dict[Twig, set[DependencyGraph]]] = defaultdict(lambda: defaultdict(set))
    for example in ordered:
        for height, twigs in _twigs_by_height(example, profile).items():
            for twig in twigs:
                sources[height][twig].add(example)

    if counter_examples:
        for counter in _ordered(counter_examples):
            for height, twigs in _twigs_by_height(counter, profile).items():
                observed = sources.get(height)
                if observed is None:
                    continue
                for twig in twigs:
                    observed.pop(twig, None)

    required = set(ordered)
    common: dict[int, set[Twig]] = {}
    for height, observed in sources.items():
        common[height] = {
            twig
            for twig, seen_in in observed.items()
            if seen_in == required
        }
    logger.debug(
        "Profile '%s': %s",
        profile.name,
        ", ".join(f"h{h}={len(t)}" for h, t in sorted(common.items())) or "nothing in common",
    )
    return common


def find_verb_frame_commonality(
    examples: Sequence[DependencyGraph],
    counter_examples: Sequence[DependencyGraph] | None,
    lexicon: VerbFrameLexicon,
) -> dict[str, list[Token]]:
    """Verb frames accepted by a verb in every example and by none in the counter-examples."""
    ordered = _ordered(examples)
    required = set(ordered)
    frames: dict[str, list[Token]] = defaultdict(list)
    coverage: dict[str, set[DependencyGraph]] = defaultdict(set)
    for example in ordered:
        for token in example.tokens:
            if not token.is_verb:
                continue
            for frame in lexicon.accepting_frames(token):
                frames[frame].append(token)
                coverage[frame].add(example)

    if counter_examples:
        for counter in counter_examples:
            for token in counter.tokens:
                if not token.is_verb:
                    continue
                for frame in lexicon.accepting_frames(token):
                    frames.pop(frame, None)
                    coverage.pop(frame, None)

    return {
        frame: tokens
        for frame, tokens in frames.items()
        if coverage[frame] == required
    }
