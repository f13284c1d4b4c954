"""Redundancy pruning of mined twig buckets.

Buckets are keyed by :class:`CommonalityKey`. Two passes run per bucket:
STRONG positive twigs are removed from the matching WEAK bucket, and within
a bucket a twig is dropped when another twig equals it everywhere except at
one position, where the other's tag is a strict ancestor of its own.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, replace

from grammar_miner.commonality.profiles import FeatureProfile
from grammar_miner.commonality.scoring import Strength
from grammar_miner.commonality.twig import PathItem, RelationItem, TokenItem, Twig
from grammar_miner.hierarchy.tags import strict_ancestor_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommonalityKey:
    strength: Strength
    positive: bool
    profile: FeatureProfile
    height: int

    def to_dict(self) -> dict:
        return {
            "strength": self.strength.value,
            "positive": self.positive,
            "profile": self.profile.name,
            "height": self.height,
        }


def _processing_order(key: CommonalityKey) -> tuple:
    # STRONG first, so WEAK buckets lose their redundant twigs before being pruned
    return (key.strength is not Strength.STRONG, not key.positive, key.profile.name, -key.height)


def prune_structures(structures: Mapping[CommonalityKey, set[Twig]]) -> dict[CommonalityKey, set[Twig]]:
    """Return a pruned copy of ``structures`` with empty buckets removed."""
    pruned = {key: set(twigs) for key, twigs in structures.items() if twigs}
    before = sum(len(t) for t in pruned.values())

    for key in sorted(pruned, key=_processing_order):
        twigs = pruned[key]
        if not twigs:
            continue
        if key.strength is Strength.STRONG and key.positive:
            weak = pruned.get(replace(key, strength=Strength.WEAK))
            if weak:
                weak -= twigs
        pruned[key] = prune_struct_set(twigs, key.profile)

    result = {key: twigs for key, twigs in pruned.items() if twigs}
    after = sum(len(t) for t in result.values())
    logger.info("Pruned %d of %d mined twigs; %d buckets remain", before - after, before, len(result))
    return result


def _partial_hash(twig: Twig, excluded: int) -> int:
    return hash(tuple(item.key() for i, item in enumerate(twig.items) if i != excluded))


def _equal_except(a: Twig, b: Twig, excluded: int) -> bool:
    return all(x == y for i, (x, y) in enumerate(zip(a.items, b.items)) if i != excluded)


def _more_general_at(other: PathItem, item: PathItem, profile: FeatureProfile) -> bool:
    """True when ``other`` differs from ``item`` only by a strictly more general tag."""
    if isinstance(item, RelationItem) and isinstance(other, RelationItem):
        if not profile.relation_types or item.type is None or other.type is None:
            return False
        if (item.via_subtype, item.spacer) != (other.via_subtype, other.spacer):
            return False
        return strict_ancestor_of(other.type, item.type)
    if isinstance(item, TokenItem) and isinstance(other, TokenItem):
        if not profile.pos or item.pos is None or other.pos is None:
            return False
        if (item.lemma, item.supertag, item.spacer) != (other.lemma, other.supertag, other.spacer):
            return False
        return strict_ancestor_of(other.pos, item.pos)
    return False


def prune_struct_set(twigs: set[Twig], profile: FeatureProfile) -> set[Twig]:
    """Drop twigs made redundant by a one-position generalisation in the same set.

    Only sets built with hierarchy recursion can contain such pairs. All twigs
    in a set share one height.
    """
    if len(twigs) < 2 or not profile.recurse_hierarchy:
        return set(twigs)

    height = next(iter(twigs)).height
    buckets: dict[tuple[int, int], list[Twig]] = defaultdict(list)
    for twig in twigs:
        for excluded in range(height):
            buckets[(excluded, _partial_hash(twig, excluded))].append(twig)

    redundant: set[Twig] = set()
    for (excluded, _), group in buckets.items():
        if len(group) < 2:
            continue
        for twig in group:
            for other in group:
                if other is twig or not _equal_except(twig, other, excluded):
                    continue
                if _more_general_at(other.items[excluded], twig.items[excluded], profile):
                    redundant.add(twig)
                    break

    if redundant:
        logger.debug("Profile '%s' h%d: %d redundant twigs", profile.name, height, len(redundant))
    return twigs - redundant
