"""Generic DAG of labelled tags with ancestor queries and genericness weights.

Both the part-of-speech and the grammatical-relation catalogues are built
on :class:`TagHierarchy`. A tag may have several parents; ``ancestors`` is
the reflexive-transitive closure over the parent links.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tag:
    """A node in a tag hierarchy. Identity is ``(kind, label)``."""

    kind: str
    label: str
    description: str = field(default="", compare=False)
    weight: float = field(default=1.0, compare=False)

    def __str__(self) -> str:
        return self.label


# (label, weight, parent labels, description)
TagEntry = tuple[str, float, Sequence[str], str]


class TagHierarchy:
    """A closed set of tags of one kind linked into a DAG."""

    def __init__(self, kind: str, entries: Iterable[TagEntry]) -> None:
        self.kind = kind
        self._tags: dict[str, Tag] = {}
        self._parent_labels: dict[str, tuple[str, ...]] = {}
        for label, weight, parents, description in entries:
            if label in self._tags:
                raise ValueError(f"Duplicate {kind} tag: {label!r}")
            if not 0.0 < weight <= 1.0:
                raise ValueError(f"Weight of {kind} tag {label!r} must be in (0, 1], got {weight}")
            self._tags[label] = Tag(kind, label, description, weight)
            self._parent_labels[label] = tuple(parents)

        for label, parents in self._parent_labels.items():
            for parent in parents:
                if parent not in self._tags:
                    raise ValueError(f"{kind} tag {label!r} names unknown parent {parent!r}")

        self._ancestors: dict[Tag, frozenset[Tag]] = {}

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._tags.values())

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Tag):
            return item.kind == self.kind and item.label in self._tags
        return item in self._tags

    def get(self, label: str | None) -> Tag | None:
        """Look up a tag by label, returning None when it is not defined."""
        if label is None:
            return None
        return self._tags.get(label)

    def __getitem__(self, label: str) -> Tag:
        return self._tags[label]

    def parents(self, tag: Tag) -> tuple[Tag, ...]:
        return tuple(self._tags[p] for p in self._parent_labels[tag.label])

    def ancestors(self, tag: Tag) -> frozenset[Tag]:
        """All tags reachable from ``tag`` via parent links, ``tag`` included."""
        cached = self._ancestors.get(tag)
        if cached is not None:
            return cached

        seen: set[Tag] = {tag}
        queue: deque[Tag] = deque([tag])
        while queue:
            current = queue.popleft()
            for parent in self.parents(current):
                if parent not in seen:
                    seen.add(parent)
                    queue.append(parent)

        result = frozenset(seen)
        self._ancestors[tag] = result
        return result

    def ancestor_of(self, ancestor: Tag, descendant: Tag) -> bool:
        """True iff ``ancestor`` is reachable from ``descendant`` (reflexive)."""
        return ancestor in self.ancestors(descendant)

    def descendant_of(self, descendant: Tag, ancestor: Tag) -> bool:
        return self.ancestor_of(ancestor, descendant)

    def weight(self, tag: Tag) -> float:
        return self._tags[tag.label].weight


_REGISTRY: dict[str, TagHierarchy] = {}


def register(hierarchy: TagHierarchy) -> TagHierarchy:
    """Make a hierarchy available to the module-level helpers."""
    if hierarchy.kind in _REGISTRY:
        logger.debug("Replacing registered %s hierarchy", hierarchy.kind)
    _REGISTRY[hierarchy.kind] = hierarchy
    return hierarchy


def hierarchy_for(kind: str) -> TagHierarchy:
    try:
        return _REGISTRY[kind]
    except KeyError:
        raise KeyError(f"No tag hierarchy registered for kind {kind!r}") from None


def ancestors(tag: Tag) -> frozenset[Tag]:
    return hierarchy_for(tag.kind).ancestors(tag)


def ancestor_of(ancestor: Tag, descendant: Tag) -> bool:
    """Cross-kind comparisons are always False."""
    if ancestor.kind != descendant.kind:
        return False
    return hierarchy_for(ancestor.kind).ancestor_of(ancestor, descendant)


def strict_ancestor_of(ancestor: Tag, descendant: Tag) -> bool:
    return ancestor != descendant and ancestor_of(ancestor, descendant)


def weight(tag: Tag | None) -> float:
    """Genericness multiplier; an absent tag is neutral."""
    if tag is None:
        return 1.0
    return tag.weight
