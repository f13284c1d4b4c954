"""Twigs: bounded-height paths climbing from a leaf token toward the root.

A twig is stored as a tuple of path items, leaf first, alternating
:class:`TokenItem` and :class:`RelationItem`. Its height is the number of
items. Attributes the building profile does not track are erased, so twigs
from different sentences compare equal when they agree on what matters.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Any, Union

from grammar_miner.commonality.profiles import FeatureProfile
from grammar_miner.graph.models import DependencyGraph, Relation, StructureError, Token
from grammar_miner.hierarchy.tags import Tag, ancestor_of, ancestors, weight

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenItem:
    lemma: str | None = None
    pos: Tag | None = None
    supertag: str | None = None
    spacer: bool = False

    def describe(self, terse: bool = True) -> str:
        if terse:
            if self.spacer:
                return "<null>"
            parts = [p for p in (self.lemma, self.pos.label if self.pos else None, self.supertag) if p]
            return "<" + "|".join(parts) + ">"

        if self.spacer:
            return "the head of the sentence"
        details = []
        if self.lemma:
            details.append(f"with the lemma '{self.lemma}'")
        if self.pos:
            details.append(f"tagged as {_article(self.pos.description)} {self.pos.description}")
        if self.supertag:
            details.append(f"with the supertag '{self.supertag}'")
        if not details:
            return "a token"
        return "a token " + ", ".join(details)

    def key(self) -> tuple:
        return (0, self.spacer, self.lemma or "", self.pos.label if self.pos else "", self.supertag or "")


@dataclass(frozen=True)
class RelationItem:
    type: Tag | None = None
    via_subtype: bool = False
    spacer: bool = False

    def describe(self, terse: bool = True) -> str:
        if terse:
            label = self.type.label if self.type else "null"
            return ("s" if self.via_subtype else "") + f"({label})"
        if self.spacer:
            return "which is the head of the sentence"
        if self.type is None:
            return "which is grammatically linked to"
        return f"which is {_article(self.type.description)} {self.type.description} of"

    def key(self) -> tuple:
        return (1, self.spacer, self.via_subtype, self.type.label if self.type else "")


PathItem = Union[TokenItem, RelationItem]


def _article(text: str) -> str:
    return "an" if text[:1].lower() in "aeiou" else "a"


def _tag_subsumes(general: Tag | None, specific: Tag | None) -> bool:
    if general is None or specific is None:
        return general is None and specific is None
    return ancestor_of(general, specific)


def _item_subsumes(general: PathItem, specific: PathItem) -> bool:
    if type(general) is not type(specific) or general.spacer != specific.spacer:
        return False
    if isinstance(general, RelationItem):
        return general.via_subtype == specific.via_subtype and _tag_subsumes(general.type, specific.type)
    return (
        general.lemma == specific.lemma
        and general.supertag == specific.supertag
        and _tag_subsumes(general.pos, specific.pos)
    )


@dataclass(frozen=True)
class Twig:
    """A path of path items, leaf first. Equality ignores the building profile."""

    items: tuple[PathItem, ...]
    profile: FeatureProfile | None = field(default=None, compare=False)
    degraded_leaf: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("A twig needs at least one item")
        for position, item in enumerate(self.items):
            expected = TokenItem if position % 2 == 0 else RelationItem
            if not isinstance(item, expected):
                raise StructureError(f"Twig item {position} should be a {expected.__name__}")

    @property
    def height(self) -> int:
        return len(self.items)

    @property
    def leaf(self) -> TokenItem:
        return self.items[0]

    @property
    def token_items(self) -> tuple[TokenItem, ...]:
        return self.items[0::2]

    @property
    def relation_items(self) -> tuple[RelationItem, ...]:
        return self.items[1::2]

    @cached_property
    def weight(self) -> float:
        """Product of the genericness weights of every tag on the path."""
        product = 1.0
        for item in self.items:
            product *= weight(item.pos if isinstance(item, TokenItem) else item.type)
        return product

    @cached_property
    def sort_key(self) -> tuple:
        return (str(self), tuple(item.key() for item in self.items))

    def subsumes(self, other: Twig | None) -> bool:
        """True when every item of ``other`` specialises the matching item here."""
        if other is None or len(self.items) != len(other.items):
            return False
        return all(_item_subsumes(a, b) for a, b in zip(self.items, other.items))

    def describe(self, terse: bool = True) -> str:
        show_tokens = self.profile is None or self.profile.tracks_tokens
        show_relations = self.profile is None or self.profile.tracks_relations
        if terse:
            shown = [
                item.describe(True)
                for item in self.items
                if (show_tokens if isinstance(item, TokenItem) else show_relations)
            ]
            return "".join(shown)

        words = [self.leaf.describe(False) if show_tokens else "a token"]
        for position in range(1, len(self.items)):
            item = self.items[position]
            if isinstance(item, RelationItem):
                if item.spacer:
                    words.append(item.describe(False))
                    break
                words.append(item.describe(False) if show_relations else "which is grammatically linked to")
                if position == len(self.items) - 1:
                    words.append("another token")
            else:
                words.append(item.describe(False) if show_tokens else "a token")
        return " ".join(words)

    def __str__(self) -> str:
        return self.describe(True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pattern": str(self),
            "description": self.describe(False),
            "height": self.height,
            "weight": self.weight,
            "profile": self.profile.name if self.profile else None,
        }

    @classmethod
    def from_graph(cls, graph: DependencyGraph, profile: FeatureProfile | None = None) -> Twig:
        """Read a path-shaped graph as a twig.

        The leaf is the one token that heads no relation. Several leaves is
        an error. When there is none (the path loops), the first token is used
        and the twig is marked ``degraded_leaf``.
        """
        if not graph.tokens:
            raise StructureError("Cannot read a twig from an empty graph")
        leaves = [t for t in graph.tokens if not graph.head_of(t.index)]
        if len(leaves) > 1:
            raise StructureError(f"{graph!r} has {len(leaves)} leaf tokens")
        degraded = not leaves
        if degraded:
            leaf = graph.tokens[0]
            logger.warning("No leaf token in %r; falling back to token %s", graph, leaf)
        else:
            leaf = leaves[0]

        height = len(graph.tokens) + len(graph.relations)
        chain = graph.ancestor_chain(leaf.index, height)
        items: list[PathItem] = []
        below: Token = leaf
        for element in chain:
            if isinstance(element, Token):
                items.append(_token_item(element, profile))
                below = element
            else:
                items.append(_relation_item(element, profile, element.subtype_token == below.index))
        return cls(tuple(items), profile, degraded)


def _token_item(token: Token, profile: FeatureProfile | None) -> TokenItem:
    if profile is None:
        return TokenItem(token.lemma, token.pos, token.supertag)
    return TokenItem(
        lemma=token.lemma if profile.lemmas else None,
        pos=token.pos if profile.pos else None,
        supertag=token.supertag if profile.supertags else None,
    )


def _relation_item(rel: Relation, profile: FeatureProfile | None, via_subtype: bool) -> RelationItem:
    tracked = profile is None or profile.relation_types
    return RelationItem(type=rel.type if tracked else None, via_subtype=via_subtype)


Chain = tuple[PathItem, ...]


def _chains_from_token(
    graph: DependencyGraph, index: int, profile: FeatureProfile, remaining: int, requested: int
) -> list[Chain]:
    item = _token_item(graph.token(index), profile)
    if remaining == 0:
        return [(item,)]

    chains: list[Chain] = []
    for rel in graph.dependent_of(index):
        chains.extend(_chains_via(graph, item, rel, profile, remaining, requested, via_subtype=False))
    for rel in graph.subtype_of(index):
        chains.extend(_chains_via(graph, item, rel, profile, remaining, requested, via_subtype=True))

    if not graph.parent_relations(index):
        # Top of the tree but more height requested: pad with spacers so
        # that shallow sentences stay comparable with deeper ones.
        if (
            remaining == 1
            and profile.tracks_relations
            and graph.head_of(index)
            and (profile.tracks_tokens or requested > 2)
        ):
            chains.append((item, RelationItem(spacer=True)))
        elif (
            remaining == 2
            and profile.tracks_tokens
            and not profile.tracks_relations
            and graph.relations_of(index)
        ):
            chains.append((item, RelationItem(spacer=True), TokenItem(spacer=True)))
    return chains


def _chains_via(
    graph: DependencyGraph,
    child: TokenItem,
    rel: Relation,
    profile: FeatureProfile,
    remaining: int,
    requested: int,
    via_subtype: bool,
) -> list[Chain]:
    rel_item = _relation_item(rel, profile, via_subtype)
    if remaining == 1:
        return [(child, rel_item)]
    if rel.head is None:
        return []
    if remaining == 2:
        return [(child, rel_item, _token_item(graph.token(rel.head), profile))]
    return [
        (child, rel_item) + upper
        for upper in _chains_from_token(graph, rel.head, profile, remaining - 2, requested)
    ]


def _generalisations(chain: Chain, profile: FeatureProfile) -> list[Chain]:
    """Every combination of replacing each tag on the chain by one of its ancestors."""
    options: list[Sequence[PathItem]] = []
    for item in chain:
        if isinstance(item, RelationItem) and item.type is not None and profile.relation_types:
            options.append([replace(item, type=t) for t in _ordered_ancestors(item.type)])
        elif isinstance(item, TokenItem) and item.pos is not None and profile.pos:
            options.append([replace(item, pos=t) for t in _ordered_ancestors(item.pos)])
        else:
            options.append([item])
    return [tuple(combo) for combo in itertools.product(*options)]


def _ordered_ancestors(tag: Tag) -> list[Tag]:
    return sorted(ancestors(tag), key=lambda t: (t != tag, t.label))


def partial_structures(
    graph: DependencyGraph,
    index: int,
    profile: FeatureProfile,
    height: int,
    generalise: bool = True,
) -> list[Twig]:
    """All twigs of exactly ``height`` whose leaf is the token at ``index``.

    With ``generalise`` and a recursive profile, each tracked tag is also
    replaced by each of its ancestors, across all combinations. An empty
    result means the sentence cannot supply that height from this token.
    """
    if height < 1:
        raise ValueError(f"Height must be at least 1, got {height}")
    chains = _chains_from_token(graph, index, profile, height - 1, height)
    if generalise and profile.recurse_hierarchy:
        chains = [variant for chain in chains for variant in _generalisations(chain, profile)]
    return [Twig(chain, profile) for chain in dict.fromkeys(chains)]
