"""Tokens, grammatical relations and immutable dependency graphs.

Graphs are index-based: relations refer to tokens by their position index,
never by object identity. Build them with
:class:`grammar_miner.graph.builder.GraphBuilder`.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from functools import cached_property
from typing import Any, Union

from grammar_miner.hierarchy.pos import is_verb, pos_tag
from grammar_miner.hierarchy.relations import relation_type
from grammar_miner.hierarchy.tags import Tag
from grammar_miner.utils.text import detokenise


class StructureError(ValueError):
    """A graph violates the forest shape an operation relies on."""


class GraphFrozenError(RuntimeError):
    """Raised when a finalised graph is modified through its builder."""


class NamedEntityClass(str, Enum):
    ORGANISATION = "ORG"
    PERSON = "PER"
    LOCATION = "LOC"
    TIME = "TIM"
    DATE = "DAT"
    MONEY = "MON"
    NONE = "O"


@dataclass(frozen=True)
class Token:
    """A word of a parsed sentence. Only ``index`` is mandatory."""

    index: int
    word: str | None = None
    lemma: str | None = None
    suffix: str | None = None
    pos: Tag | None = None
    supertag: str | None = None
    named_entity: NamedEntityClass | None = None
    verb_frame: str | None = None

    @property
    def is_verb(self) -> bool:
        return is_verb(self.pos)

    def __str__(self) -> str:
        return f"{self.word or self.lemma or ''}:{self.index}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "word": self.word,
            "lemma": self.lemma,
            "suffix": self.suffix,
            "pos": self.pos.label if self.pos else None,
            "supertag": self.supertag,
            "named_entity": self.named_entity.value if self.named_entity else None,
            "verb_frame": self.verb_frame,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Token:
        ne = d.get("named_entity")
        return cls(
            index=int(d["index"]),
            word=d.get("word"),
            lemma=d.get("lemma"),
            suffix=d.get("suffix"),
            pos=pos_tag(d.get("pos")),
            supertag=d.get("supertag"),
            named_entity=NamedEntityClass(ne) if ne else None,
            verb_frame=d.get("verb_frame"),
        )


@dataclass(frozen=True)
class TokenSubtype:
    """The relation's dependent is itself a distinguished token."""

    token: int


@dataclass(frozen=True)
class FlagSubtype:
    flag: str


Subtype = Union[TokenSubtype, FlagSubtype]


def _index(value: Any) -> int | None:
    return None if value is None else int(value)


def _opt(value: str | None) -> tuple[bool, str]:
    # None sorts before any string, the empty one included
    return (value is not None, value or "")


@dataclass(frozen=True)
class Relation:
    """A typed, directed grammatical relation between two tokens."""

    type: Tag | None
    head: int | None
    dependent: int | None
    subtype: Subtype | None = None
    initial_label: str | None = None

    @property
    def subtype_token(self) -> int | None:
        if isinstance(self.subtype, TokenSubtype):
            return self.subtype.token
        return None

    def token_indices(self) -> tuple[int, ...]:
        found = (self.head, self.dependent, self.subtype_token)
        return tuple(i for i in found if i is not None)

    def __str__(self) -> str:
        label = self.type.label if self.type else "null"
        return f"({label} {self.head} {self.dependent})"

    def to_dict(self) -> dict[str, Any]:
        subtype: dict[str, Any] | None = None
        if isinstance(self.subtype, TokenSubtype):
            subtype = {"token": self.subtype.token}
        elif isinstance(self.subtype, FlagSubtype):
            subtype = {"flag": self.subtype.flag}
        return {
            "type": self.type.label if self.type else None,
            "head": self.head,
            "dependent": self.dependent,
            "subtype": subtype,
            "initial_label": self.initial_label,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Relation:
        raw = d.get("subtype")
        subtype: Subtype | None = None
        if isinstance(raw, dict):
            if raw.get("token") is not None:
                subtype = TokenSubtype(int(raw["token"]))
            elif raw.get("flag") is not None:
                subtype = FlagSubtype(str(raw["flag"]))
        return cls(
            type=relation_type(d.get("type")),
            head=_index(d.get("head")),
            dependent=_index(d.get("dependent")),
            subtype=subtype,
            initial_label=d.get("initial_label"),
        )


class DependencyGraph:
    """An immutable parsed sentence: tokens plus the relations between them."""

    def __init__(self, tokens: Iterable[Token], relations: Iterable[Relation]) -> None:
        ordered = sorted(tokens, key=lambda t: t.index)
        by_index: dict[int, Token] = {}
        for token in ordered:
            if token.index in by_index:
                raise ValueError(f"Duplicate token index {token.index}")
            by_index[token.index] = token
        rels = tuple(relations)
        for rel in rels:
            for idx in rel.token_indices():
                if idx not in by_index:
                    raise ValueError(f"Relation {rel} refers to unknown token {idx}")

        self._tokens = tuple(ordered)
        self._by_index = by_index
        self._relations = rels

        self._headed: dict[int, list[Relation]] = defaultdict(list)
        self._dependent: dict[int, list[Relation]] = defaultdict(list)
        self._subtype: dict[int, list[Relation]] = defaultdict(list)
        for rel in rels:
            if rel.head is not None:
                self._headed[rel.head].append(rel)
            if rel.dependent is not None:
                self._dependent[rel.dependent].append(rel)
            if rel.subtype_token is not None:
                self._subtype[rel.subtype_token].append(rel)

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    @property
    def relations(self) -> tuple[Relation, ...]:
        return self._relations

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyGraph):
            return NotImplemented
        return self._tokens == other._tokens and set(self._relations) == set(other._relations)

    def __hash__(self) -> int:
        return hash((self._tokens, frozenset(self._relations)))

    def __repr__(self) -> str:
        return f"DependencyGraph({self.sentence!r}, {len(self._relations)} relations)"

    def token(self, index: int) -> Token:
        return self._by_index[index]

    def head_of(self, index: int) -> tuple[Relation, ...]:
        """Relations headed by the token."""
        return tuple(self._headed.get(index, ()))

    def dependent_of(self, index: int) -> tuple[Relation, ...]:
        return tuple(self._dependent.get(index, ()))

    def subtype_of(self, index: int) -> tuple[Relation, ...]:
        return tuple(self._subtype.get(index, ()))

    def parent_relations(self, index: int) -> tuple[Relation, ...]:
        """Relations leading upward from the token, as dependent or subtype."""
        return self.dependent_of(index) + self.subtype_of(index)

    def relations_of(self, index: int) -> tuple[Relation, ...]:
        seen: dict[Relation, None] = {}
        for rel in self.head_of(index) + self.parent_relations(index):
            seen.setdefault(rel, None)
        return tuple(seen)

    def is_verb(self, index: int) -> bool:
        return self._by_index[index].is_verb

    @cached_property
    def sentence(self) -> str:
        return detokenise(" ".join(t.word for t in self._tokens if t.word))

    @cached_property
    def sort_key(self) -> tuple:
        """Total order consistent with equality: sentence text, then every token and relation field."""
        tokens = tuple(
            (
                t.index,
                _opt(t.word),
                _opt(t.lemma),
                _opt(t.suffix),
                _opt(t.pos.label if t.pos else None),
                _opt(t.supertag),
                _opt(t.named_entity.value if t.named_entity else None),
                _opt(t.verb_frame),
            )
            for t in self._tokens
        )
        skeleton = sorted(
            (
                -1 if r.head is None else r.head,
                -1 if r.dependent is None else r.dependent,
                -1 if r.subtype_token is None else r.subtype_token,
                _opt(r.type.label if r.type else None),
                _opt(r.subtype.flag if isinstance(r.subtype, FlagSubtype) else None),
                _opt(r.initial_label),
            )
            for r in self._relations
        )
        return (self.sentence, tokens, tuple(skeleton))

    def ancestor_chain(self, index: int, height: int) -> list[Token | Relation]:
        """Walk upward from a token, alternating tokens and relations.

        Returns exactly ``height`` items, leaf token first. Raises
        StructureError when a token has several parent relations or the
        graph is not deep enough.
        """
        if height < 1:
            raise ValueError(f"Height must be at least 1, got {height}")
        current = self.token(index)
        chain: list[Token | Relation] = [current]
        while len(chain) < height:
            parents = self.parent_relations(current.index)
            if len(parents) > 1:
                raise StructureError(f"Token {current} has {len(parents)} parent relations")
            if not parents:
                raise StructureError(f"Token {current} has no parent relation; height {height} too deep")
            rel = parents[0]
            chain.append(rel)
            if len(chain) == height:
                break
            if rel.head is None:
                raise StructureError(f"Relation {rel} has no head; height {height} too deep")
            current = self.token(rel.head)
            chain.append(current)
        return chain

    def path_graph(self, index: int, height: int) -> DependencyGraph:
        """The sub-graph made of one ancestor chain; links leaving it are cut."""
        chain = self.ancestor_chain(index, height)
        tokens = [item for item in chain if isinstance(item, Token)]
        kept = {t.index for t in tokens}
        relations = []
        for rel in (item for item in chain if isinstance(item, Relation)):
            subtype = rel.subtype
            if rel.subtype_token is not None and rel.subtype_token not in kept:
                subtype = None
            relations.append(
                replace(
                    rel,
                    head=rel.head if rel.head in kept else None,
                    dependent=rel.dependent if rel.dependent in kept else None,
                    subtype=subtype,
                )
            )
        return DependencyGraph(tokens, relations)
