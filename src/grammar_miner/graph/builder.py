"""Incremental construction of dependency graphs.

Tokens and relations are added in any order; :meth:`GraphBuilder.build`
validates them and hands back an immutable :class:`DependencyGraph`. The
builder refuses further changes once it has built.
"""

from __future__ import annotations

import logging

from grammar_miner.graph.models import (
    DependencyGraph,
    FlagSubtype,
    GraphFrozenError,
    NamedEntityClass,
    Relation,
    Subtype,
    Token,
    TokenSubtype,
)
from grammar_miner.hierarchy.pos import pos_tag
from grammar_miner.hierarchy.relations import relation_type
from grammar_miner.hierarchy.tags import Tag

logger = logging.getLogger(__name__)


def _resolve(tag: str | Tag | None, lookup, kind: str) -> Tag | None:
    if tag is None or isinstance(tag, Tag):
        return tag
    resolved = lookup(tag)
    if resolved is None:
        logger.debug("Unknown %s label %r treated as absent", kind, tag)
    return resolved


class GraphBuilder:
    """Collects tokens and relations for one sentence."""

    def __init__(self) -> None:
        self._tokens: dict[int, Token] = {}
        self._relations: list[Relation] = []
        self._graph: DependencyGraph | None = None

    def _check_open(self) -> None:
        if self._graph is not None:
            raise GraphFrozenError("Graph already built; create a new builder to change it")

    def add_token(
        self,
        index: int,
        word: str | None = None,
        lemma: str | None = None,
        pos: str | Tag | None = None,
        *,
        suffix: str | None = None,
        supertag: str | None = None,
        named_entity: NamedEntityClass | str | None = None,
        verb_frame: str | None = None,
    ) -> Token:
        self._check_open()
        if index in self._tokens:
            raise ValueError(f"Duplicate token index {index}")
        if isinstance(named_entity, str):
            named_entity = NamedEntityClass(named_entity)
        token = Token(
            index=index,
            word=word,
            lemma=lemma,
            suffix=suffix,
            pos=_resolve(pos, pos_tag, "POS"),
            supertag=supertag,
            named_entity=named_entity,
            verb_frame=verb_frame,
        )
        self._tokens[index] = token
        return token

    def add_token_record(self, token: Token) -> Token:
        self._check_open()
        if token.index in self._tokens:
            raise ValueError(f"Duplicate token index {token.index}")
        self._tokens[token.index] = token
        return token

    def add_relation(
        self,
        type: str | Tag | None,
        head: int | None,
        dependent: int | None = None,
        *,
        subtype_token: int | None = None,
        flag: str | None = None,
        initial_label: str | None = None,
    ) -> Relation:
        self._check_open()
        if subtype_token is not None and flag is not None:
            raise ValueError("A relation has either a token subtype or a flag, not both")
        subtype: Subtype | None = None
        if subtype_token is not None:
            subtype = TokenSubtype(subtype_token)
        elif flag is not None:
            subtype = FlagSubtype(flag)
        rel = Relation(
            type=_resolve(type, relation_type, "relation"),
            head=head,
            dependent=dependent,
            subtype=subtype,
            initial_label=initial_label if initial_label is not None else (type if isinstance(type, str) else None),
        )
        self._relations.append(rel)
        return rel

    def add_relation_record(self, relation: Relation) -> Relation:
        self._check_open()
        self._relations.append(relation)
        return relation

    def build(self) -> DependencyGraph:
        """Validate and freeze. Repeated calls return the same graph."""
        if self._graph is None:
            self._graph = DependencyGraph(self._tokens.values(), self._relations)
        return self._graph

    finalize = build
