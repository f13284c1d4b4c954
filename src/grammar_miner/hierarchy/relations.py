"""Grammatical-relation types (RASP / C&C scheme) arranged as a hierarchy."""

from __future__ import annotations

from grammar_miner.hierarchy.tags import Tag, TagEntry, TagHierarchy, register

RELATION_KIND = "relation"

_RELATIONS: list[TagEntry] = [
    ("ta", 1.0, (), "text adjunct (e.g. punctuation)"),
    ("arg_mod", 0.5, (), "argument or modifier"),
    ("det", 1.0, (), "determiner"),
    ("aux", 1.0, (), "auxiliary"),
    ("conj", 1.0, (), "conjunction"),
    ("mod", 0.8, ("arg_mod",), "modifier"),
    ("arg", 0.6, ("arg_mod",), "argument"),
    ("ncmod", 1.0, ("mod",), "non-clausal modifier"),
    ("xmod", 1.0, ("mod",), "unsaturated predicative modifier"),
    ("cmod", 1.0, ("mod",), "clausal modifier"),
    ("pmod", 1.0, ("mod",), "prepositional phrase modifier"),
    ("subj_dobj", 0.8, ("arg",), "subject or direct object"),
    ("subj", 0.8, ("arg", "subj_dobj"), "subject"),
    ("comp", 0.7, ("arg",), "complement"),
    ("ncsubj", 1.0, ("subj",), "non-clausal subject"),
    ("xsubj", 1.0, ("subj",), "unsaturated predicative subject"),
    ("csubj", 1.0, ("subj",), "clausal subject"),
    ("obj", 0.8, ("comp",), "object"),
    ("pcomp", 1.0, ("comp",), "prepositional phrase complement"),
    ("clausal", 0.8, ("comp",), "clausal or verb phrase complement"),
    ("dobj", 1.0, ("obj", "subj_dobj"), "direct object"),
    ("obj2", 1.0, ("obj",), "second object"),
    ("iobj", 1.0, ("obj",), "indirect object"),
    ("xcomp", 1.0, ("clausal",), "unsaturated verb phrase complement"),
    ("ccomp", 1.0, ("clausal",), "clausal complement"),
    # never emitted by C&C
    ("passive", 1.0, (), "passive"),
]

RELATION_TYPES = register(TagHierarchy(RELATION_KIND, _RELATIONS))


def relation_type(label: str | None) -> Tag | None:
    return RELATION_TYPES.get(label)
