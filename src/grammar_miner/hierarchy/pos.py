"""Part-of-speech hierarchy: generic classes over the C&C Penn Treebank tagset."""

from __future__ import annotations

from grammar_miner.hierarchy.tags import Tag, TagEntry, TagHierarchy, register

POS_KIND = "pos"

# Weights reflect how much information survives generalising to the class.
_GENERIC: list[TagEntry] = [
    ("argument", 0.3, (), "argument"),
    ("noun", 0.5, ("argument",), "noun"),
    ("common_noun", 0.5, ("noun",), "common noun"),
    ("proper_noun", 0.5, ("noun",), "proper noun"),
    ("singular_noun", 0.5, ("noun",), "singular noun"),
    ("plural_noun", 0.5, ("noun",), "plural noun"),
    ("comparative", 0.5, (), "comparative"),
    ("conjunction", 0.5, (), "conjunction"),
    ("possessive", 0.5, (), "possessive"),
    ("superlative", 0.5, (), "superlative"),
    ("adjective", 0.7, (), "adjective"),
    ("adverb", 0.7, (), "adverb"),
    ("determiner", 0.7, (), "determiner"),
    ("numeric", 0.7, (), "numeric"),
    ("preposition", 0.7, (), "preposition"),
    ("pronoun", 0.7, ("argument",), "pronoun"),
    ("punctuation", 0.7, (), "punctuation"),
    ("symbol", 0.7, (), "symbol"),
    ("verb", 0.5, (), "verb"),
    # present forms are close to each other, past participle and simple past are not
    ("present_verb", 0.8, ("verb",), "present tense verb"),
    ("past_verb", 0.6, ("verb",), "past tense verb"),
]

_PTB: list[TagEntry] = [
    ("JJ", 1.0, ("adjective",), "adjective"),
    ("JJR", 1.0, ("adjective", "comparative"), "comparative adjective"),
    ("JJS", 1.0, ("adjective", "superlative"), "superlative adjective"),
    ("WRB", 1.0, ("adverb",), "wh-adverb"),
    ("RB", 1.0, ("adverb",), "adverb"),
    ("RBR", 1.0, ("adverb", "comparative"), "comparative adverb"),
    ("RBS", 1.0, ("adverb", "superlative"), "superlative adverb"),
    ("CC", 1.0, ("conjunction",), "coordinating conjunction"),
    ("IN", 1.0, ("conjunction", "preposition"), "preposition, or subordinating conjunction"),
    ("DT", 1.0, ("determiner",), "determiner"),
    ("PDT", 1.0, ("determiner",), "predeterminer"),
    ("WDT", 1.0, ("determiner",), "wh-determiner"),
    ("NN", 1.0, ("singular_noun", "common_noun"), "singular or mass noun"),
    ("NNP", 1.0, ("singular_noun", "proper_noun"), "singular proper noun"),
    ("NNPS", 1.0, ("plural_noun", "proper_noun"), "plural proper noun"),
    ("NNS", 1.0, ("plural_noun", "common_noun"), "plural common noun"),
    ("CD", 1.0, ("numeric",), "cardinal number"),
    ("POS", 1.0, ("possessive",), "possessive ending"),
    # C&C tags unresolved instances of 'as' with their own label
    ("AS", 1.0, ("IN", "RB"), "'as'"),
    ("PRP", 1.0, ("pronoun",), "personal pronoun"),
    ("PRP$", 1.0, ("pronoun", "possessive"), "possessive pronoun"),
    ("WP", 1.0, ("pronoun",), "wh-pronoun"),
    ("WP$", 1.0, ("pronoun", "possessive"), "possessive wh-pronoun"),
    ("EX", 1.0, ("pronoun",), "existential 'there'"),
    ("LCB", 1.0, ("punctuation",), "left curved bracket"),
    ("LRB", 1.0, ("punctuation",), "left round bracket"),
    ("LS", 1.0, ("punctuation", "numeric"), "list item marker"),
    ("RRB", 1.0, ("punctuation",), "right bracket"),
    (",", 1.0, ("punctuation",), "comma"),
    (";", 1.0, ("punctuation",), "semi-colon"),
    (":", 1.0, ("punctuation",), "assorted non-sentence-terminal punctuation"),
    (".", 1.0, ("punctuation",), "sentence-terminal punctuation"),
    ("LQU", 1.0, ("punctuation",), "left quote"),
    ("RQU", 1.0, ("punctuation",), "right quote"),
    ("FW", 1.0, (), "foreign word"),
    ("RP", 1.0, (), "particle"),
    ("TO", 1.0, (), "'to'"),
    ("UH", 1.0, (), "interjection"),
    ("SYM", 1.0, ("symbol",), "symbol"),
    ("$", 1.0, ("symbol",), "currency"),
    ("#", 1.0, ("symbol",), "'#' symbol"),
    ("MD", 1.0, ("verb",), "modal verb"),
    ("VB", 1.0, ("verb",), "base form verb"),
    ("VBD", 1.0, ("past_verb",), "past tense verb"),
    ("VBG", 1.0, ("verb",), "gerund verb"),
    ("VBN", 1.0, ("past_verb",), "past participle verb"),
    ("VBZ", 1.0, ("present_verb",), "3rd person singular present verb"),
    ("VBP", 1.0, ("present_verb",), "non-3rd person singular present verb"),
]

POS_TAGS = register(TagHierarchy(POS_KIND, _GENERIC + _PTB))

VERB = POS_TAGS["verb"]


def pos_tag(label: str | None) -> Tag | None:
    return POS_TAGS.get(label)


def is_verb(tag: Tag | None) -> bool:
    """True for any tag that generalises to ``verb``."""
    if tag is None:
        return False
    return POS_TAGS.ancestor_of(VERB, tag)
