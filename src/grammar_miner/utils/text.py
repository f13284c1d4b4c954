"""Detokenisation of parser output and human-readable list formatting."""

from __future__ import annotations

from collections.abc import Sequence

# Applied in order to the space-padded, space-joined token string.
_CLITICS: list[tuple[str, str]] = [
    (" 's ", "'s "),
    (" 'd ", "'d "),
    (" n't", "n't"),
    (" 'm", "'m"),
    (" 'll ", "'ll "),
    (" 're", "'re"),
    (" 've", "'ve"),
    ("'t was", "'twas"),
    ("'T was", "'Twas"),
]

_BRACKETS_AND_PUNCTUATION: list[tuple[str, str]] = [
    (" -LRB- ", " ("),
    (" -RRB- ", ") "),
    (" -LSB- ", " ["),
    (" -RSB- ", "] "),
    (" -LCB- ", " {"),
    (" -RCB- ", "} "),
    (" .", "."),
    (" !", "!"),
    (" ?", "?"),
    (" ,", ","),
    (" :", ":"),
    (" ;", ";"),
    ("( ", "("),
    ("[ ", "["),
    ("{ ", "{"),
    (" )", ")"),
    (" ]", "]"),
    (" }", "}"),
    (" / ", "/"),
    (" %", "%"),
    ("$ ", "$"),
    ("£ ", "£"),
]


def _attach_quotes(text: str, mark: str) -> str:
    """Alternate free-standing quote marks between opening and closing."""
    free = f" {mark} "
    opening = True
    idx = text.find(free)
    while idx >= 0:
        glued = f" {mark}" if opening else f"{mark} "
        text = text[:idx] + glued + text[idx + len(free):]
        opening = not opening
        idx = text.find(free)
    return text


def detokenise(text: str) -> str:
    """Turn a space-separated token string back into ordinary running text.

    >>> detokenise("The cat did n't chase the mouse .")
    "The cat didn't chase the mouse."
    """
    text = f" {text} "
    for source, target in _CLITICS:
        text = text.replace(source, target)
    for source, target in _BRACKETS_AND_PUNCTUATION:
        text = text.replace(source, target)

    text = _attach_quotes(text, '"')
    if text.count(" ' ") == 1:
        # a lone mark is more likely a plural possessive than a quote
        text = text.replace(" ' ", "' ")
    else:
        text = _attach_quotes(text, "'")

    text = text.replace(" -- ", " ‒ ").replace("--", "–")
    return text.strip()


def format_for_printing(items: Sequence[object], limit: int | None = None) -> str:
    """Join items as ``a, b and c``; beyond ``limit`` items, summarise the rest.

    >>> format_for_printing(["lemmas", "POS", "GR types"])
    'lemmas, POS and GR types'
    >>> format_for_printing(["a", "b", "c", "d"], limit=2)
    'a, b... (2 more)'
    """
    total = len(items)
    if limit is None or limit >= total:
        shown = [str(i) for i in items]
        if len(shown) < 2:
            return "".join(shown)
        return ", ".join(shown[:-1]) + " and " + shown[-1]

    shown = [str(i) for i in items[:limit]]
    return ", ".join(shown) + f"... ({total - limit} more)"
