"""Verb-frame lookup used as semantic evidence when mining and scoring.

Only the protocol matters to the analysis; :class:`StaticVerbFrameLexicon`
serves frames configured per lemma, and a token's own ``verb_frame``
annotation is honoured when the parser supplied one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

from grammar_miner.graph.models import Token

logger = logging.getLogger(__name__)


@runtime_checkable
class VerbFrameLexicon(Protocol):
    """Protocol for verb-frame sources."""

    def accepting_frames(self, token: Token) -> frozenset[str]:
        """Frames the verb token can occur in; empty when unknown."""
        ...


class NullVerbFrameLexicon:
    def accepting_frames(self, token: Token) -> frozenset[str]:
        return frozenset()


class StaticVerbFrameLexicon:
    """Frames looked up by lower-cased lemma, falling back to the surface word."""

    def __init__(self, frames_by_lemma: Mapping[str, Iterable[str]]) -> None:
        self._frames = {lemma.lower(): frozenset(frames) for lemma, frames in frames_by_lemma.items()}
        logger.debug("Verb-frame lexicon holds %d lemmas", len(self._frames))

    def __len__(self) -> int:
        return len(self._frames)

    def accepting_frames(self, token: Token) -> frozenset[str]:
        key = (token.lemma or token.word or "").lower()
        frames = self._frames.get(key, frozenset())
        if token.verb_frame:
            frames = frames | {token.verb_frame}
        return frames
