"""CLI handler for the rank subcommand."""

from __future__ import annotations

import logging
from pathlib import Path

import orjson

from grammar_miner.config.loader import load_config
from grammar_miner.graph.json_reader import read_graphs
from grammar_miner.utils.logging_setup import setup_logging

from .mine_cmd import build_commonality

logger = logging.getLogger(__name__)


def run_rank(config_path: str, output_override: str | None) -> None:
    cfg = load_config(config_path)
    setup_logging(cfg.log_level, cfg.debug_modules)

    if cfg.inputs.corpus is None:
        raise ValueError("inputs.corpus must be set in the config")

    out_dir = Path(output_override) if output_override else cfg.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)

    commonality = build_commonality(cfg)
    good, wrong = commonality.find_corpus_matches_as_text(read_graphs(cfg.inputs.corpus))

    for name, ranked in (("good_matches.jsonl", good), ("wrong_answers.jsonl", wrong)):
        path = out_dir / name
        with path.open("wb") as fh:
            for sentence in ranked:
                fh.write(orjson.dumps(sentence.to_dict()) + b"\n")
        logger.info("Wrote %d sentences to %s", len(ranked), path)
