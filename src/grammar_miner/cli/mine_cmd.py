"""CLI handler for the mine subcommand."""

from __future__ import annotations

import logging
from pathlib import Path

import orjson

from grammar_miner.commonality.commonality import Commonality
from grammar_miner.config.loader import load_config
from grammar_miner.config.schema import AnalysisConfig
from grammar_miner.graph.json_reader import read_graphs
from grammar_miner.graph.models import DependencyGraph
from grammar_miner.semantics.verb_frames import StaticVerbFrameLexicon
from grammar_miner.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _load(path: Path | None, what: str, required: bool) -> list[DependencyGraph]:
    if path is None:
        if required:
            raise ValueError(f"inputs.{what} must be set in the config")
        return []
    graphs = list(read_graphs(path))
    logger.info("Loaded %d %s from %s", len(graphs), what.replace("_", " "), path)
    return graphs


def build_commonality(cfg: AnalysisConfig) -> Commonality:
    examples = _load(cfg.inputs.examples, "examples", required=True)
    counter_examples = _load(cfg.inputs.counter_examples, "counter_examples", required=False)
    return Commonality(
        examples,
        counter_examples,
        profiles=cfg.feature_profiles(),
        lexicon=StaticVerbFrameLexicon(cfg.verb_frames),
        config=cfg.scoring,
    )


def run_mine(config_path: str, output_override: str | None) -> None:
    cfg = load_config(config_path)
    setup_logging(cfg.log_level, cfg.debug_modules)

    out_dir = Path(output_override) if output_override else cfg.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)

    commonality = build_commonality(cfg)

    out_path = out_dir / "commonality.json"
    out_path.write_bytes(orjson.dumps(commonality.to_dict(), option=orjson.OPT_INDENT_2))
    logger.info("Mined patterns written to %s", out_path)
