"""Logging configuration for command-line runs."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO", debug_modules: list[str] | None = None) -> None:
    """Configure the root logger; ``debug_modules`` get DEBUG regardless of ``level``."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    for name in debug_modules or []:
        logging.getLogger(name).setLevel(logging.DEBUG)
