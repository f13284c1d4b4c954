"""Read parser output stored as JSON arrays or NDJSON, one graph per object.

Each object carries ``tokens`` and ``relations`` lists in the shape produced
by :meth:`Token.to_dict` and :meth:`Relation.to_dict`. Unknown tag labels
become absent tags.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import orjson

from grammar_miner.graph.builder import GraphBuilder
from grammar_miner.graph.models import DependencyGraph, Relation, Token

logger = logging.getLogger(__name__)

NDJSON_SUFFIXES = frozenset({".jsonl", ".ndjson"})


def graph_from_dict(obj: dict[str, Any]) -> DependencyGraph:
    builder = GraphBuilder()
    for tok in obj.get("tokens", []):
        builder.add_token_record(Token.from_dict(tok))
    for rel in obj.get("relations", []):
        builder.add_relation_record(Relation.from_dict(rel))
    return builder.build()


def graph_to_dict(graph: DependencyGraph) -> dict[str, Any]:
    return {
        "sentence": graph.sentence,
        "tokens": [t.to_dict() for t in graph.tokens],
        "relations": [r.to_dict() for r in graph.relations],
    }


def read_graphs(path: Path | str) -> Iterator[DependencyGraph]:
    """Yield graphs from ``path``; NDJSON is chosen by file suffix."""
    path = Path(path)
    if path.suffix.lower() in NDJSON_SUFFIXES:
        yield from _read_ndjson(path)
    else:
        yield from _read_json_array(path)


def _read_ndjson(path: Path) -> Iterator[DependencyGraph]:
    with path.open("rb") as fh:
        for line_num, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = orjson.loads(line)
            except orjson.JSONDecodeError:
                logger.warning("Skipping invalid JSON at %s:%d", path.name, line_num)
                continue
            graph = _to_graph(obj, path, line_num)
            if graph is not None:
                yield graph


def _read_json_array(path: Path) -> Iterator[DependencyGraph]:
    data = orjson.loads(path.read_bytes())
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        items = data.get("graphs") if isinstance(data.get("graphs"), list) else [data]
    else:
        return

    for idx, obj in enumerate(items, start=1):
        graph = _to_graph(obj, path, idx)
        if graph is not None:
            yield graph


def _to_graph(obj: Any, path: Path, position: int) -> DependencyGraph | None:
    if not isinstance(obj, dict):
        logger.warning("Skipping non-object entry at %s:%d", path.name, position)
        return None
    try:
        return graph_from_dict(obj)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Skipping malformed graph at %s:%d: %s", path.name, position, exc)
        return None


def write_graphs(graphs: Iterable[DependencyGraph], path: Path | str) -> int:
    """Write graphs as NDJSON; returns the number written."""
    path = Path(path)
    count = 0
    with path.open("wb") as fh:
        for graph in graphs:
            fh.write(orjson.dumps(graph_to_dict(graph)) + b"\n")
            count += 1
    return count
