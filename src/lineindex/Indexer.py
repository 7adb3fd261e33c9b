#!/usr/bin/env python3
"""
Indexer.py — command line front end

- Input: one positional PATH (UTF-8 text file)
- Loads and validates the file via text_detection (binary / size / UTF-8 checks)
- Builds an owned LineIndex over the bytes
- Answers --line / --byte / --char queries, optionally a Tree-sitter --outline
- Prints a concise JSON summary to stdout
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from lineindex.LineIndex import LineIndex
from lineindex.text_detection import DEFAULT_BINARY_RATIO, BinaryDetector, TextLoadError, load_text

logger = logging.getLogger("lineindex")

DEFAULT_MAX_BYTES = 16 * 1024 * 1024


@dataclass(frozen=True)
class IndexerConfig:
    log_level: str = "INFO"
    max_bytes: int = DEFAULT_MAX_BYTES
    binary_ratio: float = DEFAULT_BINARY_RATIO


def _env_value(name: str) -> str:
    return (os.environ.get(name) or "").strip()


def _resolve_config() -> IndexerConfig:
    """Build the CLI configuration from LINEINDEX_* environment variables.

    Raises:
        RuntimeError: when a numeric variable cannot be parsed or is out of range.
    """
    log_level = _env_value("LINEINDEX_LOG_LEVEL").upper() or IndexerConfig.log_level

    raw_max = _env_value("LINEINDEX_MAX_BYTES")
    try:
        max_bytes = int(raw_max) if raw_max else DEFAULT_MAX_BYTES
    except ValueError as e:
        raise RuntimeError(f"LINEINDEX_MAX_BYTES must be an integer, got {raw_max!r}") from e
    if max_bytes < 0:
        raise RuntimeError(f"LINEINDEX_MAX_BYTES must be >= 0, got {max_bytes}")

    raw_ratio = _env_value("LINEINDEX_BINARY_RATIO")
    try:
        binary_ratio = float(raw_ratio) if raw_ratio else DEFAULT_BINARY_RATIO
    except ValueError as e:
        raise RuntimeError(f"LINEINDEX_BINARY_RATIO must be a number, got {raw_ratio!r}") from e
    if not 0.0 <= binary_ratio <= 1.0:
        raise RuntimeError(f"LINEINDEX_BINARY_RATIO must be within [0, 1], got {binary_ratio}")

    return IndexerConfig(log_level=log_level, max_bytes=max_bytes, binary_ratio=binary_ratio)


def _describe_line(index: LineIndex, line: int) -> Dict[str, Any]:
    text = index.line_text(line)
    byte_span = index.byte_span_for_line(line)
    char_span = index.char_span_for_line(line)
    return {
        "line": line,
        "found": text is not None,
        "bytes": list(byte_span) if byte_span is not None else None,
        "chars": list(char_span) if char_span is not None else None,
        "text": text,
    }


def _describe_offset(index: LineIndex, offset: int, unit: str) -> Dict[str, Any]:
    if unit == "byte":
        point = index.byte_to_point(offset)
    else:
        point = index.char_to_point(offset)
    return {
        unit: offset,
        "line": point[0] if point is not None else None,
        "column": point[1] if point is not None else None,
    }


def _run_queries(
    index: LineIndex,
    lines: Sequence[int],
    bytes_: Sequence[int],
    chars: Sequence[int],
) -> Dict[str, List[Dict[str, Any]]]:
    """Answer every requested query; misses are reported with null fields."""
    return {
        "lines": [_describe_line(index, n) for n in lines],
        "bytes": [_describe_offset(index, b, "byte") for b in bytes_],
        "chars": [_describe_offset(index, c, "char") for c in chars],
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lineindex", description="Index a text file by line, byte and character.")
    parser.add_argument("path", help="UTF-8 text file to index")
    parser.add_argument("--line", type=int, action="append", default=[], help="Report the spans and text of a line (repeatable)")
    parser.add_argument("--byte", type=int, action="append", default=[], help="Report the line/column of a byte offset (repeatable)")
    parser.add_argument("--char", type=int, action="append", default=[], help="Report the line/column of a character offset (repeatable)")
    parser.add_argument("--outline", metavar="LANG", help="List top-level syntax nodes using a Tree-sitter grammar")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint.

    - Resolves config from the environment
    - Loads PATH, builds the index
    - Runs queries and optional outline
    - Prints JSON summary; returns a process exit status
    """
    args = _build_parser().parse_args(argv)
    cfg = _resolve_config()

    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")

    detector = BinaryDetector(cfg.binary_ratio)
    try:
        data = load_text(args.path, detector=detector, max_bytes=cfg.max_bytes)
    except TextLoadError as e:
        logger.error("Cannot index %s", e)
        return 1

    index = LineIndex.from_bytes(data)
    logger.info("Indexed %s: %d lines", args.path, index.line_count())

    summary: Dict[str, Any] = {
        "path": args.path,
        "bytes": index.byte_length(),
        "chars": index.char_length(),
        "lines": index.line_count(),
        "queries": _run_queries(index, args.line, args.byte, args.char),
    }

    if args.outline:
        from lineindex.outline import outline

        try:
            entries = outline(index, args.outline)
        except ValueError as e:
            logger.error("Outline failed: %s", e)
            return 1
        summary["outline"] = [entry.as_dict() for entry in entries]

    print(json.dumps(summary, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
