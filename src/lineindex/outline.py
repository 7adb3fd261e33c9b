# Tree-sitter outline over an indexed text.
# - Parse the RAW UTF-8 BYTES of the index; Tree-sitter offsets are byte offsets.
# - Map every node through the LineIndex (byte -> line, byte -> char). Tree-sitter's
#   own row/column points are not used.
# - Only top-level named nodes are reported.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from lineindex.LineIndex import LineIndex

logger = logging.getLogger(__name__)

NAME_FIELDS = ("name", "declarator", "key")


@dataclass(frozen=True)
class OutlineEntry:
    kind: str
    name: str
    start_line: int
    end_line: int
    byte_span: tuple[int, int]
    char_span: tuple[int, int]

    def as_dict(self) -> dict:
        return {
            "kind": self.kind,
            "name": self.name,
            "lines": [self.start_line, self.end_line],
            "bytes": list(self.byte_span),
            "chars": list(self.char_span),
        }


def outline(index: LineIndex, language: str) -> List[OutlineEntry]:
    """
    Return one entry per top-level named node of `index`'s text parsed as `language`.

    Raises:
        ValueError: if no Tree-sitter grammar is available for `language`.
    """
    try:
        parser = get_parser(language)
    except Exception as e:
        raise ValueError(f"No Tree-sitter grammar for language {language!r}") from e

    data = index.source_bytes()
    if not data:
        return []

    tree = parser.parse(data)
    entries: List[OutlineEntry] = []
    for node in tree.root_node.named_children:
        entry = _locate(index, data, node)
        if entry is None:
            logger.debug("Skipping node %s with empty or unmapped range", node.type)
            continue
        entries.append(entry)
    logger.debug("Outline for %s: %d top-level nodes", language, len(entries))
    return entries


def _locate(index: LineIndex, data: bytes, node: Node) -> Optional[OutlineEntry]:
    """Map a node's half-open byte range onto inclusive line/byte/char coordinates."""
    start, stop = node.start_byte, node.end_byte
    if stop <= start:
        return None
    last = _last_char_start(data, start, stop)
    start_line = index.line_for_byte(start)
    end_line = index.line_for_byte(last)
    start_char = index.byte_to_char(start)
    end_char = index.byte_to_char(last)
    if None in (start_line, end_line, start_char, end_char):
        return None
    return OutlineEntry(
        kind=node.type,
        name=_node_name(data, node),
        start_line=start_line,
        end_line=end_line,
        byte_span=(start, last),
        char_span=(start_char, end_char),
    )


def _last_char_start(data: bytes, start: int, stop: int) -> int:
    """Byte offset of the first byte of the last code point in data[start:stop]."""
    i = stop - 1
    # Step back over UTF-8 continuation bytes (10xxxxxx)
    while i > start and (data[i] & 0xC0) == 0x80:
        i -= 1
    return i


def _node_name(data: bytes, node: Node) -> str:
    for field in NAME_FIELDS:
        child = node.child_by_field_name(field)
        if child is not None:
            return data[child.start_byte : child.end_byte].decode("utf-8", errors="replace")
    return ""


__all__ = ["OutlineEntry", "outline"]
