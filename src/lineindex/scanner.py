"""
One-pass line scanner.

Partitions a string into inclusive line spans carrying both UTF-8 byte and code point
coordinates. Newlines are located with `str.find`; the byte counter advances by the
encoded width of each segment so the two coordinate systems stay in step without a
second pass over the text.
"""
from __future__ import annotations

from typing import List

from lineindex.Span import DualIndex, LineSpan

NEWLINE = "\n"


def scan(text: str) -> List[LineSpan]:
    """
    Return the line spans of `text` in order.

    - Empty text yields no spans.
    - A line closes at each newline code point and at the final code point.
    - A trailing newline does not open an extra empty line.
    """
    lines: List[LineSpan] = []
    if not text:
        return lines

    last = len(text) - 1
    byte = 0
    char = 0
    while char <= last:
        nl = text.find(NEWLINE, char)
        stop = last if nl == -1 else nl
        # Bytes of the code points preceding the closing one
        end_byte = byte + _utf8_len(text[char:stop])
        lines.append(LineSpan(DualIndex(byte, char), DualIndex(end_byte, stop)))
        byte = end_byte + _utf8_len(text[stop])
        char = stop + 1
    return lines


def _utf8_len(segment: str) -> int:
    """Encoded UTF-8 width of `segment`; lone surrogates count as three bytes."""
    if segment.isascii():
        return len(segment)
    return len(segment.encode("utf-8", "surrogatepass"))


__all__ = ["scan", "NEWLINE"]
