from __future__ import annotations

import bisect
import logging
from typing import Callable, List, Optional, Tuple, Union

from lineindex.scanner import scan
from lineindex.Span import LineSpan
from lineindex.TextSource import ENCODING, BorrowedText, BytesLike, OwnedBuffer, TextSource

logger = logging.getLogger(__name__)


class LineIndex:
    """
    Immutable line index over a text, mapping between UTF-8 byte offsets, code point
    offsets and zero-based line numbers.

    The text is scanned once at construction. Lookups bisect the precomputed line start
    offsets, so each query is O(log lines). Out-of-range queries return None.

    Pass a `str` to borrow it, or a bytes-like UTF-8 buffer to have the index own a copy.
    """

    def __init__(self, source: Union[str, BytesLike]):
        if isinstance(source, str):
            store: TextSource = BorrowedText(source)
        elif isinstance(source, (bytes, bytearray, memoryview)):
            store = OwnedBuffer(source)
        else:
            raise TypeError(f"LineIndex source must be str or bytes-like, got {type(source).__name__}")

        self._source = store
        self._lines: Tuple[LineSpan, ...] = tuple(scan(store.text()))
        self._byte_starts: List[int] = [span.start.byte for span in self._lines]
        self._char_starts: List[int] = [span.start.char for span in self._lines]
        logger.debug(
            "Indexed %d lines (%d bytes, owned=%s)", len(self._lines), store.byte_length(), store.owned
        )

    @classmethod
    def from_str(cls, text: str) -> "LineIndex":
        """Index `text` without copying it."""
        if not isinstance(text, str):
            raise TypeError(f"from_str expects str, got {type(text).__name__}")
        return cls(text)

    @classmethod
    def from_bytes(cls, data: BytesLike) -> "LineIndex":
        """
        Index a UTF-8 buffer, taking a private copy of it.

        Raises:
            UnicodeDecodeError: when `data` is not valid UTF-8.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"from_bytes expects a bytes-like value, got {type(data).__name__}")
        return cls(data)

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        kind = "owned" if self._source.owned else "borrowed"
        return f"LineIndex(lines={len(self._lines)}, bytes={self._source.byte_length()}, {kind})"

    # ---------------- Source access ----------------

    @property
    def owns_source(self) -> bool:
        return self._source.owned

    def source_text(self) -> str:
        return self._source.text()

    def source_bytes(self) -> bytes:
        """The source encoded as UTF-8; the byte coordinate system indexes into this."""
        return self._source.data()

    def byte_length(self) -> int:
        return self._source.byte_length()

    def char_length(self) -> int:
        return self._source.char_length()

    # ---------------- Line accessors ----------------

    def line_count(self) -> int:
        return len(self._lines)

    def spans(self) -> Tuple[LineSpan, ...]:
        return self._lines

    def span_for_line(self, line: int) -> Optional[LineSpan]:
        if 0 <= line < len(self._lines):
            return self._lines[line]
        return None

    def byte_span_for_line(self, line: int) -> Optional[Tuple[int, int]]:
        """Inclusive byte span of `line`, including any terminating newline."""
        span = self.span_for_line(line)
        return span.bytes() if span is not None else None

    def char_span_for_line(self, line: int) -> Optional[Tuple[int, int]]:
        """Inclusive code point span of `line`, including any terminating newline."""
        span = self.span_for_line(line)
        return span.chars() if span is not None else None

    def line_text(self, line: int) -> Optional[str]:
        """Text of `line` including its terminating newline, if any."""
        span = self.span_for_line(line)
        if span is None:
            return None
        return self._source.slice_line(span, self._byte_stop(line))

    def line_bytes(self, line: int) -> Optional[memoryview]:
        """Zero-copy view of the UTF-8 bytes of `line`."""
        span = self.span_for_line(line)
        if span is None:
            return None
        return self._source.view(span.start.byte, self._byte_stop(line))

    # ---------------- Offset lookup ----------------

    def line_for_byte(self, offset: int) -> Optional[int]:
        """Line containing byte `offset`, or None outside [0, last line end]."""
        return self._line_for(self._byte_starts, offset, lambda span: span.end.byte)

    def line_for_char(self, offset: int) -> Optional[int]:
        """Line containing code point `offset`, or None outside [0, last line end]."""
        return self._line_for(self._char_starts, offset, lambda span: span.end.char)

    def byte_to_point(self, offset: int) -> Optional[Tuple[int, int]]:
        """Convert a byte offset to a 0-indexed (row, byte column) tuple."""
        line = self.line_for_byte(offset)
        if line is None:
            return None
        return (line, offset - self._byte_starts[line])

    def char_to_point(self, offset: int) -> Optional[Tuple[int, int]]:
        """Convert a code point offset to a 0-indexed (row, code point column) tuple."""
        line = self.line_for_char(offset)
        if line is None:
            return None
        return (line, offset - self._char_starts[line])

    def point_to_byte(self, row: int, col: int) -> Optional[int]:
        span = self.span_for_line(row)
        if span is None or col < 0 or span.start.byte + col > span.end.byte:
            return None
        return span.start.byte + col

    def point_to_char(self, row: int, col: int) -> Optional[int]:
        span = self.span_for_line(row)
        if span is None or col < 0 or span.start.char + col > span.end.char:
            return None
        return span.start.char + col

    def byte_to_char(self, offset: int) -> Optional[int]:
        """
        Code point offset of the code point starting at byte `offset`.
        Returns None when `offset` is out of range or falls inside a multi-byte sequence.
        """
        line = self.line_for_byte(offset)
        if line is None:
            return None
        span = self._lines[line]
        try:
            prefix = str(self._source.view(span.start.byte, offset), ENCODING)
        except UnicodeDecodeError:
            return None
        return span.start.char + len(prefix)

    def char_to_byte(self, offset: int) -> Optional[int]:
        """Byte offset of the first byte of code point `offset`."""
        line = self.line_for_char(offset)
        if line is None:
            return None
        span = self._lines[line]
        text = self._source.slice_line(span, self._byte_stop(line))
        prefix = text[: offset - span.start.char]
        return span.start.byte + len(prefix.encode(ENCODING, "surrogatepass"))

    # ---------------- Internals ----------------

    def _line_for(self, starts: List[int], offset: int, end_of: Callable[[LineSpan], int]) -> Optional[int]:
        # Spans are sorted and contiguous: the candidate is the last line starting at or
        # before `offset`; it contains the offset unless we ran past the final line.
        if not starts or offset < 0:
            return None
        line = bisect.bisect_right(starts, offset) - 1
        if line < 0 or offset > end_of(self._lines[line]):
            return None
        return line

    def _byte_stop(self, line: int) -> int:
        """Exclusive byte offset where `line` ends (covers a multi-byte final code point)."""
        if line + 1 < len(self._lines):
            return self._byte_starts[line + 1]
        return self._source.byte_length()


__all__ = ["LineIndex"]
