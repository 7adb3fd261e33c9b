"""
Storage for the text behind a LineIndex.

Two implementations share one read-only interface:
  - BorrowedText keeps a reference to the caller's `str`. Nothing is copied; the UTF-8
    encoding is produced only if a byte view is requested.
  - OwnedBuffer takes ownership of a UTF-8 byte buffer. Line slices are `memoryview`
    slices of that buffer, decoded on demand.
"""
from __future__ import annotations

from typing import Optional, Protocol, Union

from lineindex.Span import LineSpan

ENCODING = "utf-8"

BytesLike = Union[bytes, bytearray, memoryview]


class TextSource(Protocol):
    @property
    def owned(self) -> bool: ...
    def text(self) -> str: ...
    def data(self) -> bytes: ...
    def byte_length(self) -> int: ...
    def char_length(self) -> int: ...
    def view(self, start: int, stop: int) -> memoryview: ...
    def slice_line(self, span: LineSpan, byte_stop: int) -> str: ...


class BorrowedText:
    """View over a caller-supplied string."""

    __slots__ = ("_text", "_data")

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"BorrowedText expects str, got {type(text).__name__}")
        self._text = text
        self._data: Optional[bytes] = None

    @property
    def owned(self) -> bool:
        return False

    def text(self) -> str:
        return self._text

    def data(self) -> bytes:
        # Concurrent first calls compute the same value, so the race is benign
        if self._data is None:
            self._data = self._text.encode(ENCODING, "surrogatepass")
        return self._data

    def byte_length(self) -> int:
        if self._text.isascii():
            return len(self._text)
        return len(self.data())

    def char_length(self) -> int:
        return len(self._text)

    def view(self, start: int, stop: int) -> memoryview:
        return memoryview(self.data())[start:stop]

    def slice_line(self, span: LineSpan, byte_stop: int) -> str:
        return self._text[span.start.char : span.end.char + 1]


class OwnedBuffer:
    """UTF-8 buffer owned by the index."""

    __slots__ = ("_data", "_chars")

    def __init__(self, data: BytesLike) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"OwnedBuffer expects a bytes-like value, got {type(data).__name__}")
        # bytes() copies mutable buffers so later caller writes cannot reach the index
        self._data = bytes(data)
        self._chars: Optional[int] = None

    @property
    def owned(self) -> bool:
        return True

    def text(self) -> str:
        return self._data.decode(ENCODING)

    def data(self) -> bytes:
        return self._data

    def byte_length(self) -> int:
        return len(self._data)

    def char_length(self) -> int:
        if self._chars is None:
            self._chars = len(self.text())
        return self._chars

    def view(self, start: int, stop: int) -> memoryview:
        return memoryview(self._data)[start:stop]

    def slice_line(self, span: LineSpan, byte_stop: int) -> str:
        return str(self.view(span.start.byte, byte_stop), ENCODING)


__all__ = ["TextSource", "BorrowedText", "OwnedBuffer", "ENCODING"]
