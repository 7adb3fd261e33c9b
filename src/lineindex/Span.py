from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class DualIndex:
    """Position of one code point: its UTF-8 byte offset and its code point ordinal."""

    byte: int
    char: int

    def __post_init__(self) -> None:
        if self.char < 0 or self.byte < self.char:
            raise ValueError(f"Invalid index: byte={self.byte}, char={self.char}")


@dataclass(frozen=True, order=True)
class LineSpan:
    """
    Inclusive range of one line. `end` is the terminating newline when there is one,
    otherwise the last code point of the text.
    """

    start: DualIndex
    end: DualIndex

    def __post_init__(self) -> None:
        if self.start.byte > self.end.byte or self.start.char > self.end.char:
            raise ValueError(f"Span start {self.start} is after end {self.end}")

    def bytes(self) -> tuple[int, int]:
        return (self.start.byte, self.end.byte)

    def chars(self) -> tuple[int, int]:
        return (self.start.char, self.end.char)

    def byte_range(self) -> range:
        return range(self.start.byte, self.end.byte + 1)

    def char_range(self) -> range:
        return range(self.start.char, self.end.char + 1)

    def contains_byte(self, offset: int) -> bool:
        return self.start.byte <= offset <= self.end.byte

    def contains_char(self, offset: int) -> bool:
        return self.start.char <= offset <= self.end.char


__all__ = ["DualIndex", "LineSpan"]
