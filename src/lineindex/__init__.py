"""Line/byte/character index over a text buffer."""
from __future__ import annotations

from lineindex.LineIndex import LineIndex
from lineindex.scanner import scan
from lineindex.Span import DualIndex, LineSpan
from lineindex.TextSource import BorrowedText, OwnedBuffer, TextSource

__all__ = [
    "LineIndex",
    "DualIndex",
    "LineSpan",
    "scan",
    "TextSource",
    "BorrowedText",
    "OwnedBuffer",
]
