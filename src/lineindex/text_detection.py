"""Decoding layer for file input: reject binary content and invalid UTF-8 before indexing."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

PRINTABLE_BYTES = set(b"\t\n\r\f\b" + bytes(range(32, 127)))
SAMPLE_BYTES = 8192
DEFAULT_BINARY_RATIO = 0.30


class TextLoadError(ValueError):
    """Raised when a file cannot be loaded as UTF-8 text."""


class BinaryDetector:
    """Classify byte content as binary/text using a NUL check and a non-printable ratio."""

    def __init__(self, threshold: float = DEFAULT_BINARY_RATIO) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold

    def is_binary(self, sample: bytes) -> bool:
        sample = sample[:SAMPLE_BYTES]
        if not sample:
            return False
        if b"\x00" in sample:
            return True
        # Bytes >= 0x80 are legal in UTF-8; only flag them when the sample does not decode
        if _is_utf8_prefix(sample):
            non_printable = sum(1 for b in sample if b < 0x80 and b not in PRINTABLE_BYTES)
        else:
            non_printable = sum(1 for b in sample if b not in PRINTABLE_BYTES)
        return non_printable / len(sample) > self.threshold


def load_text(
    path: Path | str,
    *,
    detector: Optional[BinaryDetector] = None,
    max_bytes: int = 0,
) -> bytes:
    """Read `path` and return its bytes once they are known to be UTF-8 text.

    Raises:
        TextLoadError: when the file is missing, unreadable, larger than `max_bytes`
            (0 disables the cap), binary, or not valid UTF-8.
    """
    p = Path(path)
    detector = detector or BinaryDetector()
    try:
        size = p.stat().st_size
        if max_bytes and size > max_bytes:
            raise TextLoadError(f"{p}: {size} bytes exceeds limit of {max_bytes}")
        with p.open("rb") as fh:
            data = fh.read()
    except FileNotFoundError as e:
        raise TextLoadError(f"{p}: no such file") from e
    except OSError as e:
        raise TextLoadError(f"{p}: {e.strerror or e}") from e

    if detector.is_binary(data):
        raise TextLoadError(f"{p}: binary content")
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TextLoadError(f"{p}: invalid UTF-8 at byte {e.start}") from e

    logger.debug("Loaded %s (%d bytes)", p, len(data))
    return data


def _is_utf8_prefix(sample: bytes) -> bool:
    """True when `sample` decodes as UTF-8, tolerating a sequence cut at the end."""
    for cut in range(4):
        if cut >= len(sample):
            break
        try:
            sample[: len(sample) - cut].decode("utf-8")
            return True
        except UnicodeDecodeError:
            continue
    return False


__all__ = ["BinaryDetector", "TextLoadError", "load_text", "PRINTABLE_BYTES"]
