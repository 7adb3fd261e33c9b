# Shared test fixtures utilities.
# Deterministic text generators and the invariant assertions every index must satisfy,
# so scanner and index tests check the same partition rules.

from __future__ import annotations

import random
import unittest

# Mix of 1-, 2-, 3- and 4-byte UTF-8 code points
ALPHABET = "abcdefghij XYZ0123456789éöß€中文😀"

SAMPLES = [
    "",
    "\n",
    "\n\n",
    "x",
    "dd",
    "aa\nbbb\ncccc\ndd",
    "aa\nbbb\ncccc\ndd\n",
    "héllo\nwörld\n€x",
    "a\n\n\nb",
    "😀\n😀😀\n",
    "\r\nwindows\r\nlines\r\n",
]


def rand_text(n: int, rate: float = 0.05, seed: int = 42) -> str:
    """Generate deterministic mixed-width text with occasional newlines.

    - n: total length in code points
    - rate: probability of emitting a newline at each step
    - seed: RNG seed for determinism
    """
    rnd = random.Random(seed)
    out = []
    for _ in range(n):
        if rnd.random() < rate:
            out.append("\n")
        else:
            out.append(rnd.choice(ALPHABET))
    return "".join(out)


def utf8_len(s: str) -> int:
    return len(s.encode("utf-8"))


class InvariantsMixin(unittest.TestCase):
    def assertPartition(self, text: str, spans) -> None:
        """Spans are contiguous in both coordinates and cover the whole text."""
        if not text:
            self.assertEqual(list(spans), [])
            return
        self.assertTrue(spans, "no spans returned for non-empty text")
        self.assertEqual((spans[0].start.byte, spans[0].start.char), (0, 0))
        last = spans[-1]
        self.assertEqual(last.end.char, len(text) - 1)
        self.assertEqual(last.end.byte, utf8_len(text[:-1]))
        for prev, cur in zip(spans, spans[1:]):
            self.assertEqual(text[prev.end.char], "\n", f"line ends mid-text without newline: {prev}")
            self.assertEqual(cur.start.char, prev.end.char + 1)
            self.assertEqual(cur.start.byte, prev.end.byte + utf8_len(text[prev.end.char]))
        for span in spans:
            self.assertEqual(span.start.byte, utf8_len(text[: span.start.char]))
            self.assertEqual(span.end.byte, utf8_len(text[: span.end.char]))
            # Only the closing code point may be a newline
            self.assertNotIn("\n", text[span.start.char : span.end.char])


__all__ = ["ALPHABET", "SAMPLES", "rand_text", "utf8_len", "InvariantsMixin"]
