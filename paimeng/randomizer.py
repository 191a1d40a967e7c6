"""Letting fate decide: random numbers and random choices."""

from __future__ import annotations

import random
import re

from paimeng.textutil import merge_string_slices

_RANGE = re.compile(r"\s*([+-]?[0-9]+)\.\.\.\s*([+-]?[0-9]+)")


def parse_range(text: str) -> tuple[int, int]:
    """Parse "<a>...<b>" into (low, high), whichever order they were given in."""
    match = _RANGE.match(text)
    if not match:
        raise ValueError(f"invalid range {text!r}")
    low, high = int(match.group(1)), int(match.group(2))
    if low > high:
        low, high = high, low
    return low, high


def random_number(text: str, rng: random.Random | None = None) -> int:
    """A random integer in the inclusive range written as "<a>...<b>"."""
    rng = rng if rng is not None else random.Random()
    text = text.strip()
    if not text:
        raise ValueError("no range given")
    low, high = parse_range(text)
    return low + rng.randrange(high - low + 1)


def random_item(text: str, rng: random.Random | None = None) -> str:
    """One of the space-separated options, chosen at random."""
    rng = rng if rng is not None else random.Random()
    items = merge_string_slices(text.strip().split(" "))
    if not items:
        raise ValueError("no options given")
    return rng.choice(items)