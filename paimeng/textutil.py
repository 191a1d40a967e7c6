"""String and collection helpers shared by the bot's plugins."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from itertools import groupby
import re
from typing import Any, Callable, Iterable

_LETTERS = re.compile(r"[A-Za-z]+")
_DIGITS = re.compile(r"[0-9]+")

_LATIN1_SPACES = frozenset("\t\n\v\f\r \x85\xa0")

_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def go_and_wait(*handlers: Callable[[], Any]) -> None:
    """Run every handler concurrently and wait for all of them.

    If any handler raises, the first exception to occur is re-raised once
    every handler has finished.
    """
    if not handlers:
        return
    first_error: BaseException | None = None
    with ThreadPoolExecutor(max_workers=len(handlers)) as pool:
        futures = [pool.submit(handler) for handler in handlers]
        for future in as_completed(futures):
            error = future.exception()
            if error is not None and first_error is None:
                first_error = error
    if first_error is not None:
        raise first_error


def json_string(value: Any) -> str:
    """Serialise a value to compact JSON, or return "" if it cannot be."""
    try:
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return ""
    for char, escaped in _JSON_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def string_limit(s: str, limit: int) -> str:
    """Cut a string to ``limit`` characters, appending "..." if it was longer."""
    if len(s) <= limit:
        return s
    return s[:limit] + "..."


def form_set(*slices: Iterable[str]) -> set[str]:
    """Collect every string of every iterable into one set."""
    return {s for items in slices for s in items}


def merge_string_slices(*slices: Iterable[str]) -> list[str]:
    """Merge string lists, dropping duplicates and empty strings.

    The first occurrence of each string decides its position.
    """
    seen: dict[str, None] = {}
    for items in slices:
        for s in items:
            if s:
                seen.setdefault(s, None)
    return list(seen)


def contains(items: Iterable[str], target: str) -> bool:
    """Whether ``target`` is one of ``items``."""
    return target in items


def delete_strings(items: Iterable[str], *strings: str) -> list[str]:
    """Deduplicate ``items`` and remove every one of ``strings`` from them."""
    unwanted = set(strings)
    return [s for s in merge_string_slices(items) if s not in unwanted]


def is_letter(s: str) -> bool:
    """Whether the string is made only of ASCII letters."""
    return _LETTERS.fullmatch(s) is not None


def is_number(s: str) -> bool:
    """Whether the string is made only of ASCII digits."""
    return _DIGITS.fullmatch(s) is not None


def real_length(s: str) -> int:
    """Number of code points in the string."""
    return len(s)


def _is_space(char: str) -> bool:
    if ord(char) <= 0xFF:
        return char in _LATIN1_SPACES
    return char.isspace()


def split_on_space(text: str) -> list[str]:
    """Split text into alternating runs of non-space and space characters."""
    runs = ["".join(run) for _, run in groupby(text, key=_is_space)]
    return runs or [""]