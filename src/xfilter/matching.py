"""Two-pass item filter.

Items with a word starting with the query come first, then items that only
contain the query somewhere else. Each tier keeps catalog order. Comparison
is on UTF-8 bytes; the case-insensitive mode folds ASCII letters only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from xfilter.catalog import Item

_WORD_RE = re.compile(rb"[^ \t\n\r\x0b\x0c]+")


@dataclass(frozen=True)
class MatchChain:
    """Ordered result of one filter pass."""

    items: tuple[Item, ...] = ()
    prefix_count: int = 0

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, position: int) -> Item:
        return self.items[position]

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    @property
    def prefix_matches(self) -> tuple[Item, ...]:
        return self.items[: self.prefix_count]

    @property
    def substring_matches(self) -> tuple[Item, ...]:
        return self.items[self.prefix_count :]


def fold(data: bytes, case_sensitive: bool) -> bytes:
    return data if case_sensitive else data.lower()


def match_word_prefix(key: bytes, query: bytes) -> bool:
    """True if a whitespace-delimited word of *key* begins with *query*.

    The comparison runs over the whole query from the word start, so a query
    containing spaces can span several words.
    """
    if not query:
        return True
    return any(key.startswith(query, m.start()) for m in _WORD_RE.finditer(key))


def match_substring(key: bytes, query: bytes) -> bool:
    return query in key


def filter_items(
    query: bytes | str,
    items: Iterable[Item],
    *,
    case_sensitive: bool = True,
) -> MatchChain:
    """Build the match chain for *query* over *items*."""
    if isinstance(query, str):
        query = query.encode("utf-8")
    query = fold(query, case_sensitive)

    prefix: list[Item] = []
    rest: list[Item] = []
    for item in items:
        key = fold(item.key, case_sensitive)
        if match_word_prefix(key, query):
            prefix.append(item)
        elif match_substring(key, query):
            rest.append(item)

    return MatchChain(items=tuple(prefix + rest), prefix_count=len(prefix))
