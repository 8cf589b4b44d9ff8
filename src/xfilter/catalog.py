"""Item catalog: static items read from the item source plus file completions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Group:
    name: str


@dataclass(frozen=True, eq=False)
class Item:
    """A candidate line.

    Items compare by identity: two equal source lines are still two items.
    ``key`` is the UTF-8 encoding of ``text`` used for matching.
    """

    text: str
    description: str | None = None
    output: str | None = None
    group: Group | None = None
    key: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", self.text.encode("utf-8"))

    @property
    def result(self) -> str:
        """Text printed when this item is chosen."""
        return self.output if self.output is not None else self.text


def parse_item_line(line: str) -> tuple[str, str | None, str | None]:
    """Split ``text[\\tdescription[\\toutput]]``; extra tabs stay in the output."""
    fields = line.split("\t", 2)
    text = fields[0]
    description = fields[1] if len(fields) > 1 else None
    output = fields[2] if len(fields) > 2 else None
    return text, description, output


class ItemCatalog:
    """Insertion-ordered items, with a replaceable tail of file items."""

    def __init__(self) -> None:
        self._items: list[Item] = []
        self._groups: list[Group] = []
        self._file_items: list[Item] = []
        self._generation: int = 0

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, grouping: bool = False) -> ItemCatalog:
        catalog = cls()
        catalog.load(lines, grouping=grouping)
        return catalog

    # -- loading ------------------------------------------------------------

    def load(self, lines: Iterable[str], *, grouping: bool = False) -> int:
        """Append items parsed from *lines*. Returns the number of items added.

        An empty line arms group capture; with *grouping* on, the next
        non-empty line names a new group instead of being an item. Capture
        starts armed, so a grouped source begins with a group name. Lines
        with an empty text field are dropped.
        """
        added = 0
        capture_group = True
        group = self._groups[-1] if self._groups else None

        for raw in lines:
            line = raw.split("\n", 1)[0]
            if not line:
                capture_group = True
                continue

            if grouping and capture_group:
                group = Group(line)
                self._groups.append(group)
                capture_group = False
                continue

            text, description, output = parse_item_line(line)
            if not text:
                continue

            self._items.append(Item(text, description, output, group))
            added += 1

        if added:
            self._generation += 1
        logger.debug("Loaded %d items in %d groups", added, len(self._groups))
        return added

    # -- file completion ----------------------------------------------------

    def set_file_entries(self, prefix: str, names: Iterable[str]) -> None:
        """Replace the file items with ``prefix + name`` for each visible name."""
        self._file_items = [
            Item(prefix + name) for name in names if name and not name.startswith(".")
        ]
        self._generation += 1

    def clear_file_entries(self) -> None:
        if self._file_items:
            self._file_items = []
            self._generation += 1

    # -- access -------------------------------------------------------------

    @property
    def items(self) -> list[Item]:
        """Static items followed by file items."""
        return self._items + self._file_items

    @property
    def static_items(self) -> list[Item]:
        return list(self._items)

    @property
    def file_items(self) -> list[Item]:
        return list(self._file_items)

    @property
    def groups(self) -> list[Group]:
        return list(self._groups)

    @property
    def generation(self) -> int:
        return self._generation

    def __len__(self) -> int:
        return len(self._items) + len(self._file_items)
