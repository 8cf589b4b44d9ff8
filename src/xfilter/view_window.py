"""Paginated window over the match chain with selection and hover cursors."""

from __future__ import annotations

from xfilter.catalog import Item
from xfilter.matching import MatchChain
from xfilter.operations import Direction


class ViewWindow:
    """At most ``capacity`` consecutive chain entries, starting at ``start``.

    Positions are indices into the current chain. Moving the selection off
    either edge of the window turns a whole page rather than scrolling by one
    item, so the selection always stays inside the window.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"window capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._chain = MatchChain()
        self._start = 0
        self._selected: int | None = None
        self._hovered: int | None = None

    # -- state --------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def chain(self) -> MatchChain:
        return self._chain

    @property
    def start(self) -> int:
        return self._start

    @property
    def selected(self) -> int | None:
        return self._selected

    @property
    def hovered(self) -> int | None:
        return self._hovered

    @property
    def selected_item(self) -> Item | None:
        return None if self._selected is None else self._chain[self._selected]

    @property
    def hovered_item(self) -> Item | None:
        return None if self._hovered is None else self._chain[self._hovered]

    @property
    def visible(self) -> tuple[Item, ...]:
        """Entries currently eligible for display."""
        return self._chain.items[self._start : self._start + self._capacity]

    # -- updates ------------------------------------------------------------

    def reset(self, chain: MatchChain) -> None:
        """Adopt a freshly built chain: first page, nothing selected."""
        self._chain = chain
        self._start = 0
        self._selected = None
        self._hovered = None

    def advance(self, direction: Direction) -> bool:
        """Move the selection one entry; returns whether anything changed."""
        if not self._chain:
            return False

        if self._selected is None:
            self._selected = self._start
            return True

        if direction == "next":
            if self._selected + 1 >= len(self._chain):
                return False
            offset = min(self._selected - self._start, self._capacity)
            self._selected += 1
            if offset + 1 >= self._capacity:
                page_start = self._start + self._capacity
                self._start = page_start if page_start < len(self._chain) else self._selected
            return True

        if self._selected == 0:
            return False
        self._selected -= 1
        if self._selected == self._start - 1:
            self._start = max(self._start - self._capacity, 0)
        return True

    def page(self, direction: Direction) -> bool:
        changed = False
        for _ in range(self._capacity):
            if not self.advance(direction):
                break
            changed = True
        return changed

    def select_row(self, row: int) -> Item | None:
        """Select the visible entry at *row* (clamped); returns it."""
        position = self.item_at(row)
        if position is None:
            return None
        self._selected = position
        return self._chain[position]

    def item_at(self, row: int) -> int | None:
        """Chain position of the visible entry at *row*, clamped to the last one."""
        count = len(self.visible)
        if row < 0 or count == 0:
            return None
        return self._start + min(row, count - 1)

    def hover(self, row: int | None) -> bool:
        """Set the hovered entry from a row offset; outside the window clears it."""
        count = len(self.visible)
        position = self._start + row if row is not None and 0 <= row < count else None
        changed = position != self._hovered
        self._hovered = position
        return changed
