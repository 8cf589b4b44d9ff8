"""Bounded history of confirmed inputs and its plain-text file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from xfilter.operations import Direction

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 15


class CommandHistory:
    """Entries oldest first with a navigation index.

    The index ranges over ``[0, len(entries)]``; ``len(entries)`` means the
    user is not browsing the history. ``path`` is where the history is saved;
    None keeps it in memory only.
    """

    def __init__(
        self,
        entries: Iterable[str] = (),
        capacity: int = DEFAULT_HISTORY_SIZE,
        path: str | Path | None = None,
    ) -> None:
        self._capacity = capacity
        self._entries: list[str] = list(entries)[-capacity:] if capacity > 0 else []
        self._index = len(self._entries)
        self.path = Path(path) if path is not None else None

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_navigating(self) -> bool:
        return self._index < len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def navigate(self, direction: Direction) -> str | None:
        """Step through the entries; None once past the newest one."""
        if direction == "previous":
            if self._index > 0:
                self._index -= 1
        elif self._index < len(self._entries):
            self._index += 1

        if self._index == len(self._entries):
            return None
        return self._entries[self._index]

    def reset(self) -> None:
        self._index = len(self._entries)

    def commit(self, text: str) -> bool:
        """Append *text* unless it repeats the newest entry.

        The oldest entry is evicted once the capacity is exceeded. Returns
        whether the entries changed.
        """
        if self._capacity <= 0:
            return False
        if self._entries and self._entries[-1] == text:
            self.reset()
            return False
        self._entries.append(text)
        del self._entries[: -self._capacity]
        self.reset()
        return True


def load_history(path: str | Path | None, capacity: int = DEFAULT_HISTORY_SIZE) -> CommandHistory:
    """Read a history file, one entry per line, keeping the newest *capacity*.

    A missing file gives an empty history that will be created on save. An
    unreadable file gives an empty history that is never saved.
    """
    if path is None or str(path) == "":
        return CommandHistory(capacity=capacity)

    history_path = Path(path).expanduser()
    if not history_path.exists():
        return CommandHistory(capacity=capacity, path=history_path)

    try:
        content = history_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Cannot read history file %s: %s", history_path, e)
        return CommandHistory(capacity=capacity)

    return CommandHistory(content.splitlines(), capacity=capacity, path=history_path)


def save_history(history: CommandHistory) -> bool:
    """Rewrite the history file in full, oldest entry first."""
    if history.path is None:
        return False
    try:
        history.path.parent.mkdir(parents=True, exist_ok=True)
        history.path.write_text(
            "".join(f"{entry}\n" for entry in history.entries), encoding="utf-8"
        )
    except OSError as e:
        logger.warning("Cannot write history file %s: %s", history.path, e)
        return False
    logger.debug("Saved %d history entries to %s", len(history), history.path)
    return True
