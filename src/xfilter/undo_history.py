"""Linear undo/redo history of whole-text snapshots."""

from __future__ import annotations

from typing import Generic, TypeVar

S = TypeVar("S")


class UndoHistory(Generic[S]):
    """Snapshots oldest first plus the index of the current one.

    ``current == -1`` means the history has been walked past its oldest
    snapshot (or nothing was recorded yet). Snapshots must be immutable
    values that compare by equality, e.g. ``bytes``.
    """

    def __init__(self) -> None:
        self._snapshots: list[S] = []
        self._current: int = -1

    def record(self, state: S, *, editing: bool) -> None:
        """Record a boundary before (``editing``) or after an edit run.

        Snapshots newer than the current one are dropped first, so editing
        after an undo discards the redo branch. A snapshot equal to the newest
        one is not stored twice. Only editing boundaries move the current
        index, which is what lets an undo restore the text from before the
        whole run.
        """
        del self._snapshots[self._current + 1 :]

        if not self._snapshots or self._snapshots[-1] != state:
            self._snapshots.append(state)
            if editing:
                self._current = len(self._snapshots) - 1

    def undo(self, state: S) -> S | None:
        """Return the snapshot to restore for an undo from *state*, or None."""
        if self._current < 0:
            return None
        if self._snapshots[self._current] == state:
            self._current -= 1
        if self._current < 0:
            return None
        snapshot = self._snapshots[self._current]
        self._current -= 1
        return snapshot

    def redo(self, state: S) -> S | None:
        """Return the snapshot to restore for a redo from *state*, or None."""
        newest = len(self._snapshots) - 1
        if self._current < newest:
            self._current += 1
        if self._current < newest and self._snapshots[self._current] == state:
            self._current += 1
        if self._current < 0:
            return None
        return self._snapshots[self._current]

    def clear(self) -> None:
        self._snapshots.clear()
        self._current = -1

    @property
    def current(self) -> int:
        return self._current

    @property
    def snapshots(self) -> list[S]:
        return list(self._snapshots)

    @property
    def length(self) -> int:
        return len(self._snapshots)
