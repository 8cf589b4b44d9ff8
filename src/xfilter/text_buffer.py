"""Single-line text buffer with cursor, selection and UTF-8 aware motion.

The buffer holds UTF-8 bytes and tracks two byte offsets: the cursor and the
selection anchor. Codepoint boundaries are found with the continuation-byte
test alone (top two bits ``10``), and word motion classifies only ASCII
whitespace as space, so multi-byte characters always belong to a word.
"""

from __future__ import annotations

DEFAULT_CAPACITY = 1024

ASCII_WHITESPACE = frozenset(b" \t\n\r\x0b\x0c")


# ---------------------------------------------------------------------------
# Byte-level helpers
# ---------------------------------------------------------------------------


def is_continuation(byte: int) -> bool:
    return (byte & 0xC0) == 0x80


def is_space(byte: int) -> bool:
    return byte in ASCII_WHITESPACE


def next_boundary(data: bytes, pos: int, step: int) -> int:
    """Return the offset of the neighbouring codepoint in direction *step*.

    *step* is ``+1`` or ``-1``. The result is clamped to ``[0, len(data)]``.
    """
    pos += step
    while 0 < pos < len(data) and is_continuation(data[pos]):
        pos += step
    return max(0, min(pos, len(data)))


def snap_to_boundary(data: bytes, pos: int) -> int:
    """Clamp *pos* into *data* and move it back onto a lead byte."""
    pos = max(0, min(pos, len(data)))
    while 0 < pos < len(data) and is_continuation(data[pos]):
        pos -= 1
    return pos


def word_edge(data: bytes, pos: int, step: int) -> int:
    """Move from *pos* to the start (``step=-1``) or end (``step=+1``) of a word.

    Whitespace adjacent to *pos* in the direction of travel is skipped first,
    then the run of non-whitespace.
    """
    if step < 0:
        while pos > 0 and is_space(data[next_boundary(data, pos, -1)]):
            pos = next_boundary(data, pos, -1)
        while pos > 0 and not is_space(data[next_boundary(data, pos, -1)]):
            pos = next_boundary(data, pos, -1)
    else:
        while pos < len(data) and is_space(data[pos]):
            pos = next_boundary(data, pos, +1)
        while pos < len(data) and not is_space(data[pos]):
            pos = next_boundary(data, pos, +1)
    return pos


# ---------------------------------------------------------------------------
# TextBuffer
# ---------------------------------------------------------------------------


class TextBuffer:
    """Editable input field.

    Every operation is total: out-of-range requests, oversized inserts and
    deletions at the buffer edges are silently ignored. ``cursor`` and
    ``select`` are always codepoint boundaries within the text.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._data = bytearray()
        self._capacity = capacity
        self._cursor = 0
        self._select = 0

    # -- state --------------------------------------------------------------

    @property
    def data(self) -> bytes:
        return bytes(self._data)

    @property
    def text(self) -> str:
        return self._data.decode("utf-8", errors="replace")

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def select(self) -> int:
        return self._select

    @property
    def has_selection(self) -> bool:
        return self._cursor != self._select

    @property
    def selection_range(self) -> tuple[int, int]:
        return min(self._cursor, self._select), max(self._cursor, self._select)

    @property
    def selected_text(self) -> str:
        start, end = self.selection_range
        return self._data[start:end].decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return len(self._data)

    # -- primitive edits ----------------------------------------------------

    def insert(self, text: str) -> bool:
        """Insert *text* at the cursor. Returns False if it does not fit."""
        raw = text.encode("utf-8")
        if len(self._data) + len(raw) > self._capacity:
            return False
        self._data[self._cursor : self._cursor] = raw
        self._cursor += len(raw)
        self._select = self._cursor
        return True

    def delete(self, count: int) -> bool:
        """Delete *count* bytes before the cursor (a negative-length insert)."""
        if count <= 0 or self._cursor == 0:
            return False
        start = snap_to_boundary(self._data, self._cursor - count)
        del self._data[start : self._cursor]
        self._cursor = self._select = start
        return True

    def delete_selection(self) -> bool:
        if not self.has_selection:
            return False
        start, end = self.selection_range
        del self._data[start:end]
        self._cursor = self._select = start
        return True

    def set_text(self, text: str) -> None:
        """Replace the whole buffer and put the cursor at the end.

        Text longer than the capacity is cut at the last codepoint that fits.
        """
        raw = text.encode("utf-8")
        if len(raw) > self._capacity:
            raw = raw[: snap_to_boundary(raw, self._capacity)]
        self._data = bytearray(raw)
        self._cursor = self._select = len(self._data)

    def clear(self) -> None:
        self.set_text("")

    # -- motion -------------------------------------------------------------

    def _move_to(self, pos: int, extend: bool) -> bool:
        moved = pos != self._cursor
        self._cursor = pos
        if not extend:
            self._select = pos
        return moved

    def move_bol(self, extend: bool = False) -> bool:
        return self._move_to(0, extend)

    def move_eol(self, extend: bool = False) -> bool:
        return self._move_to(len(self._data), extend)

    def move_left(self, extend: bool = False) -> bool:
        if self._cursor == 0:
            return False
        return self._move_to(next_boundary(self._data, self._cursor, -1), extend)

    def move_right(self, extend: bool = False) -> bool:
        if self._cursor >= len(self._data):
            return False
        return self._move_to(next_boundary(self._data, self._cursor, +1), extend)

    def move_word_left(self, extend: bool = False) -> bool:
        return self._move_to(word_edge(self._data, self._cursor, -1), extend)

    def move_word_right(self, extend: bool = False) -> bool:
        return self._move_to(word_edge(self._data, self._cursor, +1), extend)

    def set_cursor(self, pos: int, extend: bool = False) -> bool:
        return self._move_to(snap_to_boundary(self._data, pos), extend)

    def set_select(self, pos: int) -> bool:
        pos = snap_to_boundary(self._data, pos)
        moved = pos != self._select
        self._select = pos
        return moved

    def select_all(self) -> None:
        self._cursor = 0
        self._select = len(self._data)

    def select_word_at(self, pos: int) -> None:
        """Select the word around *pos* (cursor at its start, anchor at its end)."""
        pos = snap_to_boundary(self._data, pos)
        self._cursor = word_edge(self._data, pos, -1)
        self._select = word_edge(self._data, pos, +1)

    # -- deletion -----------------------------------------------------------

    def delete_to_bol(self) -> bool:
        return self.delete(self._cursor)

    def delete_to_eol(self) -> bool:
        if self._cursor >= len(self._data):
            return False
        del self._data[self._cursor :]
        self._select = self._cursor
        return True

    def delete_word_left(self) -> bool:
        return self.delete(self._cursor - word_edge(self._data, self._cursor, -1))

    def delete_char_left(self) -> bool:
        if self.has_selection:
            return self.delete_selection()
        if self._cursor == 0:
            return False
        return self.delete(self._cursor - next_boundary(self._data, self._cursor, -1))

    def delete_char_right(self) -> bool:
        if self.has_selection:
            return self.delete_selection()
        if self._cursor >= len(self._data):
            return False
        self._cursor = next_boundary(self._data, self._cursor, +1)
        return self.delete(self._cursor - next_boundary(self._data, self._cursor, -1))
