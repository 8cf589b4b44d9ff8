"""Filter engine: the single value that owns a session's state.

The engine ties the text buffer, undo history, catalog, match chain, view
window and command history together. Frontends feed it abstract operations
(see ``xfilter.operations``), pasted text and pointer input; every call runs
to completion and returns a redraw directive.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from xfilter.catalog import Item, ItemCatalog
from xfilter.config import Config
from xfilter.files import completion_prefix, list_directory
from xfilter.history import CommandHistory
from xfilter.matching import MatchChain, filter_items
from xfilter.operations import (
    Direction,
    Directive,
    Operation,
    is_editing,
    is_motion,
    is_selection,
    is_undo,
)
from xfilter.text_buffer import TextBuffer
from xfilter.undo_history import UndoHistory
from xfilter.view_window import ViewWindow

logger = logging.getLogger(__name__)

ListDirectory = Callable[[str], list[str]]


def is_insertable(text: str) -> bool:
    """Reject empty text and text carrying control characters."""
    if not text:
        return False
    return not any(
        ord(ch) < 32 or ord(ch) == 0x7F or (0x80 <= ord(ch) <= 0x9F) for ch in text
    )


class FilterEngine:
    """Text editing, undo, matching and pagination for one filter session."""

    def __init__(
        self,
        config: Config | None = None,
        catalog: ItemCatalog | None = None,
        history: CommandHistory | None = None,
        list_directory: ListDirectory = list_directory,
    ) -> None:
        self.config = config or Config()
        self.catalog = catalog or ItemCatalog()
        self.history = history if history is not None else CommandHistory(
            capacity=self.config.history_size
        )
        self.buffer = TextBuffer(self.config.text_capacity)
        self.undo_history: UndoHistory[str] = UndoHistory()
        self.view = ViewWindow(self.config.items)

        self._list_directory = list_directory
        self._file_completion = self.config.file_completion
        self._previous: Operation = "nothing"

        # Double-click detection
        self._last_click_ms: int | None = None
        self._word_selected = False

        self.refilter()

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        config: Config | None = None,
        **kwargs: object,
    ) -> FilterEngine:
        config = config or Config()
        catalog = ItemCatalog.from_lines(lines, grouping=config.grouping)
        return cls(config, catalog, **kwargs)  # type: ignore[arg-type]

    # -- read-only state ----------------------------------------------------

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def chain(self) -> MatchChain:
        return self.view.chain

    @property
    def selected_item(self) -> Item | None:
        return self.view.selected_item

    @property
    def file_completion(self) -> bool:
        return self._file_completion

    # -- matching -----------------------------------------------------------

    def refilter(self) -> None:
        """Rebuild file items (when enabled) and the match chain."""
        if self._file_completion:
            directory, prefix = completion_prefix(self.buffer.text)
            self.catalog.set_file_entries(prefix, self._list_directory(directory))

        chain = filter_items(
            self.buffer.data,
            self.catalog.items,
            case_sensitive=not self.config.case_insensitive,
        )
        self.view.reset(chain)
        logger.debug("%d matches for %r", len(chain), self.buffer.text)

    def set_file_completion(self, enabled: bool) -> Directive:
        self._file_completion = enabled
        if not enabled:
            self.catalog.clear_file_entries()
        self.refilter()
        return "drawPrompt"

    # -- operations ---------------------------------------------------------

    def apply(self, operation: Operation, text: str = "") -> Directive:
        """Apply one operation; *text* is the payload of insert and paste."""
        if operation in ("insert", "paste") and not text:
            return "none"
        if operation == "insert" and not is_insertable(text):
            return "none"

        # Undo boundaries: close a pending edit run before undo/redo, and
        # open a new snapshot whenever the class of edit changes.
        if is_undo(operation) and is_editing(self._previous):
            self.undo_history.record(self.buffer.text, editing=False)
        if is_editing(operation) and (operation != self._previous or operation == "paste"):
            self.undo_history.record(self.buffer.text, editing=True)
        self._previous = operation

        if operation == "cancel":
            return "cancel"
        if operation == "confirm":
            return self._confirm()
        if operation in ("selectPrev", "selectNext"):
            if not self.view.chain:
                self.refilter()
            else:
                self.view.advance("previous" if operation == "selectPrev" else "next")
            return "drawPrompt"
        if operation in ("pageUp", "pageDown"):
            self.view.page("previous" if operation == "pageUp" else "next")
            return "drawPrompt"
        if operation in ("historyPrev", "historyNext"):
            return self._navigate_history("previous" if operation == "historyPrev" else "next")
        if is_motion(operation) or is_selection(operation):
            return self._move(operation)
        if is_undo(operation):
            return self._undo(operation)
        if is_editing(operation):
            return self._edit(operation, text)

        # copy is served from buffer.selected_text by the frontend
        return "none"

    def paste(self, text: str) -> Directive:
        """Insert the first line of *text*, replacing the selection."""
        return self.apply("paste", text)

    def _confirm(self) -> Directive:
        self.history.commit(self.buffer.text)
        return "confirm"

    def _navigate_history(self, direction: Direction) -> Directive:
        if not len(self.history):
            return "none"
        entry = self.history.navigate(direction)
        if entry is not None:
            self.buffer.set_text(entry)
            self.refilter()
        return "drawPrompt"

    def _move(self, operation: Operation) -> Directive:
        buf = self.buffer
        extend = is_selection(operation)

        if operation in ("cursorLineStart", "selectToLineStart"):
            buf.move_bol(extend)
        elif operation in ("cursorLineEnd", "selectToLineEnd"):
            buf.move_eol(extend)
        elif operation in ("cursorLeft", "selectLeft"):
            if not buf.move_left(extend):
                return "none"
        elif operation in ("cursorRight", "selectRight"):
            if not buf.move_right(extend):
                return "none"
        elif operation in ("cursorWordLeft", "selectWordLeft"):
            buf.move_word_left(extend)
        elif operation in ("cursorWordRight", "selectWordRight"):
            buf.move_word_right(extend)

        return "drawInput" if extend else "drawPrompt"

    def _undo(self, operation: Operation) -> Directive:
        if operation == "undo":
            snapshot = self.undo_history.undo(self.buffer.text)
        else:
            snapshot = self.undo_history.redo(self.buffer.text)
        if snapshot is not None:
            self.buffer.set_text(snapshot)
        self.refilter()
        return "drawPrompt"

    def _edit(self, operation: Operation, text: str) -> Directive:
        buf = self.buffer

        if operation == "insert":
            buf.delete_selection()
            buf.insert(text)
        elif operation == "paste":
            buf.delete_selection()
            buf.insert(text.splitlines()[0])
        elif operation == "deleteCharBackward":
            if not buf.delete_char_left():
                return "none"
        elif operation == "deleteCharForward":
            if not buf.delete_char_right():
                return "none"
        elif operation == "deleteToLineStart":
            buf.delete_to_bol()
        elif operation == "deleteToLineEnd":
            buf.delete_to_eol()
        elif operation == "deleteWordBackward":
            buf.delete_word_left()

        self.refilter()
        return "drawPrompt"

    # -- pointer input ------------------------------------------------------

    def click(self, position: int, timestamp_ms: int) -> Directive:
        """Click in the input field at byte offset *position*.

        A second click within the double-click threshold selects the word
        under the pointer; a third selects the whole text.
        """
        quick = (
            self._last_click_ms is not None
            and timestamp_ms - self._last_click_ms < self.config.double_click_ms
        )
        if quick and self._word_selected:
            self.buffer.select_all()
            self._word_selected = False
        elif quick:
            self.buffer.select_word_at(position)
            self._word_selected = True
        else:
            self.buffer.set_cursor(position)
            self._word_selected = False
        self._last_click_ms = timestamp_ms
        return "drawInput"

    def drag(self, position: int) -> Directive:
        """Drag with the button held: move the selection anchor."""
        return "drawInput" if self.buffer.set_select(position) else "none"

    def hover(self, row: int | None) -> Directive:
        """Pointer over the item list at *row* (None when outside it)."""
        return "drawPrompt" if self.view.hover(row) else "none"

    def click_item(self, row: int) -> Directive:
        """Click on the item list: choose the item at *row* and confirm."""
        if self.view.select_row(row) is None:
            return "none"
        return self._confirm()

    # -- output -------------------------------------------------------------

    def output_line(self) -> str:
        """Line printed on confirmation, including the trailing newline."""
        item = self.view.selected_item
        if item is None:
            return f"{self.buffer.text}\n"
        if item.group is not None:
            return f"{item.group.name}\t{item.result}\n"
        return f"{item.result}\n"
