"""Render the prompt line and the visible items as terminal lines."""

from __future__ import annotations

from xfilter.catalog import Item
from xfilter.engine import FilterEngine
from xfilter.text_buffer import TextBuffer
from xfilter.utils import column_to_index, iter_cells, take_columns, truncate_to_width, visible_width
from xfilter.view_window import ViewWindow

REVERSE = "\x1b[7m"
UNDERLINE = "\x1b[4m"
DIM = "\x1b[2m"
RESET = "\x1b[0m"

DEFAULT_PROMPT = "> "


def char_index(text: str, offset: int) -> int:
    """Character index in *text* of UTF-8 byte *offset*."""
    return len(text.encode("utf-8")[:offset].decode("utf-8", errors="ignore"))


def byte_offset(text: str, index: int) -> int:
    """UTF-8 byte offset of character *index* in *text*."""
    return len(text[:index].encode("utf-8"))


class Renderer:
    """Draws a ``FilterEngine`` as ``1 + items`` lines.

    Row 0 is the prompt and input field, followed by one row per visible
    item. The input field scrolls horizontally to keep the cursor in view;
    ``offset_at`` maps a pointer column back to a byte offset using the
    scroll position of the last render.
    """

    def __init__(self, prompt: str = DEFAULT_PROMPT) -> None:
        self.prompt = prompt
        self._scroll = 0

    def render(self, engine: FilterEngine, width: int) -> list[str]:
        lines = [self.render_input(engine.buffer, width, password=engine.config.password)]
        lines.extend(self.render_items(engine.view, width))
        return lines

    # -- input field --------------------------------------------------------

    def _field_width(self, width: int) -> int:
        # One spare column for the cursor past the end of the text
        return max(width - visible_width(self.prompt) - 1, 1)

    def render_input(self, buffer: TextBuffer, width: int, *, password: bool = False) -> str:
        if password:
            self._scroll = 0
            return f"{self.prompt}{REVERSE} {RESET}"

        text = buffer.text
        cursor = char_index(text, buffer.cursor)
        lo, hi = (char_index(text, pos) for pos in buffer.selection_range)
        avail = self._field_width(width)

        self._scroll = min(self._scroll, cursor, len(text))
        while self._scroll < cursor and visible_width(text[self._scroll : cursor]) >= avail:
            self._scroll += 1

        shown = take_columns(text[self._scroll :], avail)
        parts = [self.prompt]
        for index, g, _width in iter_cells(shown):
            position = self._scroll + index
            highlight = lo <= position < hi if buffer.has_selection else position == cursor
            parts.append(f"{REVERSE}{g}{RESET}" if highlight else g)
        if not buffer.has_selection and cursor == self._scroll + len(shown):
            parts.append(f"{REVERSE} {RESET}")
        return "".join(parts)

    def offset_at(self, buffer: TextBuffer, column: int) -> int:
        """Byte offset in *buffer* under terminal *column* of the prompt row."""
        text = buffer.text
        column -= visible_width(self.prompt)
        if column < 0:
            return byte_offset(text, self._scroll)
        index = self._scroll + column_to_index(text[self._scroll :], column)
        return byte_offset(text, index)

    # -- item list ----------------------------------------------------------

    def render_item(self, item: Item, width: int, *, selected: bool, hovered: bool) -> str:
        label = item.text
        if item.group is not None:
            label = f"{item.group.name}: {label}"
        if item.description:
            label = f"{label}  {item.description}"
        line = truncate_to_width(label, width, pad=selected)
        if selected:
            return f"{REVERSE}{line}{RESET}"
        if hovered:
            return f"{UNDERLINE}{line}{RESET}"
        return line

    def render_items(self, view: ViewWindow, width: int) -> list[str]:
        lines: list[str] = []
        for row, item in enumerate(view.visible):
            position = view.start + row
            lines.append(
                self.render_item(
                    item,
                    width,
                    selected=position == view.selected,
                    hovered=position == view.hovered,
                )
            )
        return lines
