"""Interactive session: terminal events in, engine operations, redraws out."""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from typing import Callable, Iterable, TextIO

from xfilter.catalog import ItemCatalog
from xfilter.engine import FilterEngine
from xfilter.keybindings import KeybindingsManager
from xfilter.keys import MouseEvent, parse_clipboard_reply, parse_mouse
from xfilter.operations import Directive
from xfilter.render import Renderer
from xfilter.terminal import Terminal

logger = logging.getLogger(__name__)


def monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def load_items(
    paths: Iterable[str],
    *,
    grouping: bool = False,
    stdin: TextIO | None = None,
) -> ItemCatalog:
    """Build the catalog from item files, or from *stdin* when none are named.

    Raises ``OSError`` for an unreadable file.
    """
    catalog = ItemCatalog()
    paths = list(paths)
    if not paths:
        catalog.load(stdin if stdin is not None else sys.stdin, grouping=grouping)
    for path in paths:
        with open(path, encoding="utf-8", errors="replace") as f:
            count = catalog.load(f, grouping=grouping)
        logger.debug("Loaded %d items from %s", count, path)
    return catalog


class FilterSession:
    """Runs one ``FilterEngine`` against a terminal until confirm or cancel."""

    def __init__(
        self,
        engine: FilterEngine,
        terminal: Terminal,
        renderer: Renderer | None = None,
        keybindings: KeybindingsManager | None = None,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self.engine = engine
        self.terminal = terminal
        self.renderer = renderer or Renderer()
        self.keybindings = keybindings or KeybindingsManager()
        self._clock = clock
        self._done: asyncio.Future[Directive] | None = None

    async def run(self) -> Directive:
        """Return ``"confirm"`` or ``"cancel"`` once the user decides."""
        self._done = asyncio.get_running_loop().create_future()
        try:
            self.terminal.start(self.handle_input, self.handle_paste, self.redraw)
            self.redraw()
            return await self._done
        finally:
            self.terminal.stop()

    def redraw(self) -> None:
        self.terminal.draw(self.renderer.render(self.engine, self.terminal.columns))

    def handle_input(self, data: str) -> None:
        """Handle one complete input sequence."""
        pasted = parse_clipboard_reply(data)
        if pasted is not None:
            self.handle_paste(pasted)
            return

        mouse = parse_mouse(data)
        if mouse is not None:
            self._dispatch(self._handle_mouse(mouse))
            return

        operation, text = self.keybindings.resolve(data)
        if operation == "copy":
            if self.engine.buffer.has_selection:
                self.terminal.copy_to_clipboard(self.engine.buffer.selected_text)
            return
        if operation == "paste":
            # Contents come back as an OSC 52 reply
            self.terminal.request_clipboard("c")
            return
        self._dispatch(self.engine.apply(operation, text))

    def handle_paste(self, text: str) -> None:
        self._dispatch(self.engine.paste(text))

    def _handle_mouse(self, event: MouseEvent) -> Directive:
        engine = self.engine
        on_prompt = event.y == 0

        if event.action == "press" and event.button == 0:
            if on_prompt:
                position = self.renderer.offset_at(engine.buffer, event.x)
                return engine.click(position, self._clock())
            return engine.click_item(event.y - 1)
        if event.action == "press" and event.button == 1:
            self.terminal.request_clipboard("p")
            return "none"
        if event.action == "drag" and event.button == 0:
            if on_prompt:
                return engine.drag(self.renderer.offset_at(engine.buffer, event.x))
            return engine.drag(len(engine.buffer))
        if event.action == "move":
            return engine.hover(None if on_prompt else event.y - 1)
        if event.action == "wheelUp":
            return engine.apply("selectPrev")
        if event.action == "wheelDown":
            return engine.apply("selectNext")
        return "none"

    def _dispatch(self, directive: Directive) -> None:
        if directive in ("confirm", "cancel"):
            if self._done is not None and not self._done.done():
                self._done.set_result(directive)
            return
        if directive != "none":
            self.redraw()
