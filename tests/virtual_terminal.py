"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

``VirtualTerminal`` satisfies ``xfilter.terminal.Terminal`` without any real
I/O. Frames drawn and clipboard requests are recorded for assertions, and
``send`` / ``paste`` feed input to the registered handlers.
"""

from __future__ import annotations

from typing import Callable


class VirtualTerminal:
    """In-memory terminal that records every frame for test inspection."""

    def __init__(self, columns: int = 80) -> None:
        self._columns = columns
        self.frames: list[list[str]] = []
        self.writes: list[str] = []
        self.clipboard: list[str] = []
        self.clipboard_requests: list[str] = []
        self.started = False
        self.stopped = False
        self._input_handler: Callable[[str], None] | None = None
        self._paste_handler: Callable[[str], None] | None = None
        self._resize_handler: Callable[[], None] | None = None

    # -- Terminal protocol --------------------------------------------------

    @property
    def columns(self) -> int:
        return self._columns

    def start(
        self,
        on_input: Callable[[str], None],
        on_paste: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        self._input_handler = on_input
        self._paste_handler = on_paste
        self._resize_handler = on_resize
        self.started = True

    def stop(self) -> None:
        self.stopped = True
        self._input_handler = None
        self._paste_handler = None
        self._resize_handler = None

    def write(self, data: str) -> None:
        self.writes.append(data)

    def draw(self, lines: list[str]) -> None:
        self.frames.append(list(lines))

    def copy_to_clipboard(self, text: str) -> None:
        self.clipboard.append(text)

    def request_clipboard(self, selection: str) -> None:
        self.clipboard_requests.append(selection)

    # -- test helpers -------------------------------------------------------

    def send(self, *sequences: str) -> None:
        """Deliver complete input sequences, one handler call each."""
        for data in sequences:
            if self._input_handler is not None:
                self._input_handler(data)

    def paste(self, text: str) -> None:
        if self._paste_handler is not None:
            self._paste_handler(text)

    def resize(self, columns: int) -> None:
        self._columns = columns
        if self._resize_handler is not None:
            self._resize_handler()

    @property
    def last_frame(self) -> list[str]:
        return self.frames[-1] if self.frames else []
