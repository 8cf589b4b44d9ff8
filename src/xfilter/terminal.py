"""Raw-mode access to the controlling terminal.

The filter draws on ``/dev/tty`` rather than stdout, so its standard output
carries nothing but the chosen line and it can sit in the middle of a
pipeline. ``TtyTerminal`` switches the tty to raw mode, enables bracketed
paste and SGR mouse reporting on the alternate screen, and feeds input read
through the asyncio event loop into a ``StdinBuffer``.
"""

from __future__ import annotations

import asyncio
import base64
import codecs
import logging
import os
import signal
import termios
import tty
from typing import Callable, Protocol

from xfilter.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

TTY_PATH = "/dev/tty"

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ALT_SCREEN_ENABLE = "\x1b[?1049h"
_ALT_SCREEN_DISABLE = "\x1b[?1049l"
_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"
# Button presses, motion (1003) and SGR extended coordinates
_MOUSE_ENABLE = "\x1b[?1000h\x1b[?1003h\x1b[?1006h"
_MOUSE_DISABLE = "\x1b[?1006l\x1b[?1003l\x1b[?1000l"

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_HOME = "\x1b[H"
_CLEAR_TO_EOL = "\x1b[K"
_CLEAR_FROM_CURSOR = "\x1b[0J"

_CLIPBOARD_FMT = "\x1b]52;c;{}\x07"
_CLIPBOARD_QUERY_FMT = "\x1b]52;{};?\x07"


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(
        self,
        on_input: Callable[[str], None],
        on_paste: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    def draw(self, lines: list[str]) -> None: ...

    def copy_to_clipboard(self, text: str) -> None: ...

    def request_clipboard(self, selection: str) -> None: ...


class TtyTerminal:
    """Concrete terminal backed by a file descriptor on ``/dev/tty``.

    Opening the tty raises ``OSError`` when the process has no controlling
    terminal.
    """

    def __init__(self, path: str = TTY_PATH) -> None:
        self._fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
        self._original_termios: list | None = None
        self._stdin_buffer: StdinBuffer | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._reader_active = False
        self._resize_handler: Callable[[], None] | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._fd).columns
        except OSError:
            return 80

    # -- start / stop -------------------------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_paste: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        """Enter raw mode and begin reading the tty on the running loop."""
        self._resize_handler = on_resize

        self._original_termios = termios.tcgetattr(self._fd)
        tty.setraw(self._fd)

        self.write(_ALT_SCREEN_ENABLE + _HIDE_CURSOR + _BRACKETED_PASTE_ENABLE + _MOUSE_ENABLE)

        self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._on_sigwinch)

        self._stdin_buffer = StdinBuffer(timeout=0.01)
        self._stdin_buffer.on_data(on_input)
        self._stdin_buffer.on_paste(on_paste)

        loop = asyncio.get_running_loop()
        loop.add_reader(self._fd, self._on_readable)
        self._reader_active = True

    def stop(self) -> None:
        """Restore terminal state and close the tty."""
        if self._reader_active:
            try:
                asyncio.get_running_loop().remove_reader(self._fd)
            except RuntimeError:
                pass
            self._reader_active = False

        if self._stdin_buffer is not None:
            self._stdin_buffer.clear()
            self._stdin_buffer = None

        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        if self._original_termios is not None:
            self.write(_MOUSE_DISABLE + _BRACKETED_PASTE_DISABLE + _SHOW_CURSOR + _ALT_SCREEN_DISABLE)
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None

        self._resize_handler = None
        if self._fd >= 0:
            os.close(self._fd)
            self._fd = -1

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        view = memoryview(data.encode("utf-8"))
        while view:
            written = os.write(self._fd, view)
            view = view[written:]

    def draw(self, lines: list[str]) -> None:
        """Repaint the screen from the top with *lines*."""
        body = "\r\n".join(f"{line}{_CLEAR_TO_EOL}" for line in lines)
        self.write(_HOME + body + _CLEAR_FROM_CURSOR)

    def copy_to_clipboard(self, text: str) -> None:
        """Hand *text* to the terminal's clipboard (OSC 52)."""
        payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
        self.write(_CLIPBOARD_FMT.format(payload))

    def request_clipboard(self, selection: str) -> None:
        """Ask the terminal for the contents of *selection* (``"c"`` clipboard,
        ``"p"`` primary). The reply arrives as input.
        """
        self.write(_CLIPBOARD_QUERY_FMT.format(selection))

    # -- private ------------------------------------------------------------

    def _on_readable(self) -> None:
        try:
            raw = os.read(self._fd, 4096)
        except OSError as e:
            logger.debug("tty read failed: %s", e)
            return
        if raw and self._stdin_buffer is not None:
            self._stdin_buffer.process(self._decoder.decode(raw))

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        if self._resize_handler is not None:
            self._resize_handler()
