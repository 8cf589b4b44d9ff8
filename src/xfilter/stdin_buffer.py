"""Split raw terminal input into complete key sequences.

Reads from the tty arrive in arbitrary chunks: an escape sequence may be cut
in half, and a paste arrives as one long burst. ``StdinBuffer`` reassembles
sequences, emits each one separately, and reports bracketed pastes as a
single paste event.
"""

from __future__ import annotations

import asyncio
import re
from typing import Callable, Literal

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

SequenceStatus = Literal["complete", "incomplete", "not-escape"]

_SGR_MOUSE_PAYLOAD_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> SequenceStatus:
    """Classify *data* as a complete escape sequence, a prefix of one, or text."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    introducer = data[1]

    # CSI: ESC [ params final
    if introducer == "[":
        if data.startswith(f"{ESC}[M"):
            # X10 mouse: three raw bytes follow
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # OSC: ESC ] ... BEL or ST
    if introducer == "]":
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    # SS3: ESC O letter
    if introducer == "O":
        return "complete" if len(data) >= 3 else "incomplete"

    # Meta key: ESC followed by one character
    return "complete"


def _is_complete_csi_sequence(data: str) -> SequenceStatus:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    last_char = payload[-1]
    if not 0x40 <= ord(last_char) <= 0x7E:
        return "incomplete"

    if payload.startswith("<"):
        # SGR mouse reports only end at M or m
        return "complete" if _SGR_MOUSE_PAYLOAD_RE.match(payload) else "incomplete"
    return "complete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences.

    Returns (sequences, remainder) where the remainder is an unfinished
    escape sequence to be completed by the next read.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        for seq_end in range(1, len(remaining) + 1):
            candidate = remaining[:seq_end]
            if _is_complete_sequence(candidate) == "complete":
                sequences.append(candidate)
                pos += seq_end
                break
        else:
            return sequences, remaining

    return sequences, ""


class StdinBuffer:
    """Buffers tty input and emits complete sequences.

    A lone ``ESC`` cannot be told apart from the start of a sequence, so an
    unfinished remainder is flushed as-is once *timeout* seconds pass with no
    further input.
    """

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer: str = ""
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._timeout: float = timeout
        self._paste_mode: bool = False
        self._paste_buffer: str = ""

        self._on_data: Callable[[str], None] | None = None
        self._on_paste: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set callback for complete sequences."""
        self._on_data = callback

    def on_paste(self, callback: Callable[[str], None]) -> None:
        """Set callback for paste content."""
        self._on_paste = callback

    def _emit_data(self, data: str) -> None:
        if self._on_data:
            self._on_data(data)

    def _emit_paste(self, data: str) -> None:
        if self._on_paste:
            self._on_paste(data)

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def process(self, data: str) -> None:
        """Feed input data into the buffer."""
        self._cancel_timeout()

        if self._paste_mode:
            self._paste_buffer += data
            self._finish_paste()
            return

        self._buffer += data

        start_index = self._buffer.find(BRACKETED_PASTE_START)
        if start_index != -1:
            sequences, _ = _extract_complete_sequences(self._buffer[:start_index])
            for sequence in sequences:
                self._emit_data(sequence)

            self._paste_mode = True
            self._paste_buffer = self._buffer[start_index + len(BRACKETED_PASTE_START) :]
            self._buffer = ""
            self._finish_paste()
            return

        sequences, self._buffer = _extract_complete_sequences(self._buffer)
        for sequence in sequences:
            self._emit_data(sequence)

        if self._buffer:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # No event loop - flush immediately
                for sequence in self.flush():
                    self._emit_data(sequence)
            else:
                self._timeout_handle = loop.call_later(self._timeout, self._flush_timeout)

    def _finish_paste(self) -> None:
        end_index = self._paste_buffer.find(BRACKETED_PASTE_END)
        if end_index == -1:
            return

        pasted_content = self._paste_buffer[:end_index]
        remaining = self._paste_buffer[end_index + len(BRACKETED_PASTE_END) :]
        self._paste_mode = False
        self._paste_buffer = ""

        self._emit_paste(pasted_content)
        if remaining:
            self.process(remaining)

    def _flush_timeout(self) -> None:
        self._timeout_handle = None
        for sequence in self.flush():
            self._emit_data(sequence)

    def flush(self) -> list[str]:
        """Give up waiting and return the buffered remainder."""
        self._cancel_timeout()
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._cancel_timeout()
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer
