"""Tests for xfilter.stdin_buffer.StdinBuffer."""

from __future__ import annotations

import asyncio

import pytest

from xfilter.stdin_buffer import (
    BRACKETED_PASTE_END,
    BRACKETED_PASTE_START,
    ESC,
    StdinBuffer,
    _extract_complete_sequences,
    _is_complete_sequence,
)


class Collector:
    """Collects emitted data/paste events for assertions."""

    def __init__(self) -> None:
        self.data: list[str] = []
        self.pastes: list[str] = []

    def on_data(self, d: str) -> None:
        self.data.append(d)

    def on_paste(self, d: str) -> None:
        self.pastes.append(d)


def make_buffer(timeout: float = 0.01) -> tuple[StdinBuffer, Collector]:
    buf = StdinBuffer(timeout=timeout)
    col = Collector()
    buf.on_data(col.on_data)
    buf.on_paste(col.on_paste)
    return buf, col


class TestIsCompleteSequence:
    def test_plain_text(self) -> None:
        assert _is_complete_sequence("a") == "not-escape"

    def test_lone_escape(self) -> None:
        assert _is_complete_sequence(ESC) == "incomplete"

    def test_csi(self) -> None:
        assert _is_complete_sequence("\x1b[") == "incomplete"
        assert _is_complete_sequence("\x1b[1;5") == "incomplete"
        assert _is_complete_sequence("\x1b[1;5D") == "complete"

    def test_ss3(self) -> None:
        assert _is_complete_sequence("\x1bO") == "incomplete"
        assert _is_complete_sequence("\x1bOA") == "complete"

    def test_sgr_mouse(self) -> None:
        assert _is_complete_sequence("\x1b[<0;10") == "incomplete"
        assert _is_complete_sequence("\x1b[<0;10;5M") == "complete"

    def test_osc(self) -> None:
        assert _is_complete_sequence("\x1b]52;c;") == "incomplete"
        assert _is_complete_sequence("\x1b]52;c;eA==\x07") == "complete"

    def test_meta_key(self) -> None:
        assert _is_complete_sequence("\x1bb") == "complete"


class TestExtractCompleteSequences:
    def test_splits_text_into_characters(self) -> None:
        assert _extract_complete_sequences("ab") == (["a", "b"], "")

    def test_mixed_text_and_sequences(self) -> None:
        sequences, rest = _extract_complete_sequences("a\x1b[Ab")
        assert sequences == ["a", "\x1b[A", "b"]
        assert rest == ""

    def test_keeps_unfinished_remainder(self) -> None:
        sequences, rest = _extract_complete_sequences("a\x1b[1;")
        assert sequences == ["a"]
        assert rest == "\x1b[1;"


class TestProcess:
    def test_emits_each_sequence(self) -> None:
        buf, col = make_buffer()
        buf.process("x\x1b[D")
        assert col.data == ["x", "\x1b[D"]

    def test_sequence_split_across_reads(self) -> None:
        buf, col = make_buffer()
        buf.process("\x1b[1;")
        buf.process("5C")
        assert col.data == ["\x1b[1;5C"]

    def test_without_loop_remainder_flushes_immediately(self) -> None:
        buf, col = make_buffer()
        buf.process(ESC)
        assert col.data == [ESC]
        assert buf.pending == ""

    def test_bracketed_paste(self) -> None:
        buf, col = make_buffer()
        buf.process(f"a{BRACKETED_PASTE_START}hello\nworld{BRACKETED_PASTE_END}b")
        assert col.data == ["a", "b"]
        assert col.pastes == ["hello\nworld"]

    def test_paste_split_across_reads(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{BRACKETED_PASTE_START}hel")
        assert col.pastes == []
        buf.process(f"lo{BRACKETED_PASTE_END}")
        assert col.pastes == ["hello"]

    def test_clear_drops_paste_state(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{BRACKETED_PASTE_START}partial")
        buf.clear()
        buf.process("z")
        assert col.data == ["z"]
        assert col.pastes == []


class TestTimeoutFlush:
    @pytest.mark.asyncio
    async def test_lone_escape_flushed_after_timeout(self) -> None:
        buf, col = make_buffer(timeout=0.01)
        buf.process(ESC)
        assert col.data == []
        await asyncio.sleep(0.05)
        assert col.data == [ESC]

    @pytest.mark.asyncio
    async def test_completion_cancels_timeout(self) -> None:
        buf, col = make_buffer(timeout=0.01)
        buf.process(ESC)
        buf.process("[A")
        await asyncio.sleep(0.05)
        assert col.data == ["\x1b[A"]

    def test_flush_returns_remainder(self) -> None:
        buf = StdinBuffer()
        assert buf.flush() == []
