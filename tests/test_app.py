"""Tests for xfilter.app -- item loading and the interactive session."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import Callable

import pytest

from xfilter.app import FilterSession, load_items
from xfilter.config import Config
from xfilter.engine import FilterEngine
from xfilter.utils import strip_ansi

from .virtual_terminal import VirtualTerminal


def mouse(button: int, x: int, y: int, release: bool = False) -> str:
    """SGR mouse report for 0-based cell (x, y)."""
    return f"\x1b[<{button};{x + 1};{y + 1}{'m' if release else 'M'}"


def make_session(
    lines: list[str],
    clock: list[int] | None = None,
    **config: object,
) -> tuple[FilterSession, VirtualTerminal]:
    engine = FilterEngine.from_lines(lines, Config(**config))
    terminal = VirtualTerminal(columns=40)
    times = clock if clock is not None else [0]
    session = FilterSession(engine, terminal, clock=lambda: times[0])
    terminal.start(session.handle_input, session.handle_paste, session.redraw)
    return session, terminal


class TestLoadItems:
    def test_reads_stdin_without_paths(self) -> None:
        catalog = load_items([], stdin=io.StringIO("one\ntwo\n"))
        assert [item.text for item in catalog.items] == ["one", "two"]

    def test_reads_each_file_in_order(self, tmp_path: Path) -> None:
        first = tmp_path / "a.txt"
        second = tmp_path / "b.txt"
        first.write_text("one\n")
        second.write_text("two\nthree\n")
        catalog = load_items([str(first), str(second)])
        assert [item.text for item in catalog.items] == ["one", "two", "three"]

    def test_grouping(self, tmp_path: Path) -> None:
        path = tmp_path / "items.txt"
        path.write_text("Fruit\napple\n\nVeg\nleek\n")
        catalog = load_items([str(path)], grouping=True)
        assert [(item.group.name, item.text) for item in catalog.items] == [
            ("Fruit", "apple"),
            ("Veg", "leek"),
        ]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_items([str(tmp_path / "missing.txt")])


class TestRun:
    @pytest.mark.asyncio
    async def test_confirm_ends_session(self) -> None:
        engine = FilterEngine.from_lines(["alpha", "beta"])
        terminal = VirtualTerminal()
        session = FilterSession(engine, terminal)
        loop = asyncio.get_running_loop()
        loop.call_soon(terminal.send, "b", "\r")
        assert await session.run() == "confirm"
        assert terminal.started
        assert terminal.stopped
        assert engine.text == "b"

    @pytest.mark.asyncio
    async def test_escape_cancels(self) -> None:
        engine = FilterEngine.from_lines(["alpha"])
        terminal = VirtualTerminal()
        session = FilterSession(engine, terminal)
        asyncio.get_running_loop().call_soon(terminal.send, "\x1b")
        assert await session.run() == "cancel"
        assert terminal.stopped

    @pytest.mark.asyncio
    async def test_draws_first_frame_on_start(self) -> None:
        engine = FilterEngine.from_lines(["alpha"])
        terminal = VirtualTerminal()
        session = FilterSession(engine, terminal)
        asyncio.get_running_loop().call_soon(terminal.send, "\x1b")
        await session.run()
        assert strip_ansi(terminal.frames[0][0]).startswith("> ")
        assert strip_ansi(terminal.frames[0][1]) == "alpha"

    @pytest.mark.asyncio
    async def test_terminal_restored_when_start_fails(self) -> None:
        class BrokenTerminal(VirtualTerminal):
            def start(
                self,
                on_input: Callable[[str], None],
                on_paste: Callable[[str], None],
                on_resize: Callable[[], None],
            ) -> None:
                super().start(on_input, on_paste, on_resize)
                raise OSError("cannot watch tty")

        terminal = BrokenTerminal()
        session = FilterSession(FilterEngine.from_lines(["alpha"]), terminal)
        with pytest.raises(OSError):
            await session.run()
        assert terminal.stopped


class TestKeyboard:
    def test_typing_redraws(self) -> None:
        session, terminal = make_session(["alpha", "beta"])
        terminal.send("b")
        assert session.engine.text == "b"
        assert [strip_ansi(line) for line in terminal.last_frame[1:]] == ["beta"]

    def test_unchanged_state_does_not_redraw(self) -> None:
        _, terminal = make_session(["alpha"])
        terminal.send("\x1b[D")
        assert terminal.frames == []

    def test_paste_inserts_first_line(self) -> None:
        session, terminal = make_session(["alpha"])
        terminal.paste("al\nignored")
        assert session.engine.text == "al"

    def test_copy_sends_selection_to_clipboard(self) -> None:
        session, terminal = make_session(["alpha"])
        terminal.send("a", "b", "c", "\x1b[1;2D", "\x1b[1;2D")
        terminal.send("\x03")
        assert terminal.clipboard == ["bc"]
        assert session.engine.text == "abc"

    def test_copy_without_selection_does_nothing(self) -> None:
        _, terminal = make_session(["alpha"])
        terminal.send("a", "\x03")
        assert terminal.clipboard == []

    def test_resize_redraws(self) -> None:
        _, terminal = make_session(["alpha"])
        terminal.resize(20)
        assert len(terminal.frames) == 1

    def test_paste_key_requests_clipboard(self) -> None:
        session, terminal = make_session(["alpha"])
        terminal.send("\x16")
        assert terminal.clipboard_requests == ["c"]
        assert session.engine.text == ""

    def test_clipboard_reply_is_pasted(self) -> None:
        session, terminal = make_session(["alpha"])
        terminal.send("\x1b]52;c;aGk=\x07")
        assert session.engine.text == "hi"
        assert len(terminal.frames) == 1


class TestMouse:
    def test_click_on_prompt_moves_cursor(self) -> None:
        session, terminal = make_session(["alpha"])
        terminal.send("a", "b", "c")
        terminal.send(mouse(0, 3, 0))
        assert session.engine.buffer.cursor == 1

    def test_double_click_selects_word(self) -> None:
        times = [1000]
        session, terminal = make_session(["alpha"], clock=times)
        terminal.send(*"foo bar")
        terminal.send(mouse(0, 3, 0), mouse(0, 3, 0, release=True))
        times[0] = 1100
        terminal.send(mouse(0, 3, 0))
        assert session.engine.buffer.selected_text == "foo"

    def test_drag_on_prompt_extends_selection(self) -> None:
        session, terminal = make_session(["alpha"])
        terminal.send(*"abcd")
        terminal.send(mouse(0, 2, 0))
        terminal.send(mouse(32, 5, 0))
        assert session.engine.buffer.selected_text == "abc"

    def test_drag_below_prompt_selects_to_end(self) -> None:
        session, terminal = make_session(["alpha"])
        terminal.send(*"abcd")
        terminal.send(mouse(0, 3, 0))
        terminal.send(mouse(32, 3, 4))
        assert session.engine.buffer.selected_text == "bcd"

    @pytest.mark.asyncio
    async def test_click_on_item_confirms_it(self) -> None:
        engine = FilterEngine.from_lines(["alpha", "beta"])
        terminal = VirtualTerminal()
        session = FilterSession(engine, terminal)
        asyncio.get_running_loop().call_soon(terminal.send, mouse(0, 1, 2))
        assert await session.run() == "confirm"
        assert engine.output_line() == "beta\n"

    def test_click_below_items_picks_last(self) -> None:
        session, terminal = make_session(["alpha", "beta"])
        terminal.send(mouse(0, 1, 9))
        assert session.engine.selected_item.text == "beta"

    def test_hover_underlines_item(self) -> None:
        _, terminal = make_session(["alpha", "beta"])
        terminal.send(mouse(35, 1, 1))
        assert terminal.last_frame[1].startswith("\x1b[4m")

    def test_wheel_moves_selection(self) -> None:
        session, terminal = make_session(["alpha", "beta"])
        terminal.send(mouse(65, 0, 1))
        terminal.send(mouse(65, 0, 1))
        assert session.engine.selected_item.text == "beta"
        terminal.send(mouse(64, 0, 1))
        assert session.engine.selected_item.text == "alpha"

    def test_middle_click_pastes_primary_selection(self) -> None:
        session, terminal = make_session(["alpha"])
        terminal.send(mouse(1, 3, 0))
        assert terminal.clipboard_requests == ["p"]
        terminal.send("\x1b]52;p;aGk=\x1b\\")
        assert session.engine.text == "hi"
