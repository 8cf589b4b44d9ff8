"""Display-width helpers for rendering on a character-cell terminal."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator

import grapheme
import wcwidth as _wcwidth

# SGR and erase sequences emitted by the renderer
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    cp = ord(g[0])
    if len(g) == 1:
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # Emoji presentation, ZWJ sequences, skin tones and flags are double width
    for ch in g:
        code = ord(ch)
        if code in (0xFE0F, 0x200D) or 0x1F3FB <= code <= 0x1F3FF or 0x1F1E6 <= code <= 0x1F1FF:
            return 2
    if cp >= 0x1F000 or 0x2600 <= cp <= 0x27BF:
        return 2

    if unicodedata.category(g[0]) in ("Mn", "Mc", "Me", "Cf"):
        return 0
    return max(_wcwidth.wcwidth(g[0]), 0)


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def visible_width(text: str) -> int:
    """Visible width of *text* in columns, ignoring escape sequences."""
    if not text:
        return 0

    stripped = strip_ansi(text)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


def iter_cells(text: str) -> Iterator[tuple[int, str, int]]:
    """Yield ``(char_index, grapheme, width)`` for each cluster of plain *text*."""
    index = 0
    for g in grapheme.graphemes(text):
        yield index, g, grapheme_width(g)
        index += len(g)


def take_columns(text: str, max_cols: int) -> str:
    """Longest prefix of plain *text* that fits in *max_cols* columns."""
    cols = 0
    for index, g, width in iter_cells(text):
        if cols + width > max_cols:
            return text[:index]
        cols += width
    return text


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "...",
    pad: bool = False,
) -> str:
    """Truncate plain *text* to fit within *max_width* visible columns.

    If the text is wider than *max_width*, it is cut at a grapheme boundary
    and *ellipsis* is appended (the ellipsis counts towards the width). If
    *pad* is ``True``, the result is right-padded to exactly *max_width*.
    """
    if max_width <= 0:
        return ""

    text_width = visible_width(text)
    if text_width <= max_width:
        return text + " " * (max_width - text_width) if pad else text

    target_width = max_width - visible_width(ellipsis)
    if target_width <= 0:
        return take_columns(ellipsis, max_width)

    result = take_columns(text, target_width) + ellipsis
    if pad:
        result += " " * (max_width - visible_width(result))
    return result


def column_to_index(text: str, column: int) -> int:
    """Character index in *text* of the cluster drawn at *column*.

    Columns past the end of the text map to ``len(text)``.
    """
    if column <= 0:
        return 0
    cols = 0
    for index, _g, width in iter_cells(text):
        if cols + width > column:
            return index
        cols += width
    return len(text)
