"""Terminal input decoding.

Turns one complete input sequence (as split by ``StdinBuffer``) into a key
identifier such as ``"ctrl+a"``, ``"shift+left"`` or ``"a"``, or into a
``MouseEvent`` for SGR mouse reports. Clipboard contents the terminal sends
back for an OSC 52 query are decoded by ``parse_clipboard_reply``.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Literal

KeyId = str

# xterm modifier parameter is 1 + bitmask
MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

LOCK_MASK = 64 + 128

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[Z": "shift+tab",
}

# Final letter of ``CSI 1;<mod> <letter>`` -> key name
_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# Number of ``CSI <n>;<mod> ~`` -> key name
_CSI_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
}

_CSI_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)([ABCDHF])$")
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)~$")
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")
_CSI_U_RE = re.compile(r"^\x1b\[(\d+)(?::\d*)*(?:;(\d+))?u$")
_SGR_MOUSE_RE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])$")
# OSC 52 reply: ESC ] 52 ; selection ; base64 (BEL | ST)
_CLIPBOARD_REPLY_RE = re.compile(r"^\x1b\]52;[a-z0-9]*;([A-Za-z0-9+/=]*)(?:\x07|\x1b\\)$")

# Named codepoints reported by modifyOtherKeys / CSI u
CODEPOINTS: dict[int, str] = {
    27: "escape",
    9: "tab",
    13: "enter",
    32: "space",
    127: "backspace",
}


def _modifier_prefix(modifier: int) -> str:
    mod = (modifier - 1) & ~LOCK_MASK
    prefix = ""
    if mod & MODIFIERS["ctrl"]:
        prefix += "ctrl+"
    if mod & MODIFIERS["shift"]:
        prefix += "shift+"
    if mod & MODIFIERS["alt"]:
        prefix += "alt+"
    return prefix


def _codepoint_key(codepoint: int, modifier: int) -> str | None:
    prefix = _modifier_prefix(modifier)
    name = CODEPOINTS.get(codepoint)
    if name is not None:
        return prefix + name
    if codepoint > 0:
        ch = chr(codepoint)
        if ch.isprintable():
            return prefix + ch.lower()
    return None


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Parse one input sequence and return its key identifier, or ``None``.

    Printable text comes back unchanged; callers treat identifiers that
    are not bound to anything as text to insert.
    """
    if not data:
        return None

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    # --- Modified legacy sequences: CSI 1;mod X and CSI n;mod ~ ---
    match = _CSI_LETTER_RE.match(data)
    if match:
        return _modifier_prefix(int(match.group(1))) + _CSI_LETTER_KEYS[match.group(2)]

    match = _MODIFY_OTHER_KEYS_RE.match(data)
    if match:
        return _codepoint_key(int(match.group(2)), int(match.group(1)))

    match = _CSI_TILDE_RE.match(data)
    if match:
        name = _CSI_TILDE_KEYS.get(int(match.group(1)))
        if name is None:
            return None
        return _modifier_prefix(int(match.group(2))) + name

    match = _CSI_U_RE.match(data)
    if match:
        return _codepoint_key(int(match.group(1)), int(match.group(2) or 1))

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == "\x7f" or data == "\x08":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\x7f" or ch == "\x08":
            return "alt+backspace"
        if 1 <= ord(ch) <= 26:
            return "ctrl+alt+" + chr(ord(ch) + ord("a") - 1)
        if ch.isupper():
            return "shift+alt+" + ch.lower()
        if ch.isprintable():
            return "alt+" + ch

    if data.startswith("\x1b"):
        return None

    # Printable text, possibly several characters typed in one read
    if data.isprintable():
        return data

    return None


MouseAction = Literal["press", "release", "drag", "move", "wheelUp", "wheelDown"]


@dataclass(frozen=True)
class MouseEvent:
    """A decoded SGR mouse report. ``x`` and ``y`` are 0-based cells."""

    action: MouseAction
    button: int
    x: int
    y: int


def parse_mouse(data: str) -> MouseEvent | None:
    """Decode an SGR (``CSI < b;x;y M/m``) mouse report."""
    match = _SGR_MOUSE_RE.match(data)
    if match is None:
        return None

    code = int(match.group(1))
    x = int(match.group(2)) - 1
    y = int(match.group(3)) - 1
    button = code & 3

    action: MouseAction
    if code & 64:
        action = "wheelUp" if button == 0 else "wheelDown"
    elif code & 32:
        # Motion with no button held is reported as button 3
        action = "move" if button == 3 else "drag"
    elif match.group(4) == "m":
        action = "release"
    else:
        action = "press"
    return MouseEvent(action=action, button=button, x=x, y=y)


def parse_clipboard_reply(data: str) -> str | None:
    """Decode the text of an OSC 52 clipboard reply, or None if *data* is not one."""
    match = _CLIPBOARD_REPLY_RE.match(data)
    if match is None:
        return None
    try:
        return base64.b64decode(match.group(1), validate=True).decode("utf-8", errors="replace")
    except binascii.Error:
        return None
