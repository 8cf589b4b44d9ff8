"""Key bindings: key identifiers to filter operations."""

from __future__ import annotations

from xfilter.keys import KeyId, parse_key
from xfilter.operations import Operation

KeybindingsConfig = dict[Operation, KeyId | list[KeyId]]

DEFAULT_KEYBINDINGS: dict[Operation, KeyId | list[KeyId]] = {
    # Session
    "cancel": "escape",
    "confirm": ["enter", "ctrl+m", "ctrl+j"],
    # Match list
    "selectPrev": ["shift+tab", "ctrl+p"],
    "selectNext": ["tab", "ctrl+n", "ctrl+i"],
    "pageUp": "pageUp",
    "pageDown": "pageDown",
    # History
    "historyPrev": "up",
    "historyNext": "down",
    # Cursor movement
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorWordLeft": ["ctrl+left", "alt+left", "alt+b"],
    "cursorWordRight": ["ctrl+right", "alt+right", "alt+f"],
    # Deletion
    "deleteCharBackward": ["backspace", "ctrl+h"],
    "deleteCharForward": ["delete", "ctrl+d"],
    "deleteWordBackward": ["ctrl+w", "alt+backspace"],
    "deleteToLineStart": "ctrl+u",
    "deleteToLineEnd": "ctrl+k",
    # Selection
    "selectToLineStart": ["shift+home", "ctrl+shift+a"],
    "selectToLineEnd": ["shift+end", "ctrl+shift+e"],
    "selectLeft": ["shift+left", "ctrl+shift+b"],
    "selectRight": ["shift+right", "ctrl+shift+f"],
    "selectWordLeft": "ctrl+shift+left",
    "selectWordRight": "ctrl+shift+right",
    # Undo
    "undo": "ctrl+z",
    "redo": ["ctrl+shift+z", "ctrl+y"],
    # Clipboard
    "copy": "ctrl+c",
    "paste": "ctrl+v",
}


class KeybindingsManager:
    """Resolves raw input to operations.

    *config* replaces the keys of the operations it names; a key it claims
    is taken away from whichever operation had it by default. Key
    identifiers bound to nothing resolve to ``"nothing"`` when they name a
    modified key, and to ``"insert"`` when they are printable text.
    """

    def __init__(self, config: KeybindingsConfig | None = None) -> None:
        self._key_to_operation: dict[KeyId, Operation] = {}
        self._build_map(config or {})

    def _build_map(self, config: KeybindingsConfig) -> None:
        for operation, keys in DEFAULT_KEYBINDINGS.items():
            if operation in config:
                continue
            for key in keys if isinstance(keys, list) else [keys]:
                self._key_to_operation[key] = operation

        # User config last so its keys win
        for operation, keys in config.items():
            for key in keys if isinstance(keys, list) else [keys]:
                self._key_to_operation[key] = operation

    def resolve(self, data: str) -> tuple[Operation, str]:
        """Map one input sequence to ``(operation, text)``.

        *text* is only non-empty for ``"insert"``.
        """
        key = parse_key(data)
        if key is None:
            return "nothing", ""

        operation = self._key_to_operation.get(key)
        if operation is not None:
            return operation, ""

        if key == data and data.isprintable():
            return "insert", data
        return "nothing", ""
