"""Abstract input operations, redraw directives and their classification."""

from __future__ import annotations

from typing import Literal

Operation = Literal[
    # Clipboard
    "paste",
    "copy",
    # Session
    "confirm",
    "cancel",
    # Match list
    "selectPrev",
    "selectNext",
    "pageUp",
    "pageDown",
    # History
    "historyPrev",
    "historyNext",
    # Cursor movement
    "cursorLineStart",
    "cursorLineEnd",
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    # Deletion
    "deleteToLineStart",
    "deleteToLineEnd",
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    # Selection
    "selectToLineStart",
    "selectToLineEnd",
    "selectLeft",
    "selectRight",
    "selectWordLeft",
    "selectWordRight",
    # Undo
    "undo",
    "redo",
    # Misc
    "nothing",
    "insert",
]

Directive = Literal[
    "none",        # nothing to redraw
    "drawInput",   # redraw the input field only
    "drawPrompt",  # redraw input field and item list
    "confirm",     # session ends, print the result
    "cancel",      # session ends, print nothing
]

Direction = Literal["next", "previous"]

MOTION_OPERATIONS: frozenset[Operation] = frozenset({
    "cursorLineStart",
    "cursorLineEnd",
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
})

SELECTION_OPERATIONS: frozenset[Operation] = frozenset({
    "selectToLineStart",
    "selectToLineEnd",
    "selectLeft",
    "selectRight",
    "selectWordLeft",
    "selectWordRight",
})

# Each editing operation is its own coalescing class: a run of the same
# operation shares a single undo snapshot. Every paste starts a new one.
EDITING_OPERATIONS: frozenset[Operation] = frozenset({
    "deleteToLineStart",
    "deleteToLineEnd",
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "insert",
    "paste",
})

UNDO_OPERATIONS: frozenset[Operation] = frozenset({"undo", "redo"})


def is_motion(operation: Operation) -> bool:
    return operation in MOTION_OPERATIONS


def is_selection(operation: Operation) -> bool:
    return operation in SELECTION_OPERATIONS


def is_editing(operation: Operation) -> bool:
    return operation in EDITING_OPERATIONS


def is_undo(operation: Operation) -> bool:
    return operation in UNDO_OPERATIONS
