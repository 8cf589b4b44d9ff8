"""xfilter: interactive line filter with an editable, undoable input field."""

__version__ = "0.1.0"

# Item catalog
from xfilter.catalog import Group, Item, ItemCatalog, parse_item_line

# Configuration
from xfilter.config import Config, ConfigError, load_config

# Engine
from xfilter.engine import FilterEngine

# History
from xfilter.history import CommandHistory, load_history, save_history

# Matching
from xfilter.matching import MatchChain, filter_items

# Operations and redraw directives
from xfilter.operations import Direction, Directive, Operation

# Editing primitives
from xfilter.text_buffer import TextBuffer
from xfilter.undo_history import UndoHistory
from xfilter.view_window import ViewWindow

__all__ = [
    # Item catalog
    "Group",
    "Item",
    "ItemCatalog",
    "parse_item_line",
    # Configuration
    "Config",
    "ConfigError",
    "load_config",
    # Engine
    "FilterEngine",
    # History
    "CommandHistory",
    "load_history",
    "save_history",
    # Matching
    "MatchChain",
    "filter_items",
    # Operations
    "Direction",
    "Directive",
    "Operation",
    # Editing primitives
    "TextBuffer",
    "UndoHistory",
    "ViewWindow",
]
