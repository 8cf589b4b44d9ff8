"""Directory listing for filename completion."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def completion_prefix(text: str) -> tuple[str, str]:
    """Return ``(directory, prefix)`` implied by the typed *text*.

    The directory is everything up to and including the last ``/``; names
    listed there become items ``prefix + name``. Text without a slash lists
    the working directory with no prefix.
    """
    cut = text.rfind("/")
    if cut < 0:
        return ".", ""
    prefix = text[: cut + 1]
    return prefix, prefix


def list_directory(path: str) -> list[str]:
    """Sorted entry names of *path*, dotfiles excluded. Errors give []."""
    try:
        with os.scandir(path) as entries:
            names = [entry.name for entry in entries if not entry.name.startswith(".")]
    except OSError as e:
        logger.debug("Cannot list %s: %s", path, e)
        return []
    return sorted(names)
