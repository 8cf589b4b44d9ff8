"""CLI entry point for xfilter.

Reads items from the named files (or standard input), runs the interactive
filter on the controlling terminal, and prints the chosen line on standard
output.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Callable, Sequence

from xfilter.app import FilterSession, load_items
from xfilter.config import Config, ConfigError, load_config
from xfilter.engine import FilterEngine
from xfilter.history import load_history, save_history
from xfilter.terminal import Terminal, TtyTerminal

logger = logging.getLogger(__name__)

EXIT_CONFIRM = 0
EXIT_CANCEL = 1
EXIT_ERROR = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="xfilter",
        description="Interactive filter: pick one line from the input",
        add_help=False,
    )
    parser.add_argument("files", nargs="*", help="Item files (default: standard input)")
    parser.add_argument("-f", dest="file_completion", action="store_true", default=None,
                        help="Complete filenames from the directory being typed")
    parser.add_argument("-g", dest="grouping", action="store_true", default=None,
                        help="Group items separated by empty lines")
    parser.add_argument("-h", dest="history_file", metavar="FILE", help="History file")
    parser.add_argument("-i", dest="case_insensitive", action="store_true", default=None,
                        help="Case-insensitive matching")
    parser.add_argument("-p", dest="password", action="store_true", default=None,
                        help="Password mode: do not echo the input")
    parser.add_argument("-n", dest="items", type=int, metavar="ITEMS",
                        help="Number of items to show")
    parser.add_argument("-c", "--config", dest="config", metavar="FILE",
                        help="Settings file (default: $XFILTER_CONFIG or ~/.config/xfilter/settings.json)")
    parser.add_argument("--log-level", default="warning",
                        choices=["debug", "info", "warning", "error"])
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Settings file first, then command-line flags on top."""
    return load_config(args.config).with_overrides(
        items=args.items,
        history_file=args.history_file,
        case_insensitive=args.case_insensitive,
        file_completion=args.file_completion,
        grouping=args.grouping,
        password=args.password,
    ).validate()


def run(
    args: argparse.Namespace,
    terminal_factory: Callable[[], Terminal] = TtyTerminal,
) -> int:
    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"xfilter: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        catalog = load_items(args.files, grouping=config.grouping)
    except OSError as e:
        print(f"xfilter: {e}", file=sys.stderr)
        return EXIT_ERROR

    history = load_history(config.history_file, config.history_size)
    engine = FilterEngine(config, catalog, history)

    try:
        terminal = terminal_factory()
    except OSError as e:
        print(f"xfilter: cannot open terminal: {e}", file=sys.stderr)
        return EXIT_ERROR

    directive = asyncio.run(FilterSession(engine, terminal).run())
    if directive != "confirm":
        return EXIT_CANCEL

    save_history(history)
    sys.stdout.write(engine.output_line())
    sys.stdout.flush()
    return EXIT_CONFIRM


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    sys.exit(run(args))


if __name__ == "__main__":
    main()
