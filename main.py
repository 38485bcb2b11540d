import sys
import os
import curses
import logging

from file_type_handler import FileTypeHandler
from default_df_initializer import DefaultDfInitializer
from config_paths import load_config
from log_setup import configure_logging, resolve_log_level

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator
from app_state import AppState

from _version import __version__

logger = logging.getLogger(__name__)

USAGE = (
    "tabfit - adaptive terminal table viewer\n\n"
    "Usage:\n"
    "  tabfit [path]              open a .csv, .tsv, .json, .parquet or .xlsx file\n"
    "  tabfit --log-level LEVEL   DEBUG, INFO, WARNING, ERROR or CRITICAL\n"
    "  tabfit -v\n"
    "  tabfit -h\n"
)


class UsageError(Exception):
    pass


def parse_args(args):
    """``(action, path, log_level)``; action is one of ``run``, ``version``, ``help``."""
    path = None
    log_level = None
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("-v", "-V", "--version"):
            return "version", None, None
        if arg in ("-h", "--help"):
            return "help", None, None
        if arg == "--log-level" or arg.startswith("--log-level="):
            if "=" in arg:
                value = arg.split("=", 1)[1]
            else:
                i += 1
                if i >= len(args):
                    raise UsageError("--log-level needs a value")
                value = args[i]
            log_level = value
        elif arg.startswith("-"):
            raise UsageError(f"unknown option: {arg}")
        elif path is None:
            path = arg
        else:
            raise UsageError("only one path may be given")
        i += 1
    return "run", path, log_level


def main():
    try:
        action, path, cli_level = parse_args(sys.argv[1:])
    except UsageError as e:
        print(f"tabfit: {e}\n\n{USAGE}", file=sys.stderr)
        sys.exit(2)

    if action == "version":
        print(__version__)
        return

    if action == "help":
        print(USAGE)
        return

    cfg = load_config()
    configure_logging(resolve_log_level(cli_level, cfg))

    handler = FileTypeHandler(path) if path else None

    def load_sheets():
        if handler:
            return handler.load()
        return {"demo": DefaultDfInitializer().create()}

    sheets = load_sheets()
    logger.info("loaded %s sheet(s) from %s", len(sheets), path or "demo data")
    state = AppState(sheets, path, cfg)

    def curses_main(stdscr):
        Orchestrator(stdscr, state, loader=load_sheets if handler else None).run()

    curses.wrapper(curses_main)


if __name__ == "__main__":
    main()
