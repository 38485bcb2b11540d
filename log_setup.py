import logging
import os

import config_paths

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ENV_LOG_LEVEL = "TABFIT_LOG_LEVEL"


def resolve_log_level(cli_level=None, cfg=None) -> str:
    """First valid level of: command line, environment, config, default."""
    env_level = os.environ.get(ENV_LOG_LEVEL)
    cfg_level = (cfg or {}).get("log_level")
    for candidate in (cli_level, env_level, cfg_level):
        if isinstance(candidate, str) and candidate.strip().upper() in config_paths.LOG_LEVELS:
            return candidate.strip().upper()
    return config_paths.LOG_LEVEL_DEFAULT


def configure_logging(level: str = config_paths.LOG_LEVEL_DEFAULT, path=None):
    """Send log records to a file; the terminal belongs to curses."""
    if path is None:
        config_paths.ensure_config_dirs()
        path = config_paths.LOG_PATH
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_tabfit", False):
            root.removeHandler(handler)
            handler.close()
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._tabfit = True
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return handler
