import json
import logging
import os

logger = logging.getLogger(__name__)

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tabfit")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "tabfit.log")

# default settings
SEPARATOR_DEFAULT = " │ "
FILL_WIDTH_DEFAULT = True
COMPACT_MONEY_DEFAULT = False
REMEMBER_VIEW_STATE_DEFAULT = True
MONEY_COLUMNS_DEFAULT = ["amount", "cost", "price", "total", "budget"]
LOG_LEVEL_DEFAULT = "WARNING"

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def default_config():
    return {
        "separator": SEPARATOR_DEFAULT,
        "fill_width": FILL_WIDTH_DEFAULT,
        "compact_money": COMPACT_MONEY_DEFAULT,
        "remember_view_state": REMEMBER_VIEW_STATE_DEFAULT,
        "money_columns": list(MONEY_COLUMNS_DEFAULT),
        "log_level": LOG_LEVEL_DEFAULT,
    }


def load_config():
    cfg = default_config()

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_JSON, exc)
        return cfg

    if not isinstance(data, dict):
        logger.warning("ignoring config %s: expected an object", CONFIG_JSON)
        return cfg

    sep = data.get("separator")
    if isinstance(sep, str) and sep:
        cfg["separator"] = sep

    for key in ("fill_width", "compact_money", "remember_view_state"):
        value = data.get(key)
        if isinstance(value, bool):
            cfg[key] = value

    money = data.get("money_columns")
    if isinstance(money, list) and all(isinstance(item, str) for item in money):
        cfg["money_columns"] = [item for item in money if item.strip()]

    level = data.get("log_level")
    if isinstance(level, str) and level.strip().upper() in LOG_LEVELS:
        cfg["log_level"] = level.strip().upper()

    return cfg
