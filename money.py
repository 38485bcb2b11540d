import re

from table_model import Cell, CellKind

_MONEY_RE = re.compile(r"^(-)?\$?(-)?([0-9][0-9,]*)?(?:\.([0-9]{1,2}))?$")


def parse_cents(text):
    """``"$1,234.5"`` -> ``123450``; None when the text is not an amount."""
    if text is None:
        return None
    s = str(text).strip().replace(" ", "")
    if not s:
        return None
    m = _MONEY_RE.match(s)
    if not m or (m.group(3) is None and m.group(4) is None):
        return None
    if m.group(1) and m.group(2):
        return None
    whole = (m.group(3) or "0").replace(",", "")
    if not whole:
        return None
    frac = (m.group(4) or "").ljust(2, "0")
    cents = int(whole) * 100 + int(frac or "0")
    return -cents if (m.group(1) or m.group(2)) else cents


def format_cents(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    return f"{sign}${cents // 100:,}.{cents % 100:02d}"


def format_compact_cents(cents: int) -> str:
    """Abbreviated amount: ``$950.00``, ``$1.2k``, ``$45k``, ``$1.3M``."""
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    dollars = cents / 100.0
    if dollars < 1000:
        return f"{sign}${cents // 100:,}.{cents % 100:02d}"
    for suffix, scale in (("T", 1e12), ("B", 1e9), ("M", 1e6), ("k", 1e3)):
        if dollars >= scale:
            value = dollars / scale
            text = f"{value:.1f}" if value < 10 else f"{value:.0f}"
            if text.endswith(".0"):
                text = text[:-2]
            return f"{sign}${text}{suffix}"
    return f"{sign}${dollars:.0f}"


def compact_money_value(value):
    if value is None:
        return value
    stripped = value.strip()
    if not stripped:
        return value
    cents = parse_cents(stripped)
    if cents is None:
        return value
    return format_compact_cents(cents)


def compact_money_cells(rows) -> list:
    """Display copy with money cells abbreviated; the originals keep full precision for sorting."""
    out = []
    for row in rows:
        transformed = []
        for c in row:
            if c.kind == CellKind.MONEY:
                transformed.append(Cell(compact_money_value(c.value), c.kind, c.link_id))
            else:
                transformed.append(c)
        out.append(transformed)
    return out
