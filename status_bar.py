import os
import time

from column_widths import display_width, truncate


def render_status(context, width):
    """
    context keys: status_msg, status_until, mode, file_path, sheet, sheet_count,
                  row_cursor, total_rows, sort_summary, filter, compact,
                  hidden_badges
    """
    text = ""
    now = time.time()
    if context.get('status_msg') and now < context.get('status_until', 0):
        text = f" {context['status_msg']}"
    else:
        mode = context.get('mode', 'TABLE')
        fname = context.get('file_path') or ''
        if fname:
            fname = os.path.basename(fname)
        parts = [mode]
        if fname:
            parts.append(fname)
        sheet = context.get('sheet')
        if sheet and context.get('sheet_count', 1) > 1:
            parts.append(f"[{sheet}]")
        total_rows = context.get('total_rows', 0)
        row = min(context.get('row_cursor', 0) + 1, total_rows)
        parts.append(f"row {row}/{total_rows}")
        if context.get('sort_summary'):
            parts.append(f"sort {context['sort_summary']}")
        if context.get('filter'):
            parts.append(context['filter'])
        if context.get('compact'):
            parts.append("$k")
        text = " " + " | ".join(parts)
        badges = context.get('hidden_badges')
        if badges:
            text = f"{text} | {badges}"

    text = truncate(text, width)
    return text + " " * max(0, width - display_width(text))
