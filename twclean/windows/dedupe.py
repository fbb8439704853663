"""
Window Deduplicator — Drop repeated windows, first occurrence wins.
"""

from typing import Any

from twclean.windows.timeparse import window_field


def get_window_dedupe_key(window: Any) -> str:
    """``"{name|label|category}|{start}|{end}"`` with empty strings for gaps."""
    if not isinstance(window, dict) and not hasattr(window, "__dict__"):
        window = {"start": window}
    name = window_field(window, "name", "label", "category")
    start = window_field(window, "start")
    end = window_field(window, "end")
    return "|".join("" if v is None else str(v) for v in (name, start, end))


def dedupe_time_windows(windows: Any) -> list:
    """Order-preserving dedupe. Anything that isn't a list gives []."""
    if not isinstance(windows, list):
        return []

    seen: set[str] = set()
    result = []
    for window in windows:
        key = get_window_dedupe_key(window)
        if key in seen:
            continue
        seen.add(key)
        result.append(window)
    return result
