"""Windows — Parse, normalize, dedupe, build and merge time windows."""

from twclean.windows.builder import build_time_windows
from twclean.windows.dedupe import dedupe_time_windows, get_window_dedupe_key
from twclean.windows.mapper import map_ai_windows_to_engine_windows, validate_ai_windows
from twclean.windows.normalize import normalize_time_window
from twclean.windows.timeparse import (
    build_window_string,
    format_time,
    format_time_range,
    get_window_label,
    is_numeric_slot,
    parse_time_string,
    parse_time_value,
    slot_to_time_range,
)

__all__ = [
    "build_time_windows",
    "build_window_string",
    "dedupe_time_windows",
    "format_time",
    "format_time_range",
    "get_window_dedupe_key",
    "get_window_label",
    "is_numeric_slot",
    "map_ai_windows_to_engine_windows",
    "normalize_time_window",
    "parse_time_string",
    "parse_time_value",
    "slot_to_time_range",
    "validate_ai_windows",
]
