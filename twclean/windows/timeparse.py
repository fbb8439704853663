"""
Time Value Parser — One entry point for every time representation.

Window times arrive as ISO datetimes, 24-hour clock strings, 12-hour clock
strings, or numeric slot indexes (1-based, ``slot_minutes`` wide, starting
at midnight). ``parse_time_value`` turns any of them into one of a closed
set of tagged values; formatting dispatches on the tag.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, NamedTuple, Optional, Union

from twclean.ir.schema import TIME_PLACEHOLDER, FormatOptions

MINUTES_PER_DAY = 24 * 60
RANGE_ARROW = " → "
SLOT_DASH = " – "
SLOT_FALLBACK = "time window"
EMPTY_LOCAL = "—"

_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_ISO_WITH_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")
_CLOCK_12H = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")
_CLOCK_24H = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")
_DIGITS = re.compile(r"^\d+$")
_LOOSE_CLOCK = re.compile(r"(\d{1,2}):(\d{2})\s*([AaPp][Mm])?")


# ============================================================================
# Tagged values
# ============================================================================

class ClockParts(NamedTuple):
    """Hours (0–23) and minutes (0–59) of a wall-clock time."""
    hours: int
    minutes: int


@dataclass(frozen=True)
class IsoTime:
    value: datetime


@dataclass(frozen=True)
class ClockTime:
    """A clock time; ``meridiem`` is 'AM'/'PM' for 12-hour input, else None."""
    hours: int
    minutes: int
    meridiem: Optional[str] = None


@dataclass(frozen=True)
class SlotTime:
    index: int


TimeValue = Union[IsoTime, ClockTime, SlotTime]


# ============================================================================
# Parsing
# ============================================================================

def parse_iso(value: Any, require_time: bool = True) -> Optional[datetime]:
    """Parse an ISO date/datetime string, or None if it isn't one."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    pattern = _ISO_WITH_TIME if require_time else _ISO_PREFIX
    if not pattern.match(text):
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_time_string(value: Any) -> Optional[ClockParts]:
    """
    Parse ``HH:MM``, ``HH:MM:SS`` or ``H:MM AM/PM`` into 24-hour parts.

    ``"24:00"`` and ``"12:00 AM"`` both map to (0, 0).
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    match = _CLOCK_12H.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        meridiem = match.group(3).upper()
        if not 1 <= hours <= 12 or minutes > 59:
            return None
        if meridiem == "PM" and hours != 12:
            hours += 12
        elif meridiem == "AM" and hours == 12:
            hours = 0
        return ClockParts(hours, minutes)

    match = _CLOCK_24H.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours == 24 and minutes == 0:
            return ClockParts(0, 0)
        if hours < 24 and minutes < 60:
            return ClockParts(hours, minutes)
    return None


def is_numeric_slot(value: Any) -> bool:
    """True for a finite number (not bool) or an all-digit string."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return isinstance(value, int) or math.isfinite(value)
    if isinstance(value, str):
        return bool(_DIGITS.match(value.strip()))
    return False


def parse_time_value(value: Any) -> Optional[TimeValue]:
    """Classify a raw time value. Order: ISO, 24-hour, 12-hour, slot."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        return SlotTime(int(value))
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    iso = parse_iso(text)
    if iso is not None:
        return IsoTime(iso)

    match = _CLOCK_24H.match(text)
    if match:
        parts = parse_time_string(text)
        if parts is not None:
            return ClockTime(parts.hours, parts.minutes)

    match = _CLOCK_12H.match(text)
    if match:
        parts = parse_time_string(text)
        if parts is not None:
            return ClockTime(parts.hours, parts.minutes, match.group(3).upper())

    if _DIGITS.match(text):
        return SlotTime(int(text))
    return None


# ============================================================================
# Formatting
# ============================================================================

def format_hours_minutes(hours: int, minutes: int, use_ampm: bool = True) -> str:
    if use_ampm:
        period = "PM" if hours >= 12 else "AM"
        hours12 = hours % 12 or 12
        return f"{hours12}:{minutes:02d} {period}"
    return f"{hours:02d}:{minutes:02d}"


def _format_minutes(total: int, use_ampm: bool) -> str:
    return format_hours_minutes((total // 60) % 24, total % 60, use_ampm)


def slot_to_time_range(slot_index: Any, slot_minutes: int = 90, use_ampm: bool = True) -> str:
    """
    Convert a 1-based slot index into ``"<start> – <end>"``.

    Covers ``[(i-1)·m, i·m)`` minutes after midnight. Returns "time window"
    for an index below 1 or a slot that would start on the next day.
    """
    try:
        index = int(slot_index)
    except (TypeError, ValueError, OverflowError):
        return SLOT_FALLBACK
    if index < 1 or slot_minutes <= 0:
        return SLOT_FALLBACK
    start = (index - 1) * slot_minutes
    if start >= MINUTES_PER_DAY:
        return SLOT_FALLBACK
    end = start + slot_minutes
    return f"{_format_minutes(start, use_ampm)}{SLOT_DASH}{_format_minutes(end, use_ampm)}"


def format_time(value: Any, options: Optional[FormatOptions] = None) -> Optional[str]:
    """Format any supported time value as a short clock string, or None."""
    options = options or FormatOptions()
    parsed = parse_time_value(value)

    if isinstance(parsed, IsoTime):
        return format_hours_minutes(parsed.value.hour, parsed.value.minute, options.use_ampm)
    if isinstance(parsed, ClockTime):
        return format_hours_minutes(parsed.hours, parsed.minutes, options.use_ampm)
    if isinstance(parsed, SlotTime):
        if parsed.index < 1:
            return None
        start = (parsed.index - 1) * options.slot_minutes
        if start >= MINUTES_PER_DAY:
            return None
        return _format_minutes(start, options.use_ampm)
    return None


def card_date_for(value: Any) -> Optional[str]:
    """Card subtitle date, e.g. ``"Nov 28, 2025"``."""
    parsed = parse_iso(value, require_time=False)
    if parsed is None:
        return None
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_local(value: Any, mode: str = "datetime") -> str:
    """
    Format a value for display.

    Modes: ``time`` ("11:49 AM"), ``datetime`` ("Nov 28, 2025, 11:49 AM"),
    ``date`` ("11/28/2025"). Absent values give "—"; values that aren't
    dates are returned as text.
    """
    if value is None or value == "":
        return EMPTY_LOCAL
    if mode == "time":
        return format_time(value) or EMPTY_LOCAL

    parsed = parse_iso(value, require_time=False)
    if parsed is None:
        return str(value)
    if mode == "date":
        return f"{parsed.month:02d}/{parsed.day:02d}/{parsed.year}"
    clock = format_hours_minutes(parsed.hour, parsed.minute)
    return f"{card_date_for(value)}, {clock}"


def construct_iso(date_str: str, time_str: Any) -> Optional[str]:
    """Build a local ISO timestamp from an ISO date and a display time."""
    if not isinstance(time_str, str):
        return None
    match = _LOOSE_CLOCK.search(time_str)
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    meridiem = (match.group(3) or "").upper()
    if meridiem == "PM" and hours != 12:
        hours += 12
    elif meridiem == "AM" and hours == 12:
        hours = 0
    if hours > 23 or minutes > 59:
        return None

    try:
        day = date.fromisoformat(date_str.split("T")[0].strip())
    except ValueError:
        return None
    return datetime(day.year, day.month, day.day, hours, minutes).isoformat()


# ============================================================================
# Window helpers
# ============================================================================

def window_field(window: Any, *keys: str) -> Any:
    """First present, non-empty value among ``keys`` of a dict or model."""
    if window is None:
        return None
    if isinstance(window, dict):
        source = window
    else:
        source = {
            **(getattr(window, "model_extra", None) or {}),
            **getattr(window, "__dict__", {}),
        }
    for key in keys:
        value = source.get(key)
        if value is not None and value != "":
            return value
    return None


def get_window_label(window: Any, index: int) -> str:
    """label → name → title → category → ``"Window {index+1}"``."""
    label = window_field(window, "label", "name", "title", "category")
    if label is None:
        return f"Window {index + 1}"
    return str(label)


def _slot_number(value: Any) -> Optional[int]:
    if not is_numeric_slot(value):
        return None
    return int(float(value)) if not isinstance(value, str) else int(value.strip())


def format_time_range(window: Any, options: Optional[FormatOptions] = None) -> Optional[str]:
    """
    Render ``"<start> → <end>"`` for a window.

    Verbatim display strings win per side, then ISO fields, then raw
    start/end; an unresolvable side becomes "--:--". A window whose start
    and end are the same slot renders that slot's full range.
    """
    if window is None:
        return None
    options = options or FormatOptions()

    start_value = window_field(window, "start_iso", "startISO", "start_Iso", "start")
    end_value = window_field(window, "end_iso", "endISO", "end_Iso", "end")

    start_slot, end_slot = _slot_number(start_value), _slot_number(end_value)
    if start_slot is not None and start_slot == end_slot:
        slot_range = slot_to_time_range(start_slot, options.slot_minutes, options.use_ampm)
        if slot_range != SLOT_FALLBACK:
            return slot_range.replace(SLOT_DASH, RANGE_ARROW)

    start = _display_side(window, "start_display", "startDisplay", start_value, options)
    end = _display_side(window, "end_display", "endDisplay", end_value, options)
    return f"{start}{RANGE_ARROW}{end}"


def _display_side(window: Any, snake: str, camel: str, value: Any, options: FormatOptions) -> str:
    display = window_field(window, snake, camel)
    if isinstance(display, str) and display.strip() and display != TIME_PLACEHOLDER:
        return display
    return format_time(value, options) or TIME_PLACEHOLDER


def build_window_string(window: Any, index: int, options: Optional[FormatOptions] = None) -> str:
    """``"{label} ({start} → {end})"``, placeholders included."""
    label = get_window_label(window, index)
    time_range = format_time_range(window, options) or f"{TIME_PLACEHOLDER}{RANGE_ARROW}{TIME_PLACEHOLDER}"
    return f"{label} ({time_range})"
