"""
Pass 32 — Window Number References (optional)

Generated text sometimes names windows by their 1-based number ("windows 3,
4 and 7", "window 12") instead of using tokens. Those references become the
windows' time ranges; consecutive numbers collapse into one span.
"""

import re
from typing import Any, Optional

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger
from twclean.ir.schema import TIME_PLACEHOLDER, CanonicalWindow, FormatOptions
from twclean.windows.normalize import normalize_time_window
from twclean.windows.timeparse import SLOT_DASH

PASS_NAME = "p32_window_numbers"
log = get_pass_logger(PASS_NAME)

_WINDOW_LIST = re.compile(
    r"\bwindows?\s*((?:\d+\s*[,\s]+)*(?:\d+\s*(?:and|&)\s*)?\d+)\b",
    re.IGNORECASE,
)


def _canonical(windows: list[Any], options: FormatOptions) -> list[CanonicalWindow]:
    return [
        w if isinstance(w, CanonicalWindow) else normalize_time_window(w, i, options)
        for i, w in enumerate(windows)
    ]


def _ranges(numbers: list[int]) -> list[tuple[int, int]]:
    ordered = sorted(set(numbers))
    spans = []
    start = end = ordered[0]
    for n in ordered[1:]:
        if n == end + 1:
            end = n
            continue
        spans.append((start, end))
        start = end = n
    spans.append((start, end))
    return spans


def replace_window_numbers_with_time_ranges(
    text: Optional[str],
    windows: Optional[list[Any]],
    options: Optional[FormatOptions] = None,
) -> str:
    """Swap 1-based window number references for time ranges."""
    if not text:
        return ""
    if not windows:
        return text
    canonical = _canonical(windows, options or FormatOptions())

    def window_at(number: int) -> Optional[CanonicalWindow]:
        if 1 <= number <= len(canonical):
            return canonical[number - 1]
        return None

    def replace(match: re.Match) -> str:
        numbers = [int(n) for n in re.findall(r"\d+", match.group(1))]
        parts = []
        for first, last in _ranges(numbers):
            start_window, end_window = window_at(first), window_at(last)
            if start_window is None or end_window is None:
                continue
            start = start_window.start_display or TIME_PLACEHOLDER
            end = end_window.end_display or TIME_PLACEHOLDER
            if first == last:
                parts.append(f"{start}{SLOT_DASH}{end}")
            else:
                parts.append(f"{start} to {end}")
        return ", ".join(parts) if parts else match.group(0)

    return _WINDOW_LIST.sub(replace, text)


def window_numbers(ctx: CleanContext) -> CleanContext:
    """Replace window number references with time ranges."""
    before = ctx.text
    ctx.text = replace_window_numbers_with_time_ranges(ctx.text, ctx.windows, ctx.options)
    if ctx.text != before:
        ctx.add_trace(pass_name=PASS_NAME, action="replaced_window_numbers")
    return ctx
