"""
Pass 35 — ISO Datetime Formatting

ISO timestamps left in the prose are shown as clock times, at the wall
clock of their own offset. "9:30 AM to 10:30 AM" becomes "9:30 AM – 10:30 AM".
"""

import re
from typing import Optional

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger
from twclean.ir.schema import FormatOptions
from twclean.windows.timeparse import SLOT_DASH, format_hours_minutes, parse_iso

PASS_NAME = "p35_format_iso_datetimes"
log = get_pass_logger(PASS_NAME)

ISO_IN_TEXT = re.compile(
    r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2})?(?:\.\d+)?(?:Z|[+\-]\d{2}:?\d{2})?"
)
_CLOCK = r"\d{1,2}:\d{2}(?:[^\S\n]*[AaPp][Mm])?"
TIME_TO_TIME = re.compile(rf"({_CLOCK})[^\S\n]+to[^\S\n]+({_CLOCK})", re.IGNORECASE)


def format_iso_datetimes_in_text(text: Optional[str], options: Optional[FormatOptions] = None) -> str:
    """Replace ISO datetimes with short times and tidy "A to B" time ranges."""
    if not text:
        return ""
    use_ampm = (options or FormatOptions()).use_ampm

    def replace(match: re.Match) -> str:
        parsed = parse_iso(match.group(0))
        if parsed is None:
            return match.group(0)
        return format_hours_minutes(parsed.hour, parsed.minute, use_ampm)

    result = ISO_IN_TEXT.sub(replace, text)
    return TIME_TO_TIME.sub(rf"\1{SLOT_DASH}\2", result)


def format_iso_datetimes(ctx: CleanContext) -> CleanContext:
    """Format ISO datetimes in the narrative."""
    before = ctx.text
    ctx.text = format_iso_datetimes_in_text(ctx.text, ctx.options)
    if ctx.text != before:
        ctx.add_trace(pass_name=PASS_NAME, action="formatted_datetimes")
    return ctx
