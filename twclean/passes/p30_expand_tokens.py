"""
Pass 30 — Time Window Token Expansion

Every ``time_windows[N]`` reference (any case) becomes an inline snippet
with the window's time range, severity, score and pakshi badges. Tokens
that can't be resolved still become a snippet, with placeholder content.
"""

import re
from html import escape
from typing import Any, Optional

from twclean.core.context import CleanContext
from twclean.core.logging import WarningReporter, get_pass_logger, get_reporter
from twclean.ir.enums import ScoreVariant, Severity
from twclean.ir.schema import SCORE_PLACEHOLDER, TIME_PLACEHOLDER, CanonicalWindow, FormatOptions
from twclean.windows.normalize import normalize_time_window
from twclean.windows.timeparse import RANGE_ARROW, format_time_range

PASS_NAME = "p30_expand_tokens"
log = get_pass_logger(PASS_NAME)

TOKEN_PATTERN = re.compile(r"time_windows\[(\d+)\]", re.IGNORECASE)
PLACEHOLDER_RANGE = f"{TIME_PLACEHOLDER}{RANGE_ARROW}{TIME_PLACEHOLDER}"
MISSING_WINDOWS_KEY = "time_windows_missing"


def render_snippet(
    time_range: str,
    severity: Severity = Severity.NEUTRAL,
    score_text: str = SCORE_PLACEHOLDER,
    variant: ScoreVariant = ScoreVariant.NEUTRAL,
    pakshi_day: Optional[str] = None,
    pakshi_night: Optional[str] = None,
) -> str:
    sev = severity.value
    badges = []
    if pakshi_day:
        badges.append(f'<span class="tw-pakshi-badge tw-pakshi--{sev}">Day: {escape(pakshi_day)}</span>')
    if pakshi_night:
        badges.append(f'<span class="tw-pakshi-badge tw-pakshi--{sev}">Night: {escape(pakshi_night)}</span>')
    badge_html = (" " + " ".join(badges)) if badges else ""
    return (
        f'<span class="tw-window tw-severity--{sev} tw-{sev}" data-severity="{sev}">'
        f'<span class="tw-time-range">{escape(time_range)}</span> '
        f'<span class="tw-score tw-score--{variant.value}">{escape(score_text)}</span>'
        f"{badge_html}</span>"
    )


PLACEHOLDER_SNIPPET = render_snippet(PLACEHOLDER_RANGE)


def render_window(window: CanonicalWindow, options: FormatOptions) -> str:
    """Snippet for one canonical window."""
    return render_snippet(
        format_time_range(window, options) or PLACEHOLDER_RANGE,
        window.severity,
        window.score_text,
        window.score_variant,
        window.pakshi_day,
        window.pakshi_night,
    )


def expand_time_window_tokens(
    text: Optional[str],
    windows: Optional[list[Any]],
    options: Optional[FormatOptions] = None,
    reporter: Optional[WarningReporter] = None,
) -> str:
    """
    Replace each ``time_windows[N]`` token with its window snippet.

    ``windows`` may hold canonical windows or raw records; raw ones are
    normalized on the fly. A missing list is reported once per reporter.
    """
    if not text:
        return ""
    options = options or FormatOptions()
    reporter = reporter or get_reporter()

    if not isinstance(windows, list):
        count = len(TOKEN_PATTERN.findall(text))
        if count:
            reporter.warn_once(
                MISSING_WINDOWS_KEY,
                "time_window_tokens_without_windows",
                tokens=count,
            )
        return TOKEN_PATTERN.sub(PLACEHOLDER_SNIPPET, text)

    def replace(match: re.Match) -> str:
        idx = int(match.group(1))
        if idx >= len(windows):
            log.debug("token_out_of_range", index=idx, windows=len(windows))
            return PLACEHOLDER_SNIPPET
        window = windows[idx]
        if not isinstance(window, CanonicalWindow):
            window = normalize_time_window(window, idx, options)
        return render_window(window, options)

    return TOKEN_PATTERN.sub(replace, text)


def expand_tokens(ctx: CleanContext) -> CleanContext:
    """Expand time window tokens using the context's windows."""
    count = len(TOKEN_PATTERN.findall(ctx.text))
    if not count:
        return ctx

    ctx.text = expand_time_window_tokens(ctx.text, ctx.windows, ctx.options, ctx.reporter)
    if ctx.windows is None:
        ctx.add_diagnostic(
            level="warning",
            code="WINDOWS_MISSING",
            message=f"{count} time window token(s) expanded without a window list",
            source=PASS_NAME,
        )
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="expanded_tokens",
        after=f"{count} tokens",
    )
    log.verbose("tokens_expanded", count=count)
    return ctx
