"""
Pass 70 — Finalize

Runs of three or more line breaks become one blank line; the text is trimmed.
Lines that became identical to their neighbour after p50 (boilerplate or
sentence removal can do that) are collapsed again here, so a second cleaning
run finds nothing left to drop.
"""

import re
from typing import Optional

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger
from twclean.passes.p50_collapse_lines import collapse_identical_lines

PASS_NAME = "p70_finalize"
log = get_pass_logger(PASS_NAME)

_BLANK_RUN = re.compile(r"(?:[^\S\n]*\r?\n){3,}")


def collapse_blank_lines(text: Optional[str]) -> str:
    if not text:
        return ""
    return _BLANK_RUN.sub("\n\n", text)


def finalize(ctx: CleanContext) -> CleanContext:
    """Re-collapse identical lines, collapse blank lines and trim."""
    text = collapse_identical_lines(ctx.text.strip())
    if text != ctx.text.strip():
        log.verbose("late_duplicate_lines_collapsed")
    ctx.text = collapse_blank_lines(text).strip()
    return ctx
