"""
Pass 50 — Identical Line Collapse

A line identical to the previous kept line is dropped. Blank lines are
always kept; paragraph spacing is handled in p70.
"""

from typing import Optional

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger

PASS_NAME = "p50_collapse_lines"
log = get_pass_logger(PASS_NAME)


def collapse_identical_lines(text: Optional[str]) -> str:
    if not text:
        return ""
    kept: list[str] = []
    for line in text.split("\n"):
        if line.strip() and kept and line == kept[-1]:
            continue
        kept.append(line)
    return "\n".join(kept)


def collapse_lines(ctx: CleanContext) -> CleanContext:
    """Drop consecutive duplicate lines."""
    before = ctx.text
    ctx.text = collapse_identical_lines(ctx.text)
    removed = before.count("\n") - ctx.text.count("\n")
    if removed:
        log.verbose("lines_collapsed", removed=removed)
        ctx.add_trace(pass_name=PASS_NAME, action="collapsed_lines", after=f"{removed} removed")
    return ctx
