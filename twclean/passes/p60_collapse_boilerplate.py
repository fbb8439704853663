"""
Pass 60 — Boilerplate Collapse

Filler sentences from the profile ("Stay observant today.", "Trust your
intuition.", ...) are kept at their first occurrence and removed after that.
A phrase only counts when it starts a sentence or follows whitespace.
"""

import re
from typing import Optional, Sequence

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger
from twclean.profile.loader import get_profile

PASS_NAME = "p60_collapse_boilerplate"
log = get_pass_logger(PASS_NAME)


def _phrase_pattern(phrase: str) -> re.Pattern:
    words = [re.escape(w) for w in phrase.split()]
    return re.compile(r"(?<![^\s.!?])" + r"\s+".join(words), re.IGNORECASE)


def collapse_boilerplate(text: Optional[str], phrases: Optional[Sequence[str]] = None) -> str:
    """Keep the first occurrence of each filler phrase."""
    if not text:
        return ""
    if phrases is None:
        phrases = get_profile().boilerplate_phrases

    out = text
    changed = False
    for phrase in phrases:
        if not phrase.strip():
            continue
        pattern = _phrase_pattern(phrase)
        matches = list(pattern.finditer(out))
        if len(matches) < 2:
            continue
        first = matches[0]
        out = out[:first.end()] + pattern.sub("", out[first.end():])
        changed = True
        log.debug("boilerplate_collapsed", phrase=phrase, removed=len(matches) - 1)

    if not changed:
        return text
    out = re.sub(r"(?<=\S)[^\S\n]{2,}", " ", out)
    out = re.sub(r"[^\S\n]+\n", "\n", out)
    return out.strip()


def collapse_filler(ctx: CleanContext) -> CleanContext:
    """Remove repeated filler phrases."""
    before = ctx.text
    phrases = ctx.profile.boilerplate_phrases if ctx.profile else None
    ctx.text = collapse_boilerplate(ctx.text, phrases)
    if ctx.text != before:
        ctx.add_trace(pass_name=PASS_NAME, action="collapsed_boilerplate")
    return ctx
