"""
Pass 20 — Debug Artifact Stripping

Generated prose sometimes carries serialized data that leaked from the
prompt: fenced JSON, sentinel markers followed by a blob, or bare object
and list literals. All of it is removed; the prose around it is kept.

Order:
1. Fenced code blocks tagged json/js, or whose body is blob-shaped
2. Sentinel marker plus the balanced blob after it, then any bare marker
3. Standalone balanced blob-shaped literals
4. Whitespace and space-before-punctuation tidy-up

Only balanced, data-shaped fragments are removed, so prose braces and
index references like time_windows[0] are never touched.
"""

import re
from typing import Optional, Sequence

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger
from twclean.profile.loader import get_profile
from twclean.windows.blobs import OPENERS, find_balanced_end, looks_like_blob, remove_blobs

PASS_NAME = "p20_strip_debug"
log = get_pass_logger(PASS_NAME)

_FENCE = re.compile(r"```[^\S\n]*([\w-]*)[^\n]*\n?(.*?)```", re.DOTALL)
_CODE_TAGS = {"json", "js", "javascript"}
_MARKER_GAP = re.compile(r"[\s:]*")


def _strip_fences(text: str) -> str:
    def replace(match: re.Match) -> str:
        tag, body = match.group(1).lower(), match.group(2).strip()
        if tag in _CODE_TAGS or looks_like_blob(body):
            return " "
        return match.group(0)

    return _FENCE.sub(replace, text)


def _strip_marker_blobs(text: str, markers: Sequence[str]) -> str:
    for marker in markers:
        needle = marker.lower()
        search_from = 0
        while True:
            idx = text.lower().find(needle, search_from)
            if idx == -1:
                break
            after = idx + len(marker)
            cursor = _MARKER_GAP.match(text, after).end()
            end = after
            if cursor < len(text) and text[cursor] in OPENERS:
                end = find_balanced_end(text, cursor) or after
            text = text[:idx] + " " + text[end:]
            search_from = idx
    return text


def _tidy(text: str) -> str:
    text = re.sub(r"(?<=\S)[^\S\n]{2,}", " ", text)
    text = re.sub(r"[^\S\n]+([,.;:!?])", r"\1", text)
    text = re.sub(r"[^\S\n]+\n", "\n", text)
    return text.strip()


def strip_debug_blocks(text: Optional[str], markers: Optional[Sequence[str]] = None) -> str:
    """Remove leaked debug markers and serialized data from text."""
    if not text:
        return ""
    if markers is None:
        markers = get_profile().debug_markers

    out = _strip_fences(text)
    out = _strip_marker_blobs(out, markers)
    out = remove_blobs(out)
    return _tidy(out)


def strip_debug(ctx: CleanContext) -> CleanContext:
    """Strip debug artifacts from the narrative."""
    before = ctx.text
    ctx.text = strip_debug_blocks(ctx.text, ctx.profile.debug_markers if ctx.profile else None)
    if ctx.text != before:
        log.verbose("debug_stripped", removed=len(before) - len(ctx.text))
        ctx.add_trace(
            pass_name=PASS_NAME,
            action="stripped_debug",
            before=f"{len(before)} chars",
            after=f"{len(ctx.text)} chars",
        )
    return ctx
