"""
Pass 40 — Metadata Hints

``[based on core_layers.panchang.data.moon_sign]`` becomes
``*(based on moon sign)*``. Only the leaf of the path is kept, or the last
two segments when the leaf alone says nothing (``value``, ``data``, ...).
"""

import re
from typing import Optional, Sequence

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger
from twclean.profile.loader import get_profile

PASS_NAME = "p40_metadata_hints"
log = get_pass_logger(PASS_NAME)

METADATA_PATTERN = re.compile(r"\[based on\s+([^\]]+)\]", re.IGNORECASE)


def hint_for_path(path: str, generic_leaves: Sequence[str]) -> str:
    segments = [s for s in path.strip().split(".") if s.strip()]
    if not segments:
        return path.strip().lower()
    picked = segments[-1:]
    if len(segments) > 1 and segments[-1].strip().lower() in generic_leaves:
        picked = segments[-2:]
    readable = " ".join(picked).replace("_", " ")
    return re.sub(r"\s+", " ", readable).strip().lower()


def convert_metadata_to_hints(text: Optional[str], generic_leaves: Optional[Sequence[str]] = None) -> str:
    """Turn bracketed metadata paths into readable hints."""
    if not text:
        return ""
    if generic_leaves is None:
        generic_leaves = get_profile().generic_hint_leaves

    return METADATA_PATTERN.sub(
        lambda m: f"*(based on {hint_for_path(m.group(1), generic_leaves)})*",
        text,
    )


def metadata_hints(ctx: CleanContext) -> CleanContext:
    """Convert metadata annotations to hints."""
    count = len(METADATA_PATTERN.findall(ctx.text))
    if not count:
        return ctx
    leaves = ctx.profile.generic_hint_leaves if ctx.profile else None
    ctx.text = convert_metadata_to_hints(ctx.text, leaves)
    ctx.add_trace(pass_name=PASS_NAME, action="converted_hints", after=f"{count} hints")
    return ctx
