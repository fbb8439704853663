"""
Pass 10 — Metadata Section Stripping

Backend-only sections (Windows Explanation, Appendix, Internal Notes, Debug
Info) and source footers are cut from the first line that names one, to the
end of the text. A leading "Updated: <date>" line is dropped too.
"""

import re
from typing import Optional

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger
from twclean.profile.loader import get_profile
from twclean.profile.models import CleaningProfile

PASS_NAME = "p10_strip_metadata"
log = get_pass_logger(PASS_NAME)

_UPDATED_LINE = re.compile(r"\A[^\S\n]*Updated:[^\n]*(?:\n+|\Z)", re.IGNORECASE)


def _section_pattern(profile: CleaningProfile) -> Optional[re.Pattern]:
    alternatives = []
    if profile.section_titles:
        titles = "|".join(profile.section_titles)
        alternatives.append(rf"(?:#{{1,6}}[^\S\n]*)?(?:{titles})[^\S\n]*(?::[^\n]*)?")
    if profile.footer_labels:
        footers = "|".join(profile.footer_labels)
        alternatives.append(rf"(?:{footers})[^\S\n]*[:\-][^\n]*")
    if not alternatives:
        return None
    return re.compile(
        rf"^[^\S\n]*(?:{'|'.join(alternatives)})[^\S\n]*$",
        re.IGNORECASE | re.MULTILINE,
    )


def strip_metadata_sections(text: Optional[str], profile: Optional[CleaningProfile] = None) -> str:
    """Cut everything from the first backend-only section title onward."""
    if not text:
        return ""
    profile = profile or get_profile()

    result = _UPDATED_LINE.sub("", text, count=1)

    pattern = _section_pattern(profile)
    match = pattern.search(result) if pattern else None
    if match:
        log.verbose("section_cut", title=match.group(0).strip()[:40], removed=len(result) - match.start())
        result = result[:match.start()].rstrip()

    return result


def strip_metadata(ctx: CleanContext) -> CleanContext:
    """Remove backend-only sections and footers."""
    before = ctx.text
    ctx.text = strip_metadata_sections(ctx.text, ctx.profile)
    if ctx.text != before:
        ctx.add_trace(
            pass_name=PASS_NAME,
            action="stripped_sections",
            before=f"{len(before)} chars",
            after=f"{len(ctx.text)} chars",
        )
    return ctx
