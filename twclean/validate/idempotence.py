"""
Idempotence Validator — Checks cleaning is stable.

Cleaning already-clean output must return it unchanged.
"""

from typing import Any, Optional

from twclean.core.context import CleanContext
from twclean.core.contracts import Validator
from twclean.ir.schema import FormatOptions
from twclean.profile.models import CleaningProfile


class IdempotenceValidator(Validator):
    """
    Re-runs the same pipeline on a finished context's text and compares.

    The windows and options of the original request are reused.
    """

    @property
    def name(self) -> str:
        return "idempotence"

    def validate(self, ctx: CleanContext) -> list[str]:
        from twclean.summary import SummaryCleaner

        metadata = ctx.request.metadata
        pipeline_id = metadata.get("pipeline_id", "default")
        cleaner = SummaryCleaner(ctx.options, profile=ctx.profile, reporter=ctx.reporter)
        again = cleaner.run(
            ctx.text,
            ctx.windows if ctx.windows is not None else [],
            number_references="numbers" in pipeline_id,
            sentence_dedupe="dedupe" in pipeline_id,
            dedupe_mode=metadata.get("dedupe_mode", "consecutive"),
        ).text

        if again == ctx.text:
            return []
        return [
            f"Cleaning is not idempotent: second run changed {len(ctx.text)} chars "
            f"to {len(again)} chars"
        ]


def check_idempotent(
    text: Optional[str],
    windows: Optional[list[Any]] = None,
    options: Optional[FormatOptions] = None,
    profile: Optional[CleaningProfile] = None,
    **kwargs: Any,
) -> bool:
    """True if cleaning the cleaned text with the same profile changes nothing."""
    from twclean.summary import SummaryCleaner

    cleaner = SummaryCleaner(options, profile=profile)
    once = cleaner.clean(text, windows, **kwargs)
    return cleaner.clean(once, windows, **kwargs) == once
