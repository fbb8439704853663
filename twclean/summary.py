"""
Narrative Orchestrator — Clean a generated summary against its time windows.

Pass order (fixed):
    strip metadata sections → strip debug blocks → expand window tokens
    → [window number references] → format ISO datetimes → metadata hints
    → collapse identical lines → collapse boilerplate → [sentence dedupe]
    → collapse blank lines + trim

Bracketed passes are optional and off by default. The output of a run is
stable: cleaning it again returns it unchanged.
"""

from typing import Any, Optional

from twclean.core.context import CleanRequest
from twclean.core.engine import Engine, PassFn, Pipeline, get_engine
from twclean.core.logging import LogChannel, WarningReporter, get_logger
from twclean.ir.schema import CanonicalWindow, CleanResult, FormatOptions
from twclean.passes import (
    collapse_filler,
    collapse_lines,
    dedupe_sentences,
    expand_tokens,
    finalize,
    format_iso_datetimes,
    metadata_hints,
    strip_debug,
    strip_metadata,
    window_numbers,
)
from twclean.profile.loader import get_profile
from twclean.profile.models import CleaningProfile
from twclean.windows.builder import build_time_windows

log = get_logger(LogChannel.PIPELINE)

DEFAULT_PIPELINE = "default"


def pipeline_passes(number_references: bool = False, sentence_dedupe: bool = False) -> list[PassFn]:
    """The pass list for a combination of optional passes."""
    passes: list[PassFn] = [strip_metadata, strip_debug, expand_tokens]
    if number_references:
        passes.append(window_numbers)
    passes += [format_iso_datetimes, metadata_hints, collapse_lines, collapse_filler]
    if sentence_dedupe:
        passes.append(dedupe_sentences)
    passes.append(finalize)
    return passes


def pipeline_id_for(number_references: bool = False, sentence_dedupe: bool = False) -> str:
    parts = [DEFAULT_PIPELINE]
    if number_references:
        parts.append("numbers")
    if sentence_dedupe:
        parts.append("dedupe")
    return "+".join(parts)


def ensure_pipeline(engine: Engine, number_references: bool = False, sentence_dedupe: bool = False) -> str:
    """Register the pipeline for these options if needed and return its id."""
    pipeline_id = pipeline_id_for(number_references, sentence_dedupe)
    if not engine.has_pipeline(pipeline_id):
        engine.register_pipeline(
            Pipeline(
                id=pipeline_id,
                name=f"Summary Cleaning ({pipeline_id})",
                passes=pipeline_passes(number_references, sentence_dedupe),
            )
        )
    return pipeline_id


class SummaryCleaner:
    """
    Cleans summaries for one caller.

    Remembers the last window list it built, which is used for later
    summaries that come without their own list.
    """

    def __init__(
        self,
        options: Optional[FormatOptions] = None,
        profile: Optional[CleaningProfile] = None,
        reporter: Optional[WarningReporter] = None,
        engine: Optional[Engine] = None,
    ):
        self.options = options or FormatOptions()
        self.profile = profile or get_profile()
        self.reporter = reporter
        self.engine = engine or get_engine()
        self.last_windows: Optional[list[CanonicalWindow]] = None

    def build_windows(self, data: Any) -> list[CanonicalWindow]:
        """Build the canonical windows for a payload and remember them."""
        self.last_windows = build_time_windows(data, self.options, self.profile)
        return self.last_windows

    def effective_windows(self, windows: Optional[list[Any]]) -> list[Any]:
        if windows is not None:
            return windows
        if self.last_windows is not None:
            return self.last_windows
        return []

    def run(
        self,
        text: Optional[str],
        windows: Optional[list[Any]] = None,
        number_references: bool = False,
        sentence_dedupe: bool = False,
        dedupe_mode: str = "consecutive",
        request_id: Optional[str] = None,
    ) -> CleanResult:
        """Clean a summary and return the full result."""
        pipeline_id = ensure_pipeline(self.engine, number_references, sentence_dedupe)
        effective = self.effective_windows(windows)
        log.verbose("summary_clean_started", pipeline=pipeline_id, windows=len(effective))
        request = CleanRequest(
            text=text or "",
            windows=effective,
            options=self.options,
            request_id=request_id,
            metadata={"pipeline_id": pipeline_id, "dedupe_mode": dedupe_mode},
        )
        return self.engine.run(request, pipeline_id, profile=self.profile, reporter=self.reporter)

    def clean(self, text: Optional[str], windows: Optional[list[Any]] = None, **kwargs: Any) -> str:
        """Clean a summary and return only the text."""
        if not text:
            return ""
        return self.run(text, windows, **kwargs).text


def clean_summary_with_windows(
    text: Optional[str],
    windows: Optional[list[Any]] = None,
    options: Optional[FormatOptions] = None,
    **kwargs: Any,
) -> str:
    """
    Clean a generated summary.

    Args:
        text: The raw summary (None or "" gives "")
        windows: Canonical windows or raw window records (empty if None)
        options: Time formatting options
        **kwargs: number_references, sentence_dedupe, dedupe_mode

    Returns:
        The cleaned, display-ready summary
    """
    return SummaryCleaner(options).clean(text, windows, **kwargs)
