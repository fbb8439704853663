"""Passes — Pipeline stages for narrative cleaning."""

from twclean.passes.p10_strip_metadata import strip_metadata
from twclean.passes.p20_strip_debug import strip_debug
from twclean.passes.p30_expand_tokens import expand_tokens
from twclean.passes.p32_window_numbers import window_numbers  # optional
from twclean.passes.p35_format_iso_datetimes import format_iso_datetimes
from twclean.passes.p40_metadata_hints import metadata_hints
from twclean.passes.p50_collapse_lines import collapse_lines
from twclean.passes.p60_collapse_boilerplate import collapse_filler
from twclean.passes.p65_dedupe_sentences import dedupe_sentences  # optional
from twclean.passes.p70_finalize import finalize

__all__ = [
    "strip_metadata",
    "strip_debug",
    "expand_tokens",
    "window_numbers",
    "format_iso_datetimes",
    "metadata_hints",
    "collapse_lines",
    "collapse_filler",
    "dedupe_sentences",
    "finalize",
]
