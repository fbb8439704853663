"""
Tests for the stripping passes (p10 metadata sections, p20 debug artifacts).
"""

import time

import pytest

from twclean.core.context import CleanContext, CleanRequest
from twclean.passes.p10_strip_metadata import strip_metadata, strip_metadata_sections
from twclean.passes.p20_strip_debug import strip_debug, strip_debug_blocks


def make_context(text: str) -> CleanContext:
    return CleanContext.from_request(CleanRequest(text=text))


class TestStripMetadataSections:
    """Backend-only sections and footers are cut to the end."""

    @pytest.mark.parametrize("text", [
        "Intro text.\n\nWindows Explanation\nwindow 1 is computed from...",
        "Intro text.\n## Appendix:\nstuff",
        "Intro text.\ninternal notes: blah",
        "Intro text.\nDebug Info\nx",
        "Intro text.\nTechnical Debugging Notes\nx",
        "Intro text.\nSources: a, b",
        "Intro text.\nRaw sources - x",
    ])
    def test_cut_from_title(self, text):
        assert strip_metadata_sections(text) == "Intro text."

    def test_updated_line_removed(self):
        assert strip_metadata_sections("Updated: 2025-11-28\nBody text") == "Body text"

    def test_only_first_title_matters(self):
        text = "Body\nAppendix\nmore\nSources: x"
        assert strip_metadata_sections(text) == "Body"

    @pytest.mark.parametrize("text", [
        "The appendix of the book is long.",
        "Appendix A covers dates",
        "Plain text  ",
        "Our sources say the day is calm.",
    ])
    def test_prose_untouched(self, text):
        assert strip_metadata_sections(text) == text

    def test_empty(self):
        assert strip_metadata_sections(None) == ""
        assert strip_metadata_sections("") == ""

    def test_pass_traces_change(self):
        ctx = strip_metadata(make_context("Body\nAppendix\nx"))
        assert ctx.text == "Body"
        assert len(ctx.trace) == 1


class TestStripDebugBlocks:
    """Leaked data is removed, prose kept."""

    def test_marker_and_blob(self):
        text = 'Great day ahead __windows_json__ [{"a":1},{"b":2}] with windows {"c":3} final'
        assert strip_debug_blocks(text) == "Great day ahead with windows final"

    def test_json_fence(self):
        text = 'Before\n```json\n{"a": 1}\n```\nAfter'
        assert strip_debug_blocks(text) == "Before\n\nAfter"

    def test_untagged_fence_with_blob(self):
        text = 'Before\n```\n{"a": 1}\n```\nAfter'
        assert strip_debug_blocks(text) == "Before\n\nAfter"

    def test_prose_fence_kept(self):
        text = "```\nplain words\n```"
        assert strip_debug_blocks(text) == text

    def test_standalone_object(self):
        text = 'Morning is calm {"score": 8, "label": "x"} and bright.'
        assert strip_debug_blocks(text) == "Morning is calm and bright."

    def test_list_of_strings(self):
        assert strip_debug_blocks('Drivers ["Moon", "Venus"] today.') == "Drivers today."

    def test_bare_markers(self):
        assert strip_debug_blocks("Text __debug__ more") == "Text more"
        assert strip_debug_blocks("Text __WINDOWS_JSON__ more") == "Text more"

    def test_marker_across_lines(self):
        text = 'Intro\n__windows_json__\n[{"a": 1}]\nOutro'
        assert strip_debug_blocks(text) == "Intro\n\nOutro"

    def test_escaped_blob(self):
        text = 'Calm {\\"score\\": 8, \\"label\\": \\"x\\"} day.'
        assert strip_debug_blocks(text) == "Calm day."

    @pytest.mark.parametrize("text", [
        "See time_windows[0] and time_windows[12].",
        'He wrote {like this} and said "hi".',
        "Plain prose.",
    ])
    def test_prose_untouched(self, text):
        assert strip_debug_blocks(text) == text

    def test_no_brackets_left_from_blobs(self):
        text = 'A {"k": [1, 2, {"n": "}"}]} B ["x"] C'
        result = strip_debug_blocks(text)
        assert "{" not in result and "[" not in result
        assert result == "A B C"

    def test_idempotent(self):
        text = 'Intro __debug__ {"x": 1}\n```json\n[]\n```\nOutro {"y": "z"} end.'
        once = strip_debug_blocks(text)
        assert strip_debug_blocks(once) == once

    def test_custom_markers(self):
        assert strip_debug_blocks('A <<dump>> {"a": 1} B', markers=["<<dump>>"]) == "A B"

    def test_marker_before_oversized_blob(self):
        blob = '{"note": "' + "x" * 6000 + '"}'
        assert strip_debug_blocks(f"A __windows_json__ {blob} B") == "A B"

    def test_many_unclosed_brackets_stay_fast(self):
        text = "[" * 50000
        started = time.perf_counter()
        assert strip_debug_blocks(text) == text
        assert time.perf_counter() - started < 5

    def test_empty(self):
        assert strip_debug_blocks(None) == ""
        assert strip_debug_blocks("") == ""

    def test_pass_traces_change(self):
        ctx = strip_debug(make_context('Text {"a": "b"} end'))
        assert ctx.text == "Text end"
        assert ctx.trace[0].action == "stripped_debug"

    def test_pass_no_change_no_trace(self):
        ctx = strip_debug(make_context("Nothing to strip."))
        assert ctx.trace == []
