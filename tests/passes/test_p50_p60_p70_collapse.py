"""
Tests for the collapsing passes: identical lines (p50), boilerplate (p60)
and blank lines (p70).
"""

import pytest

from twclean.core.context import CleanContext, CleanRequest
from twclean.passes.p50_collapse_lines import collapse_identical_lines, collapse_lines
from twclean.passes.p60_collapse_boilerplate import collapse_boilerplate
from twclean.passes.p70_finalize import collapse_blank_lines, finalize


class TestCollapseIdenticalLines:
    """Consecutive duplicate lines."""

    @pytest.mark.parametrize("text,expected", [
        ("A\nA\nB", "A\nB"),
        ("A\nA\nA", "A"),
        ("A\nB\nA", "A\nB\nA"),
        ("A\n\n\nA", "A\n\n\nA"),
        ("A\nA ", "A\nA "),
        ("", ""),
    ])
    def test_collapse(self, text, expected):
        assert collapse_identical_lines(text) == expected

    def test_pass_traces_removed_count(self):
        ctx = collapse_lines(CleanContext.from_request(CleanRequest(text="x\nx\nx")))
        assert ctx.text == "x"
        assert ctx.trace[0].after == "2 removed"


class TestCollapseBoilerplate:
    """First occurrence of each filler phrase is kept."""

    def test_repeats_dropped(self):
        text = "Stay observant today. Good. Stay observant today. Stay observant today."
        assert collapse_boilerplate(text) == "Stay observant today. Good."

    def test_case_insensitive(self):
        text = "Trust your intuition. x. TRUST YOUR INTUITION."
        assert collapse_boilerplate(text) == "Trust your intuition. x."

    def test_across_lines(self):
        phrase = "Take ten mindful breaths, journal insights, and let compassion guide every action."
        text = f"Morning.\n{phrase}\nEvening.\n{phrase}"
        assert collapse_boilerplate(text) == f"Morning.\n{phrase}\nEvening."

    def test_must_start_a_sentence(self):
        text = "Distrust your intuition. Trust your intuition."
        assert collapse_boilerplate(text) == text

    def test_single_occurrence_untouched(self):
        text = "Stay observant today.  Extra spaces stay."
        assert collapse_boilerplate(text) == text

    def test_custom_phrases(self):
        assert collapse_boilerplate("Go slow. Go slow. Go slow.", ["Go slow."]) == "Go slow."


class TestFinalize:
    """Blank line runs and trimming."""

    @pytest.mark.parametrize("text,expected", [
        ("Line 1\n\n\n\n\nLine 2", "Line 1\n\nLine 2"),
        ("Line 1\n\nLine 2", "Line 1\n\nLine 2"),
        ("a\n  \n \n\nb", "a\n\nb"),
        ("", ""),
    ])
    def test_collapse_blank_lines(self, text, expected):
        assert collapse_blank_lines(text) == expected

    def test_pass_trims(self):
        ctx = finalize(CleanContext.from_request(CleanRequest(text="\n\n  a\n\n\n\nb  \n")))
        assert ctx.text == "a\n\nb"

    def test_lines_made_identical_by_filler_removal(self):
        text = collapse_boilerplate("Trust your intuition.\nGo now.\nGo now. Trust your intuition.")
        assert text == "Trust your intuition.\nGo now.\nGo now."
        ctx = finalize(CleanContext.from_request(CleanRequest(text=text)))
        assert ctx.text == "Trust your intuition.\nGo now."
