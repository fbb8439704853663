"""
Tests for p65_dedupe_sentences — near-duplicate sentence removal.
"""

import pytest

from twclean.core.context import CleanContext, CleanRequest
from twclean.passes.p65_dedupe_sentences import (
    dedupe_sentences,
    dedupe_sentences_in_text,
    jaccard_similarity,
    normalize_for_comparison,
)


class TestHelpers:
    """Normalization and similarity."""

    def test_normalize(self):
        assert normalize_for_comparison("Café, “déjà” vu!") == "cafe deja vu"

    def test_jaccard(self):
        assert jaccard_similarity("a b c", "a b c") == 1.0
        assert jaccard_similarity("a b", "c d") == 0.0
        assert jaccard_similarity("a b c", "a b d") == 0.5
        assert jaccard_similarity("", "a") == 0.0


class TestDedupeSentences:
    """Consecutive and global modes."""

    def test_identical_sentences(self):
        text = "The day is calm and bright. The day is calm and bright!"
        assert dedupe_sentences_in_text(text) == "The day is calm and bright."

    def test_different_sentences_kept(self):
        text = "The morning is calm. The evening is stormy."
        assert dedupe_sentences_in_text(text) == text

    def test_consecutive_only_compares_neighbours(self):
        text = "A one two. Different thing here. A one two."
        assert dedupe_sentences_in_text(text, mode="consecutive") == text

    def test_global_compares_everything(self):
        text = "A one two. Different thing here. A one two."
        assert dedupe_sentences_in_text(text, mode="global") == "A one two. Different thing here."

    def test_global_across_paragraphs(self):
        text = "Calm morning ahead.\n\nBusy noon.\n\nCalm morning ahead."
        assert dedupe_sentences_in_text(text, mode="global") == "Calm morning ahead.\n\nBusy noon."

    def test_bullets_stay_on_lines(self):
        text = "- item one\n- item one\n- item two"
        assert dedupe_sentences_in_text(text) == "- item one\n- item two"

    def test_decimals_not_split(self):
        assert dedupe_sentences_in_text("Score 7.5 today. Score 7.5 today.") == "Score 7.5 today."

    def test_paragraph_spacing(self):
        assert dedupe_sentences_in_text("Para one.\n\n\nPara two.") == "Para one.\n\nPara two."

    def test_bad_mode(self):
        with pytest.raises(ValueError):
            dedupe_sentences_in_text("x", mode="sometimes")

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty(self, text):
        assert dedupe_sentences_in_text(text) == ""

    def test_pass_reads_mode_from_request(self):
        request = CleanRequest(text="A b c. D e f. A b c.", metadata={"dedupe_mode": "global"})
        ctx = dedupe_sentences(CleanContext.from_request(request))
        assert ctx.text == "A b c. D e f."
