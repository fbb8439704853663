"""
Tests for AI window validation and the AI/engine merge.
"""

import pytest

from twclean.windows.mapper import (
    map_ai_windows_to_engine_windows,
    resolve_ai_index,
    validate_ai_windows,
)


def ai_entry(index, **extra):
    entry = {"key": f"tw_{index}", "window_index": index, "summary": f"Summary {index}"}
    entry.update(extra)
    return entry


class TestValidateAiWindows:
    """Shape checks before merging."""

    def test_valid(self):
        assert validate_ai_windows([ai_entry(1)]) is True

    def test_missing_times_only_logged(self):
        assert validate_ai_windows([ai_entry(1), ai_entry(2, start_display="6:00 AM")]) is True

    def test_strict_needs_expected_count(self):
        assert validate_ai_windows([ai_entry(1)], expected_count=16, strict=True) is False
        assert validate_ai_windows([ai_entry(1), ai_entry(2)], expected_count=2, strict=True) is True

    @pytest.mark.parametrize("ai_windows", [None, {"tw_1": {}}, "[]", []])
    def test_not_a_usable_list(self, ai_windows):
        assert validate_ai_windows(ai_windows) is False

    @pytest.mark.parametrize("entry", [
        ai_entry(1, summary=""),
        ai_entry(1, summary="   "),
        ai_entry(1, summary=None),
        ai_entry(1, window_index="1"),
        ai_entry(1, window_index=True),
        ai_entry(1, key=5),
        {"window_index": 1, "summary": "x"},
        "tw_1",
    ])
    def test_bad_entries(self, entry):
        assert validate_ai_windows([ai_entry(2), entry]) is False


class TestResolveAiIndex:
    """1-based window_index, then tw_N key."""

    @pytest.mark.parametrize("entry,expected", [
        ({"window_index": 1}, 0),
        ({"window_index": 3.0, "key": "tw_9"}, 2),
        ({"window_index": 0, "key": "tw_0"}, 0),
        ({"window_index": 2.5, "key": "tw_4"}, 4),
        ({"key": "TW_7"}, 7),
        ({"key": "other"}, None),
        ({"summary": "x"}, None),
        ("tw_1", None),
    ])
    def test_resolution(self, entry, expected):
        assert resolve_ai_index(entry) == expected


class TestMapAiWindows:
    """Engine windows stay authoritative."""

    ENGINE = [
        {"name": "A", "score": 5, "category": "Neutral", "start_display": "6:00 AM"},
        {"name": "B", "score": 4, "startISO": "2025-11-28T07:30:00"},
        {"name": "C", "score": None},
    ]

    def test_length_and_order_preserved(self):
        merged = map_ai_windows_to_engine_windows([ai_entry(3), ai_entry(1)], self.ENGINE)
        assert len(merged) == 3
        assert [m.name for m in merged] == ["A", "B", "C"]
        assert merged[0].ai_summary == "Summary 1"
        assert merged[2].ai_summary == "Summary 3"

    def test_unmatched_window_passes_through(self):
        merged = map_ai_windows_to_engine_windows([ai_entry(1)], self.ENGINE)
        assert merged[1].to_dict() == self.ENGINE[1]
        assert merged[1].ai_summary is None

    def test_engine_values_win(self):
        merged = map_ai_windows_to_engine_windows([ai_entry(1, score=9, category="Bad")], self.ENGINE)
        assert merged[0].score == 5
        assert merged[0].category == "Neutral"
        assert merged[0].start_display == "6:00 AM"

    def test_ai_fills_gaps(self):
        merged = map_ai_windows_to_engine_windows([ai_entry(3, score=7, category="Good")], self.ENGINE)
        assert merged[2].score == 7
        assert merged[2].category == "Good"

    def test_narrative_fallbacks(self):
        entry = {"key": "tw_1", "window_index": 1, "summary": "", "interpretation": "I", "practical_html": "<p>P</p>"}
        merged = map_ai_windows_to_engine_windows([entry], self.ENGINE)
        assert merged[0].ai_summary == "I"
        assert merged[0].interpretation_html == "I"
        assert merged[0].practical_html == "<p>P</p>"
        assert merged[0].ai_raw == entry

    def test_later_duplicate_wins(self):
        merged = map_ai_windows_to_engine_windows(
            [ai_entry(1, summary="old"), ai_entry(1, summary="new")], self.ENGINE
        )
        assert merged[0].ai_summary == "new"

    def test_unmappable_entries_dropped(self):
        merged = map_ai_windows_to_engine_windows([{"summary": "x"}, ai_entry(9)], self.ENGINE)
        assert len(merged) == 3
        assert all(m.ai_summary is None for m in merged)

    def test_to_dict_includes_merged_fields(self):
        data = map_ai_windows_to_engine_windows([ai_entry(2)], self.ENGINE)[1].to_dict()
        assert data["ai_summary"] == "Summary 2"
        assert data["startISO"] == "2025-11-28T07:30:00"

    def test_engine_not_a_list(self):
        assert map_ai_windows_to_engine_windows([ai_entry(1)], None) == []
        assert map_ai_windows_to_engine_windows([ai_entry(1)], {"a": 1}) == []

    def test_ai_not_a_list(self):
        merged = map_ai_windows_to_engine_windows(None, self.ENGINE)
        assert [m.to_dict() for m in merged] == self.ENGINE

    @pytest.mark.parametrize("field", ["interpretation_html", "practical_html", "interpretation"])
    def test_non_string_narrative_fields(self, field):
        merged = map_ai_windows_to_engine_windows([ai_entry(1, **{field: ["x"]})], [{"name": "A"}])
        assert len(merged) == 1
        assert merged[0].ai_summary == "Summary 1"
        assert merged[0].interpretation_html == ""
        assert merged[0].practical_html == ""

    def test_engine_window_with_odd_merged_fields_kept(self):
        merged = map_ai_windows_to_engine_windows([], [{"name": "A", "ai_summary": 5, "ai_raw": "raw"}])
        assert len(merged) == 1
        assert merged[0].name == "A"
        assert merged[0].ai_summary == 5
        assert merged[0].ai_raw == "raw"

    def test_engine_window_with_odd_merged_fields_gets_ai_content(self):
        merged = map_ai_windows_to_engine_windows([ai_entry(1)], [{"name": "A", "ai_summary": 5, "ai_raw": "raw"}])
        assert merged[0].ai_summary == "Summary 1"
        assert merged[0].ai_raw == ai_entry(1)

    def test_non_mapping_engine_entries_pass_through(self):
        merged = map_ai_windows_to_engine_windows([ai_entry(2)], ["slot", {"name": "B"}, None])
        assert merged[0] == "slot"
        assert merged[1].ai_summary == "Summary 2"
        assert merged[2] is None
