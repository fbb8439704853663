"""
Tests for the IR models and serialization.
"""

import json

import pytest
from pydantic import ValidationError

from twclean.ir.enums import CleanStatus
from twclean.ir.schema import AiWindowEntry, CanonicalWindow, CleanResult, FormatOptions, MergedWindow
from twclean.ir.serialization import from_json, load_payload, to_json, windows_to_json


class TestFormatOptions:
    """Defaults and validation."""

    def test_defaults(self):
        options = FormatOptions()
        assert options.slot_minutes == 90
        assert options.use_ampm is True
        assert options.date is None

    def test_slot_width_positive(self):
        with pytest.raises(ValidationError):
            FormatOptions(slot_minutes=0)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            FormatOptions().use_ampm = False


class TestWindowModels:
    """Canonical, AI and merged windows."""

    def test_canonical_defaults(self):
        window = CanonicalWindow(name="W")
        assert window.start_display == "--:--"
        assert window.score_text == "-"

    def test_canonical_score_range(self):
        with pytest.raises(ValidationError):
            CanonicalWindow(name="W", score=11)

    def test_ai_entry_extras(self):
        entry = AiWindowEntry.model_validate({"key": "tw_1", "window_index": 1, "summary": "s", "score": 7})
        assert entry.model_extra == {"score": 7}

    def test_merged_to_dict_only_set_fields(self):
        merged = MergedWindow.model_validate({"name": "A", "startDisplay": "6 AM"})
        assert merged.to_dict() == {"name": "A", "startDisplay": "6 AM"}


class TestSerialization:
    """JSON in and out."""

    def test_result_round_trip(self):
        result = CleanResult(
            request_id="r1",
            timestamp="2025-11-28T10:00:00",
            text="Clean.",
            windows=[CanonicalWindow(name="W", raw={"a": 1})],
            status=CleanStatus.PARTIAL,
        )
        restored = from_json(to_json(result))
        assert restored.text == "Clean."
        assert restored.status == CleanStatus.PARTIAL
        assert restored.windows[0].raw == {"a": 1}

    def test_windows_to_json_drops_unset(self):
        data = json.loads(windows_to_json([MergedWindow.model_validate({"name": "A"})]))
        assert data == [{"name": "A"}]

    def test_windows_to_json_keeps_plain_values(self):
        data = json.loads(windows_to_json([MergedWindow.model_validate({"name": "A"}), "slot", None]))
        assert data == [{"name": "A"}, "slot", None]

    def test_load_payload(self, tmp_path):
        path = tmp_path / "payload.json"
        path.write_text('{"time_windows": []}')
        assert load_payload(path) == {"time_windows": []}
