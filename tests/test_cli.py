"""
Tests for the twclean command-line interface.
"""

import io
import json

import pytest

from twclean.cli.main import main
from twclean.core.logging import configure_logging

ABHIJIT = {"label": "Abhijit", "start": "11:45", "end": "12:30", "score": 8}


@pytest.fixture(autouse=True)
def restore_logging():
    # main() binds logging to the captured stderr of the running test
    yield
    configure_logging(level="info", force=True)


@pytest.fixture
def windows_file(tmp_path):
    path = tmp_path / "windows.json"
    path.write_text(json.dumps({"time_windows": [ABHIJIT]}))
    return path


def write_json(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return str(path)


class TestCleanCommand:
    """twclean clean"""

    def test_text_argument(self, capsys):
        assert main(["clean", "Line 1\n\n\n\nLine 2"]) == 0
        assert capsys.readouterr().out == "Line 1\n\nLine 2\n"

    def test_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("Stay observant. Stay observant."))
        assert main(["clean", "-"]) == 0
        assert capsys.readouterr().out == "Stay observant.\n"

    def test_with_windows(self, capsys, windows_file):
        assert main(["clean", "At time_windows[0].", "-w", str(windows_file)]) == 0
        assert "11:45 AM → 12:30 PM" in capsys.readouterr().out

    def test_windows_list_file(self, capsys, tmp_path):
        path = write_json(tmp_path, "list.json", [ABHIJIT])
        assert main(["clean", "time_windows[0]", "-w", path, "--24h"]) == 0
        assert "11:45 → 12:30" in capsys.readouterr().out

    def test_window_numbers(self, capsys, windows_file):
        assert main(["clean", "See window 1", "-w", str(windows_file), "--window-numbers"]) == 0
        assert capsys.readouterr().out == "See 11:45 AM – 12:30 PM\n"

    def test_dedupe_sentences(self, capsys):
        assert main(["clean", "A b c. D e f. A b c.", "--dedupe-sentences", "global"]) == 0
        assert capsys.readouterr().out == "A b c. D e f.\n"

    def test_json_format(self, capsys):
        assert main(["clean", "time_windows[0]", "--format", "json"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["status"] == "success"
        assert "tw-window" in result["text"]

    def test_output_file(self, tmp_path):
        out = tmp_path / "out.txt"
        assert main(["clean", "a\n\n\n\nb", "-o", str(out)]) == 0
        assert out.read_text() == "a\n\nb"

    def test_check_idempotence(self, capsys, windows_file):
        assert main(["clean", "x time_windows[0]", "-w", str(windows_file), "--check-idempotence"]) == 0

    def test_check_idempotence_uses_selected_profile(self, capsys, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("profile:\n  name: custom\nboilerplate_phrases:\n  - Go now.\n")
        seen = {}

        def record(text, windows, options, profile=None, **kwargs):
            seen["profile"] = profile
            return True

        monkeypatch.setattr("twclean.validate.idempotence.check_idempotent", record)
        assert main(["clean", "Go now. Go now.", "--profile", str(path), "--check-idempotence"]) == 0
        assert capsys.readouterr().out == "Go now.\n"
        assert seen["profile"].name == "custom"

    def test_input_file(self, capsys, tmp_path):
        path = tmp_path / "summary.txt"
        path.write_text("Body\nAppendix\nhidden")
        assert main(["clean", str(path)]) == 0
        assert capsys.readouterr().out == "Body\n"


class TestWindowsCommand:
    """twclean windows"""

    def test_builds_windows(self, capsys, windows_file):
        assert main(["windows", str(windows_file)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["name"] == "Abhijit"
        assert data[0]["start_display"] == "11:45 AM"
        assert data[0]["severity"] == "auspicious"

    def test_date_option(self, capsys, tmp_path):
        path = write_json(tmp_path, "p.json", [{"start_display": "6:24 AM"}])
        assert main(["windows", path, "--date", "2025-12-10"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["start_iso"] == "2025-12-10T06:24:00"


class TestMergeCommand:
    """twclean merge"""

    def test_valid_merge(self, capsys, tmp_path):
        ai = write_json(tmp_path, "ai.json", [{"key": "tw_1", "window_index": 1, "summary": "Go"}])
        engine = write_json(tmp_path, "engine.json", [{"name": "A"}, {"name": "B"}])
        assert main(["merge", ai, engine]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["ai_summary"] == "Go"
        assert data[1] == {"name": "B"}

    def test_invalid_falls_back_to_engine(self, capsys, tmp_path):
        ai = write_json(tmp_path, "ai.json", [{"key": "tw_1", "window_index": 1, "summary": ""}])
        engine = write_json(tmp_path, "engine.json", [{"name": "A"}])
        assert main(["merge", ai, engine]) == 1
        captured = capsys.readouterr()
        assert json.loads(captured.out) == [{"name": "A"}]
        assert "failed validation" in captured.err

    def test_strict_count(self, capsys, tmp_path):
        ai = write_json(tmp_path, "ai.json", [{"key": "tw_1", "window_index": 1, "summary": "Go"}])
        engine = write_json(tmp_path, "engine.json", [{"name": "A"}])
        assert main(["merge", ai, engine, "--strict", "--expected-count", "2"]) == 1


def test_no_command(capsys):
    """Without a command the help is printed."""
    assert main([]) == 0
    assert "twclean" in capsys.readouterr().out
