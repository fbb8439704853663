"""Shared fixtures: every test starts with a fresh reporter and profile cache."""

import pytest

from twclean.core.logging import reset_warning_flag
from twclean.profile.loader import clear_cache


@pytest.fixture(autouse=True)
def fresh_state():
    reset_warning_flag()
    clear_cache()
    yield
    reset_warning_flag()
    clear_cache()


class RecordingLogger:
    """Stands in for a ChannelLogger and remembers warnings."""

    def __init__(self):
        self.warnings: list[tuple[str, dict]] = []

    def warning(self, event: str, **kwargs) -> None:
        self.warnings.append((event, kwargs))


@pytest.fixture
def recording_logger():
    return RecordingLogger()
