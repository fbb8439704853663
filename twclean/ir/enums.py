"""
IR Enums — Severity, score and status codes.

No stringly-typed constants scattered across passes.
"""

from enum import Enum


class Severity(str, Enum):
    """Coarse classification of a time window."""

    AUSPICIOUS = "auspicious"
    INAUSPICIOUS = "inauspicious"
    NEUTRAL = "neutral"


class ScoreVariant(str, Enum):
    """Styling variant for a window score. Always agrees with Severity."""

    GOOD = "good"
    NEUTRAL = "neutral"
    BAD = "bad"


class CleanStatus(str, Enum):
    """Outcome of a cleaning run."""

    SUCCESS = "success"
    PARTIAL = "partial"    # At least one pass failed and was skipped


class DiagnosticLevel(str, Enum):
    """Severity of a diagnostic message."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
