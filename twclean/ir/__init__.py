"""IR — Window models, enums, and serialization."""

from twclean.ir.enums import CleanStatus, DiagnosticLevel, ScoreVariant, Severity
from twclean.ir.schema import (
    SCORE_PLACEHOLDER,
    TIME_PLACEHOLDER,
    AiWindowEntry,
    CanonicalWindow,
    CleanResult,
    Diagnostic,
    EngineWindow,
    FormatOptions,
    MergedWindow,
    TraceEntry,
)

__all__ = [
    "SCORE_PLACEHOLDER",
    "TIME_PLACEHOLDER",
    "AiWindowEntry",
    "CanonicalWindow",
    "CleanResult",
    "CleanStatus",
    "Diagnostic",
    "DiagnosticLevel",
    "EngineWindow",
    "FormatOptions",
    "MergedWindow",
    "ScoreVariant",
    "Severity",
    "TraceEntry",
]
