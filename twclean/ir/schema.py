"""
IR Schema — Pydantic models for windows, AI content, and cleaning results.

Windows arrive loosely shaped, so every window model allows extra fields:
whatever the engine or the generator sent is carried through untouched.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from twclean.ir.enums import CleanStatus, DiagnosticLevel, ScoreVariant, Severity

TIME_PLACEHOLDER = "--:--"
SCORE_PLACEHOLDER = "-"


# ============================================================================
# Formatting
# ============================================================================

class FormatOptions(BaseModel):
    """How times are rendered."""

    model_config = ConfigDict(frozen=True)

    slot_minutes: int = Field(default=90, gt=0, description="Width of one numeric slot")
    use_ampm: bool = Field(default=True, description="12-hour clock with AM/PM")
    date: Optional[str] = Field(
        default=None,
        description="ISO date used to build timestamps for display-only windows",
    )


# ============================================================================
# Windows
# ============================================================================

class CanonicalWindow(BaseModel):
    """A window after normalization. Display fields are never empty."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Label, name, title, category, or 'Window N'")
    index: int = Field(default=0, description="Position in the built list")
    start: Any = None
    end: Any = None
    start_iso: Optional[str] = None
    end_iso: Optional[str] = None
    start_display: str = TIME_PLACEHOLDER
    end_display: str = TIME_PLACEHOLDER
    severity: Severity = Severity.NEUTRAL
    score: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    score_text: str = SCORE_PLACEHOLDER
    score_variant: ScoreVariant = ScoreVariant.NEUTRAL
    pakshi_day: Optional[str] = None
    pakshi_night: Optional[str] = None
    pakshi_status: Optional[str] = None
    card_date: Optional[str] = None
    note: Optional[str] = None
    short_desc: Optional[str] = None
    raw: Any = Field(default=None, description="The record this window was built from")


class AiWindowEntry(BaseModel):
    """
    Narrative content for one window, produced by the generator.

    Only key, window_index and summary are checked. Times, score, category,
    interpretation/practical text (and *_html variants) and the metadata bag
    ride along as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    key: str
    window_index: float
    summary: str

    @field_validator("key", mode="before")
    @classmethod
    def _key_is_string(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("key must be a string")
        return value

    @field_validator("window_index", mode="before")
    @classmethod
    def _index_is_number(cls, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("window_index must be a number")
        return value

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_not_blank(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("summary must be a non-empty string")
        return value


class EngineWindow(BaseModel):
    """
    A window computed by the prediction engine.

    Casing variants of the time fields (start_Iso, startISO, startDisplay,
    endISO, endDisplay, ...) are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    name: Any = None
    label: Any = None
    category: Any = None
    score: Any = None
    short_desc: Any = None
    start_iso: Any = None
    end_iso: Any = None
    start_display: Any = None
    end_display: Any = None


class MergedWindow(EngineWindow):
    """Engine window with the matching AI content attached."""

    ai_summary: Optional[str] = None
    interpretation_html: Optional[str] = None
    practical_html: Optional[str] = None
    ai_raw: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        """Only the fields that were actually present or merged."""
        return self.model_dump(exclude_unset=True)


# ============================================================================
# Results
# ============================================================================

class TraceEntry(BaseModel):
    """One recorded pass action."""

    id: str
    timestamp: datetime
    pass_name: str
    action: str
    before: Optional[str] = None
    after: Optional[str] = None


class Diagnostic(BaseModel):
    """A message about something that went wrong or was worked around."""

    id: str
    level: DiagnosticLevel
    code: str
    message: str
    source: str


class CleanResult(BaseModel):
    """Output of one cleaning run."""

    request_id: str
    timestamp: datetime
    processing_duration_ms: float = 0.0
    text: str = ""
    windows: list[CanonicalWindow] = Field(default_factory=list)
    status: CleanStatus = CleanStatus.SUCCESS
    trace: list[TraceEntry] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
