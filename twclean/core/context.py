"""
CleanContext — Mutable state passed between pipeline passes.

Each pass reads the current text and windows and replaces only the text.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from twclean.core.logging import WarningReporter, get_reporter
from twclean.ir.enums import CleanStatus, DiagnosticLevel
from twclean.ir.schema import (
    CanonicalWindow,
    CleanResult,
    Diagnostic,
    FormatOptions,
    TraceEntry,
)
from twclean.profile.loader import get_profile
from twclean.profile.models import CleaningProfile


@dataclass
class CleanRequest:
    """Input to the cleaning pipeline."""

    text: Optional[str]
    windows: Optional[list[Any]] = None
    options: FormatOptions = field(default_factory=FormatOptions)
    request_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.request_id is None:
            self.request_id = str(uuid4())


@dataclass
class CleanContext:
    """
    Mutable context passed through pipeline passes.

    ``windows`` is None when the caller supplied no list at all, which the
    token expander reports differently from an empty list.
    """

    # Input
    request: CleanRequest
    raw_text: str
    text: str = ""
    windows: Optional[list[Any]] = None
    options: FormatOptions = field(default_factory=FormatOptions)
    profile: Optional[CleaningProfile] = None
    reporter: WarningReporter = field(default_factory=get_reporter)

    # Trace and diagnostics
    trace: list[TraceEntry] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    # Output
    status: CleanStatus = CleanStatus.SUCCESS

    # Internal
    start_time: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_request(
        cls,
        request: CleanRequest,
        profile: Optional[CleaningProfile] = None,
        reporter: Optional[WarningReporter] = None,
    ) -> "CleanContext":
        """Create context from a request."""
        raw = request.text or ""
        return cls(
            request=request,
            raw_text=raw,
            text=raw,
            windows=request.windows,
            options=request.options,
            profile=profile or get_profile(),
            reporter=reporter or get_reporter(),
        )

    def add_trace(self, pass_name: str, action: str, **kwargs: Any) -> None:
        """Add a trace entry."""
        self.trace.append(
            TraceEntry(
                id=str(uuid4()),
                timestamp=datetime.now(),
                pass_name=pass_name,
                action=action,
                before=kwargs.get("before"),
                after=kwargs.get("after"),
            )
        )

    def add_diagnostic(self, level: str, code: str, message: str, source: str) -> None:
        """Add a diagnostic message."""
        self.diagnostics.append(
            Diagnostic(
                id=str(uuid4()),
                level=DiagnosticLevel(level),
                code=code,
                message=message,
                source=source,
            )
        )

    def canonical_windows(self) -> list[CanonicalWindow]:
        """The windows that are already canonical, for the result."""
        return [w for w in self.windows or [] if isinstance(w, CanonicalWindow)]

    def to_result(self) -> CleanResult:
        """Convert context to final CleanResult."""
        duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000
        return CleanResult(
            request_id=self.request.request_id or str(uuid4()),
            timestamp=self.start_time,
            processing_duration_ms=duration_ms,
            text=self.text,
            windows=self.canonical_windows(),
            status=self.status,
            trace=self.trace,
            diagnostics=self.diagnostics,
        )
