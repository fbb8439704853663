"""
Engine — Runs registered pass sequences over a clean request.

Cleaning rules live in the passes. The engine only looks up the pipeline,
calls each pass with the shared context, and turns the context into a
CleanResult. A pass that raises is skipped: the text goes back to what it
was before that pass and the run carries on with status PARTIAL.
"""

from dataclasses import dataclass
from typing import Optional

from twclean.core.context import CleanContext, CleanRequest
from twclean.core.contracts import PassFn
from twclean.core.logging import CleanLogger, WarningReporter
from twclean.ir.enums import CleanStatus
from twclean.ir.schema import CleanResult
from twclean.profile.models import CleaningProfile


@dataclass
class Pipeline:
    id: str
    name: str
    passes: list[PassFn]


class Engine:
    """Holds pipelines by id and executes them."""

    def __init__(self) -> None:
        self._pipelines: dict[str, Pipeline] = {}

    def register_pipeline(self, pipeline: Pipeline) -> None:
        self._pipelines[pipeline.id] = pipeline

    def has_pipeline(self, pipeline_id: str) -> bool:
        return pipeline_id in self._pipelines

    def list_pipelines(self) -> list[str]:
        return sorted(self._pipelines)

    def run(
        self,
        request: CleanRequest,
        pipeline_id: Optional[str] = None,
        profile: Optional[CleaningProfile] = None,
        reporter: Optional[WarningReporter] = None,
    ) -> CleanResult:
        """
        Clean ``request.text`` with the pipeline registered as ``pipeline_id``.

        ``profile`` and ``reporter`` default to the configured profile and
        the process-wide warning reporter. An unknown pipeline id gives a
        PARTIAL result with the input text and a PIPELINE_NOT_FOUND error.
        """
        pipeline = self._pipelines.get(pipeline_id or "default")
        ctx = CleanContext.from_request(request, profile=profile, reporter=reporter)

        if pipeline is None:
            ctx.status = CleanStatus.PARTIAL
            ctx.add_diagnostic(
                level="error",
                code="PIPELINE_NOT_FOUND",
                message=(
                    f"No pipeline registered as '{pipeline_id or 'default'}' "
                    f"(known: {', '.join(self.list_pipelines()) or 'none'})"
                ),
                source="engine",
            )
            return ctx.to_result()

        clog = CleanLogger(ctx.request.request_id)
        for pass_fn in pipeline.passes:
            ctx = self._run_pass(pass_fn, ctx, clog)

        clog.clean_complete(
            status=ctx.status.value,
            length=len(ctx.text),
            windows=len(ctx.windows or []),
            diagnostics=len(ctx.diagnostics),
        )
        return ctx.to_result()

    def _run_pass(self, pass_fn: PassFn, ctx: CleanContext, clog: CleanLogger) -> CleanContext:
        name = getattr(pass_fn, "__name__", repr(pass_fn))
        text_before = ctx.text
        clog.pass_start(name)
        try:
            ctx = pass_fn(ctx)
        except Exception as exc:
            clog.pass_error(name, exc)
            ctx.text = text_before
            ctx.status = CleanStatus.PARTIAL
            ctx.add_diagnostic(
                level="error",
                code="PASS_ERROR",
                message=f"{name} raised {type(exc).__name__}: {exc}",
                source="engine",
            )
            ctx.add_trace(pass_name=name, action="error")
            return ctx
        clog.pass_end(name, length=len(ctx.text))
        return ctx


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """The shared engine, created on first use."""
    global _engine
    if _engine is None:
        _engine = Engine()
    return _engine
