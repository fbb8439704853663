"""
Channel-Aware Structured Logging for twclean.

Every message goes to one channel:
- PIPELINE: pass start/end, timing
- TRANSFORM: text stripping and collapsing passes
- WINDOWS: window parsing, normalization, building
- MERGE: AI/engine window validation and merging
- RENDER: token expansion and hint rendering
- SYSTEM: errors, warnings, status

Levels: SILENT (0), INFO (1), VERBOSE (2), DEBUG (3). Warnings and errors
are shown at every level except SILENT.

Environment:
- TWCLEAN_LOG_LEVEL: silent/info/verbose/debug
- TWCLEAN_LOG_FORMAT: console/json
- TWCLEAN_LOG_CHANNELS: comma-separated channel filter (all if not set)

Output goes to stderr.
"""

import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Iterable, Optional, Union

import structlog


class LogLevel(IntEnum):
    """Log verbosity levels."""
    SILENT = 0
    INFO = 1
    VERBOSE = 2
    DEBUG = 3

    @classmethod
    def from_string(cls, s: str) -> "LogLevel":
        """Parse a level name; stdlib names and unknown values map to INFO."""
        try:
            return cls[s.strip().upper()]
        except KeyError:
            return cls.INFO


class LogChannel(str, Enum):
    """Semantic log channels."""
    PIPELINE = "PIPELINE"
    TRANSFORM = "TRANSFORM"
    WINDOWS = "WINDOWS"
    MERGE = "MERGE"
    RENDER = "RENDER"
    SYSTEM = "SYSTEM"

    @classmethod
    def all(cls) -> list["LogChannel"]:
        return list(cls)

    @classmethod
    def from_string(cls, s: str) -> Optional["LogChannel"]:
        try:
            return cls(s.strip().upper())
        except ValueError:
            return None


# =============================================================================
# Configuration
# =============================================================================

_request_context: ContextVar[dict] = ContextVar("twclean_log_context", default={})

_config = {
    "level": LogLevel.INFO,
    "format": "console",
    "channels": set(LogChannel.all()),
    "configured": False,
}

_STDLIB_LEVELS = {
    LogLevel.SILENT: logging.CRITICAL + 10,
    LogLevel.INFO: logging.INFO,
    LogLevel.VERBOSE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
}


def _parse_channels(values: Iterable[Union[LogChannel, str]]) -> list[LogChannel]:
    parsed = []
    for value in values:
        if isinstance(value, LogChannel):
            parsed.append(value)
        elif value and value.strip():
            channel = LogChannel.from_string(value)
            if channel is not None:
                parsed.append(channel)
    return parsed


def _processors(fmt: str) -> list:
    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if fmt == "json":
        return shared + [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return shared + [structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(
    level: Union[LogLevel, str, None] = None,
    format: Optional[str] = None,
    channels: Optional[list[Union[LogChannel, str]]] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Arguments left as None are read from the environment. Does nothing
    when already configured, unless ``force`` is set.
    """
    if _config["configured"] and not force:
        return

    if level is None:
        level = os.environ.get("TWCLEAN_LOG_LEVEL", "info")
    if isinstance(level, str):
        level = LogLevel.from_string(level)

    format = format or os.environ.get("TWCLEAN_LOG_FORMAT", "console")

    if channels is None:
        selected = _parse_channels(os.environ.get("TWCLEAN_LOG_CHANNELS", "").split(","))
        selected = selected or LogChannel.all()
    else:
        selected = _parse_channels(channels)

    _config.update(level=level, format=format, channels=set(selected))

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=_STDLIB_LEVELS.get(level, logging.INFO),
        force=True,
    )
    structlog.configure(
        processors=_processors(format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _config["configured"] = True


def get_current_config() -> dict:
    """The active logging configuration, for tests and debugging."""
    return {
        "level": _config["level"].name,
        "format": _config["format"],
        "channels": sorted(ch.value for ch in _config["channels"]),
    }


# =============================================================================
# Channel Logger
# =============================================================================

class ChannelLogger:
    """
    A structlog logger bound to one channel.

    ``info`` needs INFO, ``verbose`` needs VERBOSE and ``debug`` needs
    DEBUG, and all three respect the channel filter. ``warning`` and
    ``error`` ignore the filter and only stop at SILENT.
    """

    def __init__(self, channel: LogChannel, name: Optional[str] = None, pass_name: Optional[str] = None):
        self.channel = channel
        self.name = name or f"twclean.{channel.value.lower()}"
        self.pass_name = pass_name
        self._logger = structlog.get_logger(self.name)

    def _enabled(self, min_level: LogLevel, filtered: bool = True) -> bool:
        if _config["level"] == LogLevel.SILENT:
            return False
        if filtered and self.channel not in _config["channels"]:
            return False
        return _config["level"] >= min_level

    def _emit(self, method: str, event: str, **kwargs: Any) -> None:
        fields = {"channel": self.channel.value, **kwargs}
        if self.pass_name:
            fields["pass"] = self.pass_name
        fields.update(_request_context.get())
        getattr(self._logger, method)(event, **fields)

    def info(self, event: str, **kwargs: Any) -> None:
        if self._enabled(LogLevel.INFO):
            self._emit("info", event, **kwargs)

    def verbose(self, event: str, **kwargs: Any) -> None:
        if self._enabled(LogLevel.VERBOSE):
            self._emit("debug", event, detail="verbose", **kwargs)

    def debug(self, event: str, **kwargs: Any) -> None:
        if self._enabled(LogLevel.DEBUG):
            self._emit("debug", event, detail="debug", **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        if self._enabled(LogLevel.INFO, filtered=False):
            self._emit("warning", event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        if self._enabled(LogLevel.INFO, filtered=False):
            self._emit("error", event, **kwargs)


# =============================================================================
# Warning Reporter
# =============================================================================

class WarningReporter:
    """
    Emits each keyed diagnostic warning at most once until reset.

    Only affects log noise. Pass an instance explicitly to isolate a caller
    (or a test) from the process-wide default.
    """

    def __init__(self, logger: Optional[ChannelLogger] = None):
        self._logger = logger
        self._seen: set[str] = set()

    @property
    def logger(self) -> ChannelLogger:
        if self._logger is None:
            self._logger = get_logger(LogChannel.SYSTEM)
        return self._logger

    def warn_once(self, key: str, event: str, **kwargs: Any) -> bool:
        """Log ``event`` unless ``key`` was already reported. Returns True if logged."""
        if key in self._seen:
            return False
        self._seen.add(key)
        self.logger.warning(event, **kwargs)
        return True

    def has_warned(self, key: str) -> bool:
        return key in self._seen

    def reset(self) -> None:
        self._seen.clear()


_default_reporter = WarningReporter()


def get_reporter() -> WarningReporter:
    """The process-wide default warning reporter."""
    return _default_reporter


def reset_warning_flag() -> None:
    """Forget every warning the default reporter has emitted."""
    _default_reporter.reset()


# =============================================================================
# Logger factories
# =============================================================================

# Pass number prefix -> channel
_PASS_CHANNELS = {
    "p10": LogChannel.TRANSFORM,
    "p20": LogChannel.TRANSFORM,
    "p30": LogChannel.RENDER,
    "p32": LogChannel.RENDER,
    "p35": LogChannel.RENDER,
    "p40": LogChannel.RENDER,
    "p50": LogChannel.TRANSFORM,
    "p60": LogChannel.TRANSFORM,
    "p65": LogChannel.TRANSFORM,
    "p70": LogChannel.PIPELINE,
}


def get_logger(channel: Union[LogChannel, str] = LogChannel.SYSTEM) -> ChannelLogger:
    """Get a channel-specific logger."""
    configure_logging()
    if isinstance(channel, str):
        channel = LogChannel.from_string(channel) or LogChannel.SYSTEM
    return ChannelLogger(channel=channel)


def get_pass_logger(pass_name: str, channel: Optional[LogChannel] = None) -> ChannelLogger:
    """
    Get a logger for a pipeline pass.

    The channel comes from the pass number prefix unless given.
    """
    configure_logging()
    channel = channel or _PASS_CHANNELS.get(pass_name[:3], LogChannel.PIPELINE)
    return ChannelLogger(channel=channel, name=f"twclean.{pass_name}", pass_name=pass_name)


def bind_request_context(**kwargs: Any) -> None:
    """Bind fields that are added to every message until cleared."""
    _request_context.set({**_request_context.get(), **kwargs})


def clear_request_context() -> None:
    _request_context.set({})


# =============================================================================
# CleanLogger
# =============================================================================

class CleanLogger:
    """
    Logger for one cleaning run.

    Binds the request id to every message and times each pass.
    """

    def __init__(self, request_id: str):
        self.request_id = request_id
        self._log = get_logger(LogChannel.PIPELINE)
        self._start_time = datetime.now()
        self._pass_started: dict[str, datetime] = {}
        bind_request_context(request_id=request_id)

    def _elapsed_ms(self, since: datetime) -> float:
        return round((datetime.now() - since).total_seconds() * 1000, 2)

    def pass_start(self, pass_name: str) -> None:
        self._pass_started[pass_name] = datetime.now()
        self._log.verbose("pass_started", pass_name=pass_name)

    def pass_end(self, pass_name: str, **metrics: Any) -> None:
        started = self._pass_started.pop(pass_name, datetime.now())
        self._log.verbose("pass_completed", pass_name=pass_name, duration_ms=self._elapsed_ms(started), **metrics)

    def pass_error(self, pass_name: str, error: Exception) -> None:
        self._pass_started.pop(pass_name, None)
        self._log.error("pass_failed", pass_name=pass_name, error=str(error), error_type=type(error).__name__)

    def clean_complete(self, status: str, **metrics: Any) -> None:
        """Log the run summary and drop the bound request context."""
        self._log.info(
            "clean_complete",
            status=status,
            total_duration_ms=self._elapsed_ms(self._start_time),
            **metrics,
        )
        clear_request_context()
