"""
Window Builder — Extract, dedupe and normalize the windows in a payload.

Payloads put the window list in different places depending on which
backend produced them. Each extraction strategy looks in one place; the
first one that finds a list wins.
"""

import json
from typing import Any, Callable, Optional

from twclean.core.logging import LogChannel, get_logger
from twclean.ir.schema import CanonicalWindow, FormatOptions
from twclean.profile.models import CleaningProfile
from twclean.windows.dedupe import dedupe_time_windows
from twclean.windows.normalize import normalize_time_window

log = get_logger(LogChannel.WINDOWS)

Strategy = Callable[[dict[str, Any]], Optional[list]]


def _top_level(data: dict[str, Any]) -> Optional[list]:
    value = data.get("time_windows")
    return value if isinstance(value, list) else None


def _layers_mapping(data: dict[str, Any]) -> Optional[list]:
    layers = data.get("layers")
    if isinstance(layers, dict) and isinstance(layers.get("time_windows"), list):
        return layers["time_windows"]
    return None


def _layers_json_text(data: dict[str, Any]) -> Optional[list]:
    layers = data.get("layers")
    if not isinstance(layers, str):
        return None
    try:
        decoded = json.loads(layers)
    except ValueError:
        log.verbose("layers_not_json", length=len(layers))
        return None
    if isinstance(decoded, dict) and isinstance(decoded.get("time_windows"), list):
        return decoded["time_windows"]
    return None


def _debug_layers(data: dict[str, Any]) -> Optional[list]:
    debug = data.get("debug")
    if not isinstance(debug, dict):
        return None
    layers = debug.get("layers")
    if isinstance(layers, dict) and isinstance(layers.get("time_windows"), list):
        return layers["time_windows"]
    return None


EXTRACTION_STRATEGIES: list[tuple[str, Strategy]] = [
    ("time_windows", _top_level),
    ("layers.time_windows", _layers_mapping),
    ("layers(json).time_windows", _layers_json_text),
    ("debug.layers.time_windows", _debug_layers),
]


def extract_raw_windows(data: Any) -> list:
    """Raw window entries from the first strategy that finds a list."""
    if not isinstance(data, dict):
        return []
    for name, strategy in EXTRACTION_STRATEGIES:
        found = strategy(data)
        if found is not None:
            log.debug("windows_extracted", strategy=name, count=len(found))
            return found
    return []


def build_time_windows(
    data: Any,
    options: Optional[FormatOptions] = None,
    profile: Optional[CleaningProfile] = None,
) -> list[CanonicalWindow]:
    """
    Build the canonical window list for a payload.

    Raw entries are deduplicated before normalization, so two records that
    differ only in fields the normalizer fills in still count as one.
    """
    raw_windows = extract_raw_windows(data)
    unique = dedupe_time_windows(raw_windows)
    if len(unique) != len(raw_windows):
        log.verbose("windows_deduped", before=len(raw_windows), after=len(unique))

    windows = [
        normalize_time_window(raw, index, options, profile)
        for index, raw in enumerate(unique)
    ]
    log.info("windows_built", count=len(windows))
    return windows
