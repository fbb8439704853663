"""
Window Normalizer — Turn one loosely-shaped window record into a CanonicalWindow.

Severity resolution order:
1. An explicit severity-ish field (severity, impact, status, ght_status,
   pakshi_status) mapped through the profile's keyword families.
2. The category (or type) mapped the same way.
3. The score: >= AUSPICIOUS_MIN_SCORE is auspicious, <= INAUSPICIOUS_MAX_SCORE
   is inauspicious, anything between is neutral.
4. Neutral.

The score variant uses the same cutoffs and is forced to neutral whenever
it would point the other way from the severity.
"""

import math
import re
from typing import Any, Optional

from twclean.core.logging import LogChannel, get_logger
from twclean.ir.enums import ScoreVariant, Severity
from twclean.ir.schema import SCORE_PLACEHOLDER, TIME_PLACEHOLDER, CanonicalWindow, FormatOptions
from twclean.profile.loader import get_profile
from twclean.profile.models import CleaningProfile, SeverityKeywords
from twclean.windows.blobs import (
    OPENERS,
    find_balanced_end,
    iter_blob_spans,
    looks_like_raw_data,
    parse_blob,
)
from twclean.windows.timeparse import (
    card_date_for,
    construct_iso,
    format_time,
    get_window_label,
    parse_iso,
    window_field,
)

log = get_logger(LogChannel.WINDOWS)

AUSPICIOUS_MIN_SCORE = 7.0
INAUSPICIOUS_MAX_SCORE = 3.0
MIN_SCORE = 0.0
MAX_SCORE = 10.0

WINDOWS_MARKER = "__windows_json__"

SEVERITY_FIELDS = ("severity", "impact", "status", "ght_status", "pakshi_status")
DAY_PAKSHI_FIELDS = ("pakshi_day", "day_ruling_pakshi", "day_pakshi", "pakshi", "dayPakshi")
NIGHT_PAKSHI_FIELDS = ("pakshi_night", "night_ruling_pakshi", "night_pakshi", "nightPakshi")

_MARKER_GAP = re.compile(r"[\s:]*")


# ============================================================================
# Score and severity
# ============================================================================

def normalize_score(value: Any) -> Optional[float]:
    """Numeric score clamped to 0–10, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return max(MIN_SCORE, min(MAX_SCORE, float(value)))


def get_score_text(score: Optional[float]) -> str:
    """One decimal place, no trailing ``.0``; "-" without a score."""
    if score is None:
        return SCORE_PLACEHOLDER
    rounded = round(score, 1)
    if rounded.is_integer():
        return str(int(rounded))
    return str(rounded)


def get_score_variant(score: Optional[float]) -> ScoreVariant:
    if score is None:
        return ScoreVariant.NEUTRAL
    if score >= AUSPICIOUS_MIN_SCORE:
        return ScoreVariant.GOOD
    if score <= INAUSPICIOUS_MAX_SCORE:
        return ScoreVariant.BAD
    return ScoreVariant.NEUTRAL


def severity_from_score(score: Optional[float]) -> Optional[Severity]:
    if score is None:
        return None
    if score >= AUSPICIOUS_MIN_SCORE:
        return Severity.AUSPICIOUS
    if score <= INAUSPICIOUS_MAX_SCORE:
        return Severity.INAUSPICIOUS
    return Severity.NEUTRAL


def map_severity_text(value: Any, keywords: SeverityKeywords) -> Optional[Severity]:
    """Map free text (a severity label or a category) to a severity."""
    if value is None or value == "" or isinstance(value, (dict, list)):
        return None
    return keywords.classify(str(value))


def determine_severity(
    record: dict[str, Any],
    score: Optional[float],
    keywords: SeverityKeywords,
) -> Severity:
    for key in SEVERITY_FIELDS:
        explicit = record.get(key)
        if explicit:
            mapped = map_severity_text(explicit, keywords)
            if mapped is not None:
                return mapped
            # first present field decides, as long as it means something
            break

    category = record.get("category") or record.get("type")
    mapped = map_severity_text(category, keywords)
    if mapped is not None:
        return mapped

    return severity_from_score(score) or Severity.NEUTRAL


def reconcile_variant(variant: ScoreVariant, severity: Severity) -> ScoreVariant:
    """Neutralize a score variant that contradicts the severity."""
    if variant == ScoreVariant.GOOD and severity == Severity.INAUSPICIOUS:
        return ScoreVariant.NEUTRAL
    if variant == ScoreVariant.BAD and severity == Severity.AUSPICIOUS:
        return ScoreVariant.NEUTRAL
    return variant


# ============================================================================
# Embedded blobs
# ============================================================================

def _as_mapping(parsed: Any) -> Optional[dict[str, Any]]:
    if isinstance(parsed, dict):
        return parsed
    if isinstance(parsed, list) and parsed and isinstance(parsed[0], dict):
        return parsed[0]
    return None


def parse_embedded_blob(note: Optional[str]) -> tuple[Optional[dict[str, Any]], str]:
    """
    Pull a data blob out of a window note.

    Returns (embedded fields or None, the note with the blob removed). With a
    marker the marker is always removed; without one the note is returned
    unchanged when no blob parses.
    """
    if not note:
        return None, ""

    idx = note.lower().find(WINDOWS_MARKER)
    if idx == -1:
        for start, end in iter_blob_spans(note):
            embedded = _as_mapping(parse_blob(note[start:end]))
            if embedded is not None:
                return embedded, note[:start] + note[end:]
        return None, note

    after = idx + len(WINDOWS_MARKER)
    cursor = _MARKER_GAP.match(note, after).end()
    if cursor < len(note) and note[cursor] in OPENERS:
        end = find_balanced_end(note, cursor)
        if end is not None:
            embedded = _as_mapping(parse_blob(note[cursor:end]))
            if embedded is not None:
                return embedded, note[:idx] + note[end:]
            log.debug("embedded_blob_unparsed", length=end - cursor)

    return None, note[:idx] + note[after:]


# ============================================================================
# Normalization
# ============================================================================

def normalize_pakshi(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict) and value.get("pakshi"):
        return normalize_pakshi(value["pakshi"])
    return None


def _first(record: dict[str, Any], keys: tuple[str, ...]) -> Any:
    return window_field(record, *keys)


def _resolve_iso(record: dict[str, Any], iso_keys: tuple[str, ...], raw_key: str) -> Optional[str]:
    value = _first(record, iso_keys)
    if isinstance(value, str) and parse_iso(value) is not None:
        return value
    raw = record.get(raw_key)
    if isinstance(raw, str) and parse_iso(raw) is not None:
        return raw
    return None


def _display(record: dict[str, Any], keys: tuple[str, ...], iso: Optional[str], raw: Any,
             options: FormatOptions) -> str:
    verbatim = _first(record, keys)
    if isinstance(verbatim, str) and verbatim.strip():
        return verbatim
    return format_time(iso, options) or format_time(raw, options) or TIME_PLACEHOLDER


def normalize_time_window(
    raw: Any,
    index: int = 0,
    options: Optional[FormatOptions] = None,
    profile: Optional[CleaningProfile] = None,
) -> CanonicalWindow:
    """
    Normalize one raw window record.

    Accepts a mapping, a bare slot/time value (taken as ``start``), or
    anything else (treated as an empty record). Never raises.
    """
    # Imported here: the stripper pass imports the windows package
    from twclean.passes.p20_strip_debug import strip_debug_blocks

    options = options or FormatOptions()
    profile = profile or get_profile()

    if isinstance(raw, dict):
        record = dict(raw)
    elif isinstance(raw, (str, int, float)) and not isinstance(raw, bool):
        record = {"start": raw}
    else:
        record = {}

    note_source = _first(record, ("note", "short_desc", "description"))
    embedded, remaining_note = parse_embedded_blob(note_source if isinstance(note_source, str) else None)
    if embedded:
        log.verbose("embedded_blob_merged", index=index, keys=sorted(embedded)[:10])
        record = {**record, **embedded}

    name = get_window_label(record, index)

    start_iso = _resolve_iso(record, ("start_iso", "startISO", "start_Iso"), "start")
    end_iso = _resolve_iso(record, ("end_iso", "endISO", "end_Iso"), "end")
    if options.date:
        if not start_iso:
            start_iso = construct_iso(options.date, _first(record, ("start_display", "startDisplay")))
        if not end_iso:
            end_iso = construct_iso(options.date, _first(record, ("end_display", "endDisplay")))

    start_display = _display(
        record, ("start_display", "startDisplay"), start_iso,
        _first(record, ("start", "start_iso", "startISO")), options,
    )
    end_display = _display(
        record, ("end_display", "endDisplay"), end_iso,
        _first(record, ("end", "end_iso", "endISO")), options,
    )

    score = normalize_score(record.get("score"))
    severity = determine_severity(record, score, profile.severity_keywords)
    variant = reconcile_variant(get_score_variant(score), severity)

    card_date = record.get("card_date") or (card_date_for(start_iso) if start_iso else None)

    short_desc_source = _first(record, ("short_desc", "description"))
    short_desc = strip_debug_blocks(
        short_desc_source if isinstance(short_desc_source, str) else remaining_note
    ) or None
    cleaned_note = strip_debug_blocks(remaining_note)
    note = short_desc if looks_like_raw_data(cleaned_note) else cleaned_note

    pakshi_status = _first(record, ("pakshi_status", "ght_status"))

    extras = {
        k: v for k, v in record.items()
        if isinstance(k, str) and not k.startswith("_") and k not in CanonicalWindow.model_fields
    }
    return CanonicalWindow(
        **extras,
        name=name,
        index=index,
        start=record.get("start"),
        end=record.get("end"),
        start_iso=start_iso,
        end_iso=end_iso,
        start_display=start_display,
        end_display=end_display,
        severity=severity,
        score=score,
        score_text=get_score_text(score),
        score_variant=variant,
        pakshi_day=normalize_pakshi(_first(record, DAY_PAKSHI_FIELDS)),
        pakshi_night=normalize_pakshi(_first(record, NIGHT_PAKSHI_FIELDS)),
        pakshi_status=str(pakshi_status) if pakshi_status is not None else None,
        card_date=str(card_date) if card_date else None,
        note=note,
        short_desc=short_desc,
        raw=raw,
    )
