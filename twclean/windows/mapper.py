"""
AI/Engine Window Mapper — Validate generated window content and attach it
to engine windows by position.

Engine windows are authoritative: their order, length and times are never
changed. AI content only fills in narrative fields, plus category and score
where the engine left them empty.
"""

import re
from typing import Any, Optional

from pydantic import ValidationError

from twclean.core.logging import LogChannel, get_logger
from twclean.ir.schema import AiWindowEntry, MergedWindow

log = get_logger(LogChannel.MERGE)

DEFAULT_EXPECTED_COUNT = 16
TIME_FIELDS = ("start_iso", "start_display", "end_iso", "end_display")

_KEY_INDEX = re.compile(r"tw_(\d+)", re.IGNORECASE)


def validate_ai_windows(
    ai_windows: Any,
    expected_count: int = DEFAULT_EXPECTED_COUNT,
    strict: bool = False,
) -> bool:
    """
    Check generated window content before merging.

    Strict mode needs at least ``expected_count`` entries, otherwise one is
    enough. Every entry needs a string key, a numeric window_index and a
    non-blank summary. Entries without any time field are only logged.
    """
    if not isinstance(ai_windows, list):
        log.error("ai_windows_not_list", type=type(ai_windows).__name__)
        return False

    min_required = expected_count if strict else 1
    if len(ai_windows) < min_required:
        log.warning(
            "ai_windows_too_short",
            count=len(ai_windows),
            required=min_required,
            strict=strict,
        )
        return False

    for i, entry in enumerate(ai_windows):
        if not isinstance(entry, dict):
            log.error("ai_window_not_mapping", index=i, type=type(entry).__name__)
            return False
        try:
            AiWindowEntry.model_validate(entry)
        except ValidationError as e:
            log.error(
                "ai_window_invalid",
                index=i,
                fields=[".".join(str(p) for p in err["loc"]) for err in e.errors()],
            )
            return False

        if not any(isinstance(entry.get(f), str) for f in TIME_FIELDS):
            log.verbose("ai_window_without_times", index=i)

    return True


def resolve_ai_index(entry: Any) -> Optional[int]:
    """
    0-based engine position for an AI entry.

    A positive integer window_index is 1-based. Otherwise the number in a
    ``tw_<N>`` key is used as-is. None when neither works.
    """
    if not isinstance(entry, dict):
        return None

    window_index = entry.get("window_index")
    if (
        isinstance(window_index, (int, float))
        and not isinstance(window_index, bool)
        and float(window_index).is_integer()
        and window_index >= 1
    ):
        return int(window_index) - 1

    key = entry.get("key")
    if isinstance(key, str):
        match = _KEY_INDEX.search(key)
        if match:
            return int(match.group(1))
    return None


def _first_text(*values: Any) -> str:
    for value in values:
        if isinstance(value, str) and value:
            return value
    return ""


def _to_merged(data: dict[str, Any], index: int) -> MergedWindow:
    try:
        return MergedWindow.model_validate(data)
    except ValidationError as e:
        log.warning(
            "merged_window_unvalidated",
            index=index,
            fields=[".".join(str(p) for p in err["loc"]) for err in e.errors()],
        )
        return MergedWindow.model_construct(**{k: v for k, v in data.items() if isinstance(k, str)})


def _merge_one(engine_window: dict[str, Any], ai: dict[str, Any], index: int) -> MergedWindow:
    merged = dict(engine_window)
    merged["ai_summary"] = _first_text(ai.get("summary"), ai.get("interpretation"), ai.get("practical"))
    merged["interpretation_html"] = _first_text(ai.get("interpretation_html"), ai.get("interpretation"))
    merged["practical_html"] = _first_text(ai.get("practical_html"), ai.get("practical"))
    merged["ai_raw"] = ai

    if not merged.get("category") and ai.get("category"):
        merged["category"] = ai["category"]
    ai_score = ai.get("score")
    if merged.get("score") is None and isinstance(ai_score, (int, float)) and not isinstance(ai_score, bool):
        merged["score"] = ai_score

    return _to_merged(merged, index)


def map_ai_windows_to_engine_windows(
    ai_windows: Any,
    engine_windows: Any,
) -> list[Any]:
    """
    Merge AI content into engine windows by index.

    The result has exactly the engine list's length and order. When two AI
    entries claim the same position the later one wins. Engine entries that
    are not mappings are passed through as they are.
    """
    if not isinstance(engine_windows, list):
        return []

    by_index: dict[int, dict[str, Any]] = {}
    for entry in ai_windows if isinstance(ai_windows, list) else []:
        index = resolve_ai_index(entry)
        if index is None:
            log.warning(
                "ai_window_unmapped",
                key=entry.get("key") if isinstance(entry, dict) else None,
            )
            continue
        by_index[index] = entry

    result: list[Any] = []
    mapped = 0
    for index, engine_window in enumerate(engine_windows):
        if not isinstance(engine_window, dict):
            log.verbose("engine_window_passed_through", index=index, type=type(engine_window).__name__)
            result.append(engine_window)
            continue
        ai = by_index.get(index)
        if ai is None:
            result.append(_to_merged(engine_window, index))
            continue
        result.append(_merge_one(engine_window, ai, index))
        mapped += 1

    log.info("windows_merged", engine=len(engine_windows), mapped=mapped)
    return result
