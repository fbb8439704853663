"""
Pass 65 — Near-Duplicate Sentence Removal (optional)

Sentences (or bullet items) that say the same thing twice are dropped.
Two units are duplicates when the Jaccard similarity of their normalized
word sets reaches the threshold. In ``consecutive`` mode a unit is only
compared with the previous kept unit; in ``global`` mode with every kept
unit so far.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional, Sequence

from twclean.core.context import CleanContext
from twclean.core.logging import get_pass_logger
from twclean.profile.loader import get_profile

PASS_NAME = "p65_dedupe_sentences"
log = get_pass_logger(PASS_NAME)

DEFAULT_THRESHOLD = 0.9
MODES = ("consecutive", "global")

_BULLET = re.compile(r"^\s*(?:[-*•]|\d+\.)\s+")
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SMART_QUOTES = str.maketrans({"\u201c": "\"", "\u201d": "\"", "\u2018": "'", "\u2019": "'", "\u00a0": " "})


@dataclass
class Unit:
    text: str
    normalized: str


def normalize_for_comparison(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text.translate(_SMART_QUOTES).lower())
    chars = []
    for ch in decomposed:
        category = unicodedata.category(ch)
        if category == "Mn":
            continue
        chars.append(" " if category[0] in ("P", "S") else ch)
    return " ".join("".join(chars).split())


def jaccard_similarity(a: str, b: str) -> float:
    if not a or not b:
        return 0.0
    set_a, set_b = set(a.split()), set(b.split())
    union = set_a | set_b
    return len(set_a & set_b) / len(union) if union else 0.0


def _units(paragraph: str) -> tuple[list[Unit], bool]:
    lines = [line.strip() for line in paragraph.split("\n") if line.strip()]
    is_bullet = bool(lines) and all(_BULLET.match(line) for line in lines)
    if is_bullet:
        pieces = lines
    else:
        flat = " ".join(lines)
        pieces = [s.strip() for s in _SENTENCE_BREAK.split(flat) if s.strip()]
    return [Unit(p, normalize_for_comparison(p)) for p in pieces], is_bullet


def dedupe_sentences_in_text(
    text: Optional[str],
    mode: str = "consecutive",
    threshold: float = DEFAULT_THRESHOLD,
    collapse_phrases: Optional[Sequence[str]] = None,
) -> str:
    """Drop repeated sentences. Paragraphs are rejoined with one blank line."""
    if not text:
        return ""
    if mode not in MODES:
        raise ValueError(f"Unknown dedupe mode: {mode}")
    if collapse_phrases is None:
        collapse_phrases = get_profile().boilerplate_phrases
    collapse = {normalize_for_comparison(p) for p in collapse_phrases if p.strip()}

    seen: list[Unit] = []
    removed = 0
    paragraphs = []
    for paragraph in _PARAGRAPH_BREAK.split(text):
        units, is_bullet = _units(paragraph)
        kept: list[Unit] = []
        for unit in units:
            last = kept[-1] if kept else None
            if unit.normalized:
                if last and unit.normalized in collapse and unit.normalized == last.normalized:
                    removed += 1
                    continue
                candidates = seen if mode == "global" else ([last] if last else [])
                if any(jaccard_similarity(c.normalized, unit.normalized) >= threshold for c in candidates):
                    removed += 1
                    continue
            kept.append(unit)
            if mode == "global":
                seen.append(unit)
        joined = ("\n" if is_bullet else " ").join(u.text for u in kept)
        if joined.strip():
            paragraphs.append(joined)

    if removed:
        log.verbose("sentences_removed", count=removed, mode=mode)
    return "\n\n".join(paragraphs).strip()


def dedupe_sentences(ctx: CleanContext) -> CleanContext:
    """Remove near-duplicate sentences."""
    before = ctx.text
    mode = ctx.request.metadata.get("dedupe_mode", "consecutive")
    phrases = ctx.profile.boilerplate_phrases if ctx.profile else None
    ctx.text = dedupe_sentences_in_text(ctx.text, mode=mode, collapse_phrases=phrases)
    if ctx.text != before:
        ctx.add_trace(pass_name=PASS_NAME, action="deduped_sentences")
    return ctx
