"""
Structured-blob scanning — find, classify and parse leaked data literals.

A blob is a brace/bracket-balanced fragment that is shaped like serialized
data (quoted keys, a list of objects, a list of strings). Prose braces and
index references such as ``time_windows[0]`` never qualify.
"""

import json
import re
from typing import Any, Iterable, Optional

OPENERS = {"{": "}", "[": "]"}
CLOSERS = {"}": "{", "]": "["}

# Longest fragment find_balanced_end follows before giving up
MAX_BLOB_SIZE = 5000

_QUOTED_KEY_START = re.compile(r'^[\[{]\s*"[\w\s-]+"\s*:')
_LIST_OF_OBJECTS = re.compile(r"^\[\s*\{")
_LIST_OF_STRINGS = re.compile(r'^\[\s*"')
_QUOTED_KEY = re.compile(r'"\w+"\s*:')
_HTML_QUOTE = re.compile(r"&quot;|&#34;", re.IGNORECASE)

# Shapes that mean leftover serialized data rather than prose
_RAW_DATA_PATTERNS = [
    re.compile(r'"\w+"\s*:\s*"'),
    re.compile(r'\{\s*"\w+"'),
    re.compile(r"\[\s*\{"),
    re.compile(r"\}\s*,\s*\{"),
    re.compile(r'_status"\s*:'),
    re.compile(r'_pakshi"\s*:'),
    re.compile(r"__windows_json__", re.IGNORECASE),
    re.compile(r"\}\}\}"),
]


def _scan(text: str, start: int, max_size: Optional[int]) -> tuple[Optional[int], dict[int, Optional[int]]]:
    """
    Bracket scan behind ``find_balanced_end``.

    Returns (end, resolved). ``resolved`` maps every opener the scan settled
    to the end a scan starting there would return: openers that closed get
    their end, openers still open when the text ran out or a wrong closer
    appeared get None. Openers left open when ``max_size`` cut the scan
    short are not settled.
    """
    resolved: dict[int, Optional[int]] = {}
    stack: list[tuple[str, int]] = []
    in_string = False
    escaped_string = False
    limit = len(text) if max_size is None else min(len(text), start + max_size)
    i = start
    while i < limit:
        ch = text[i]
        if in_string:
            if ch == "\\":
                if escaped_string and text.startswith('\\"', i):
                    in_string = False
                i += 2
                continue
            if ch == '"' and not escaped_string:
                in_string = False
        elif ch == "\\" and text.startswith('\\"', i):
            in_string = True
            escaped_string = True
            i += 2
            continue
        elif ch == '"':
            in_string = True
            escaped_string = False
        elif ch in OPENERS:
            stack.append((ch, i))
        elif ch in CLOSERS:
            if not stack or stack[-1][0] != CLOSERS[ch]:
                resolved.update((pos, None) for _, pos in stack)
                return None, resolved
            _, pos = stack.pop()
            resolved[pos] = i + 1
            if not stack:
                return i + 1, resolved
        i += 1
    if limit == len(text):
        resolved.update((pos, None) for _, pos in stack)
    return None, resolved


def find_balanced_end(text: str, start: int, max_size: Optional[int] = MAX_BLOB_SIZE) -> Optional[int]:
    """
    End index (exclusive) of the balanced fragment opening at ``text[start]``.

    Double-quoted strings are skipped, so braces inside them don't count.
    An escaped quote outside a string (``\\"``) is treated as a literal
    quote character, which lets escaped serialized data balance too.
    Returns None if the fragment never closes, closes with the wrong
    bracket, or runs past ``max_size`` characters.
    """
    if start >= len(text) or text[start] not in OPENERS:
        return None
    return _scan(text, start, max_size)[0]


def _unquote(fragment: str) -> str:
    return _HTML_QUOTE.sub('"', fragment.replace('\\"', '"'))


def looks_like_blob(fragment: str) -> bool:
    """Quoted-key object, list of objects, list of strings, or ≥2 quoted keys."""
    candidate = _unquote(fragment.strip())
    if len(candidate) < 4:
        return False
    return bool(
        _QUOTED_KEY_START.match(candidate)
        or _LIST_OF_OBJECTS.match(candidate)
        or _LIST_OF_STRINGS.match(candidate)
        or len(_QUOTED_KEY.findall(candidate)) >= 2
    )


def parse_blob(candidate: str) -> Optional[Any]:
    """Parse a blob as-is, then HTML-quote decoded, then ``\\"``-unescaped."""
    attempts = (
        candidate,
        _HTML_QUOTE.sub('"', candidate),
        candidate.replace('\\"', '"'),
    )
    for attempt in attempts:
        try:
            parsed = json.loads(attempt)
        except ValueError:
            continue
        if isinstance(parsed, (dict, list)):
            return parsed
    return None


def iter_blob_spans(text: str, from_index: int = 0) -> Iterable[tuple[int, int]]:
    """
    Yield (start, end) of each standalone blob-shaped fragment, left to right.

    Scan results are shared between openers, so each bracket is settled once
    instead of rescanning to the end of the text from every opener.
    """
    known: dict[int, Optional[int]] = {}
    i = from_index
    while i < len(text):
        if text[i] in OPENERS:
            if i not in known:
                known.update(_scan(text, i, None)[1])
            end = known.get(i)
            if end is not None and looks_like_blob(text[i:end]):
                yield i, end
                i = end
                continue
        i += 1


def remove_blobs(text: str) -> str:
    """Drop every standalone blob-shaped fragment."""
    pieces = []
    cursor = 0
    for start, end in iter_blob_spans(text):
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


def looks_like_raw_data(text: Optional[str], min_length: int = 3) -> bool:
    """True when text is too short to mean anything or still carries data shapes."""
    if not text:
        return True
    stripped = text.strip()
    if len(stripped) < min_length:
        return True
    return any(p.search(stripped) for p in _RAW_DATA_PATTERNS)
