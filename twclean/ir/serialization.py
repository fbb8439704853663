"""
IR Serialization — JSON import/export for results and window lists.
"""

import json
from pathlib import Path
from typing import Any, Iterable, Union

from pydantic import BaseModel

from twclean.ir.schema import CleanResult


def to_json(result: CleanResult, indent: int = 2) -> str:
    """Serialize a CleanResult to JSON string."""
    return result.model_dump_json(indent=indent)


def from_json(json_str: str) -> CleanResult:
    """Deserialize a CleanResult from JSON string."""
    return CleanResult.model_validate_json(json_str)


def windows_to_json(windows: Iterable[Any], indent: int = 2) -> str:
    """Serialize a list of window models, leaving out unset fields. Other values are kept as-is."""
    payload = [
        w.model_dump(mode="json", exclude_unset=True) if isinstance(w, BaseModel) else w
        for w in windows
    ]
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def load_payload(path: Union[str, Path]) -> Any:
    """Load a JSON payload (window data, AI windows, engine windows) from a file."""
    path = Path(path)
    return json.loads(path.read_text())
