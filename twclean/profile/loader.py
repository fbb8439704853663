"""
Profile Loader — Load cleaning profiles from YAML files.

A profile is looked up by name in profiles/, or loaded from an explicit
path. TWCLEAN_PROFILE selects the profile used when none is named.
"""

import os
import re
from pathlib import Path
from typing import Optional, Union

import yaml

from twclean.profile.models import CleaningProfile, SeverityKeywords

# Default profile directory
PROFILES_DIR = Path(__file__).parent / "profiles"
DEFAULT_PROFILE = "default"

_cache: dict[str, CleaningProfile] = {}


def load_profile(name_or_path: Union[str, Path] = DEFAULT_PROFILE) -> CleaningProfile:
    """
    Load a cleaning profile by name or path.

    Raises:
        FileNotFoundError: If the profile file doesn't exist
        ValueError: If the profile is invalid
    """
    path = Path(name_or_path)
    if path.suffix not in (".yaml", ".yml"):
        path = PROFILES_DIR / f"{name_or_path}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Profile not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return parse_profile(data, default_name=path.stem)


def parse_profile(data: dict, default_name: str = DEFAULT_PROFILE) -> CleaningProfile:
    """Parse profile data into a CleaningProfile."""
    if not isinstance(data, dict):
        raise ValueError("Profile must be a mapping")

    info = data.get("profile", {}) or {}
    keywords = data.get("severity_keywords", {}) or {}

    profile = CleaningProfile(
        name=info.get("name", default_name),
        version=str(info.get("version", "1.0")),
        description=info.get("description", ""),
        debug_markers=_string_list(data, "debug_markers"),
        section_titles=_string_list(data, "section_titles"),
        footer_labels=_string_list(data, "footer_labels"),
        boilerplate_phrases=_string_list(data, "boilerplate_phrases"),
        generic_hint_leaves=[w.lower() for w in _string_list(data, "generic_hint_leaves")],
        severity_keywords=SeverityKeywords(
            inauspicious=list(keywords.get("inauspicious", [])),
            auspicious=list(keywords.get("auspicious", [])),
            neutral=list(keywords.get("neutral", [])),
        ),
    )

    for fragment in profile.section_titles + profile.footer_labels:
        try:
            re.compile(fragment)
        except re.error as e:
            raise ValueError(f"Invalid title pattern {fragment!r}: {e}") from e

    return profile


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key, []) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Profile field '{key}' must be a list of strings")
    return value


def get_profile(name: Optional[str] = None) -> CleaningProfile:
    """Get a profile, loading it once per name."""
    if name is None:
        name = os.environ.get("TWCLEAN_PROFILE", DEFAULT_PROFILE)
    if name not in _cache:
        _cache[name] = load_profile(name)
    return _cache[name]


def clear_cache() -> None:
    """Clear the profile cache."""
    _cache.clear()
