"""Profile — YAML cleaning profiles."""

from twclean.profile.loader import clear_cache, get_profile, load_profile
from twclean.profile.models import CleaningProfile, SeverityKeywords

__all__ = [
    "CleaningProfile",
    "SeverityKeywords",
    "clear_cache",
    "get_profile",
    "load_profile",
]
