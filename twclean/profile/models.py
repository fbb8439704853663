"""
Profile Models — Phrase lists and keyword families used by the passes.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from twclean.ir.enums import Severity


@dataclass
class SeverityKeywords:
    """Keyword families, checked inauspicious → auspicious → neutral."""
    inauspicious: list[str] = field(default_factory=list)
    auspicious: list[str] = field(default_factory=list)
    neutral: list[str] = field(default_factory=list)

    def classify(self, text: str) -> Optional[Severity]:
        """Map free text to a severity by the first family with a whole-word hit."""
        lowered = text.lower()
        for severity, words in (
            (Severity.INAUSPICIOUS, self.inauspicious),
            (Severity.AUSPICIOUS, self.auspicious),
            (Severity.NEUTRAL, self.neutral),
        ):
            for word in words:
                if re.search(rf"\b{re.escape(word.lower())}\b", lowered):
                    return severity
        return None


@dataclass
class CleaningProfile:
    """A named set of phrases and titles driving the cleaning passes."""
    name: str
    version: str = "1.0"
    description: str = ""
    debug_markers: list[str] = field(default_factory=list)
    section_titles: list[str] = field(default_factory=list)      # regex fragments
    footer_labels: list[str] = field(default_factory=list)       # regex fragments
    boilerplate_phrases: list[str] = field(default_factory=list)  # literal text
    generic_hint_leaves: list[str] = field(default_factory=list)
    severity_keywords: SeverityKeywords = field(default_factory=SeverityKeywords)
