"""
twclean — Time-Window Narrative Cleaner

A deterministic text pipeline that turns generated day-prediction narrative
and engine-computed time windows into clean, display-ready prose plus a
validated, deduplicated, merged window list.

Patterns shape the text. Nothing here interprets it.
"""

__version__ = "0.1.0"
