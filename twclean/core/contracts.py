"""
Contracts — Shapes that passes and validators plug into.
"""

from abc import ABC, abstractmethod
from typing import Callable

from twclean.core.context import CleanContext


# A pass takes the context and returns it, usually with new text.
PassFn = Callable[[CleanContext], CleanContext]


class Validator(ABC):
    """Base for checks run against a finished context."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def validate(self, ctx: CleanContext) -> list[str]:
        """Return problems found, or an empty list."""
        ...
