"""Abstract base for frontmatter executors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from promptdoc.context import Context
from promptdoc.settings import Settings


class FrontmatterExecutor(ABC):
    """Turns a frontmatter body into a keyed record of variables.

    Executors raise :class:`~promptdoc.frontmatter.errors.FrontmatterError`
    subclasses on failure; they never return partial results.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings if settings is not None else Settings()

    @property
    @abstractmethod
    def languages(self) -> tuple[str, ...]:
        """Language tags this executor handles (first one is canonical)."""

    @abstractmethod
    def execute(self, code: str, context: Context) -> dict[str, Any]:
        """Execute ``code`` and return the variables it produces."""
