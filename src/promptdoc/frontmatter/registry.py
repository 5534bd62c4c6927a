"""Frontmatter executor registry, keyed by declared language tag."""

from __future__ import annotations

from promptdoc.frontmatter.base import FrontmatterExecutor
from promptdoc.frontmatter.errors import UnsupportedFrontmatterLanguageError
from promptdoc.settings import Settings


class FrontmatterRegistry:
    """Registry for frontmatter executors."""

    _executors: dict[str, type[FrontmatterExecutor]] = {}

    @classmethod
    def register(cls, executor_class: type[FrontmatterExecutor]) -> type[FrontmatterExecutor]:
        """Register an executor class for each of its tags. Can be used as a decorator."""
        # Instantiate to read the languages property
        instance = executor_class()
        for language in instance.languages:
            cls._executors[language.lower()] = executor_class
        return executor_class

    @classmethod
    def get(cls, language: str, settings: Settings | None = None) -> FrontmatterExecutor:
        """Get an executor instance for ``language`` (tags are case-insensitive)."""
        executor_class = cls._executors.get(language.lower())
        if executor_class is None:
            raise UnsupportedFrontmatterLanguageError(language, available=cls.available())
        return executor_class(settings)

    @classmethod
    def has(cls, language: str) -> bool:
        return language.lower() in cls._executors

    @classmethod
    def available(cls) -> list[str]:
        """List registered language tags."""
        return sorted(cls._executors.keys())

    @classmethod
    def unregister(cls, language: str) -> None:
        cls._executors.pop(language.lower(), None)
