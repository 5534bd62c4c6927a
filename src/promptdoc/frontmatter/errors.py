"""Frontmatter-level failures.  These are dispatch-fatal and always propagate."""

from __future__ import annotations


class FrontmatterError(Exception):
    """Base class: no variables from this frontmatter can be trusted."""

    def __init__(self, language: str, message: str) -> None:
        self.language = language
        super().__init__(message)


class FrontmatterParseError(FrontmatterError):
    """The body could not be parsed (malformed JSON/YAML, Python syntax error)."""


class FrontmatterTypeError(FrontmatterError):
    """The body parsed, but to something other than a keyed record."""


class FrontmatterExecutionError(FrontmatterError):
    """A frontmatter script raised while running."""


class YAMLSafetyError(FrontmatterError):
    """YAML frontmatter violates safety limits.

    Distinct from parse errors: oversized documents, anchors/aliases
    (billion-laughs), excessive nesting or node counts.
    """


class UnsupportedFrontmatterLanguageError(FrontmatterError):
    """Raised when no executor is registered for the declared language tag."""

    def __init__(self, language: str, available: list[str]) -> None:
        self.available = available
        super().__init__(
            language,
            f"Unsupported frontmatter language '{language}'. Available: {', '.join(available)}",
        )
