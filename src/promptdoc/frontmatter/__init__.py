"""Frontmatter detection and execution.

Executors are registered per language tag; importing this package registers
the built-in ``json``, ``yaml`` and ``python`` executors.
"""

from __future__ import annotations

import logging
from typing import Any

# Import executors to trigger registration
import promptdoc.frontmatter.script as _script  # noqa: F401
import promptdoc.frontmatter.structured as _structured  # noqa: F401
from promptdoc.context import Context
from promptdoc.frontmatter.base import FrontmatterExecutor
from promptdoc.frontmatter.errors import (
    FrontmatterError,
    FrontmatterExecutionError,
    FrontmatterParseError,
    FrontmatterTypeError,
    UnsupportedFrontmatterLanguageError,
    YAMLSafetyError,
)
from promptdoc.frontmatter.registry import FrontmatterRegistry
from promptdoc.parser.fence import split_frontmatter
from promptdoc.settings import Settings

logger = logging.getLogger("promptdoc.frontmatter")


def execute_frontmatter(
    language: str,
    code: str,
    context: Context,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Dispatch ``code`` to the executor registered for ``language``.

    Raises :class:`FrontmatterError` subclasses; never returns partial results.
    """
    executor = FrontmatterRegistry.get(language, settings)
    logger.debug("Executing %s frontmatter for %s", language, context.get_filename() or "N/A")
    return executor.execute(code, context)


__all__ = [
    "FrontmatterError",
    "FrontmatterExecutionError",
    "FrontmatterExecutor",
    "FrontmatterParseError",
    "FrontmatterRegistry",
    "FrontmatterTypeError",
    "UnsupportedFrontmatterLanguageError",
    "YAMLSafetyError",
    "execute_frontmatter",
    "split_frontmatter",
]
