"""Python frontmatter: the body runs as a script; new bindings become variables."""

from __future__ import annotations

import logging
from types import ModuleType
from typing import Any

from promptdoc.context import Context
from promptdoc.frontmatter.base import FrontmatterExecutor
from promptdoc.frontmatter.errors import FrontmatterExecutionError, FrontmatterParseError
from promptdoc.frontmatter.registry import FrontmatterRegistry
from promptdoc.runtime.environment import build_env, execute_script

logger = logging.getLogger("promptdoc.frontmatter")


@FrontmatterRegistry.register
class PythonFrontmatterExecutor(FrontmatterExecutor):
    """```python frontmatter.

    The script runs in a fresh namespace seeded from ``context.to_eval_env()``,
    so earlier variables and ``__filename`` are visible and may be rebound.
    Functions, classes and any other bindings it defines are returned.
    """

    @property
    def languages(self) -> tuple[str, ...]:
        return ("python", "py")

    def execute(self, code: str, context: Context) -> dict[str, Any]:
        env = build_env(context.to_eval_env())
        filename = context.get_filename() or "N/A"
        try:
            bindings = execute_script(code, env)
        except SyntaxError as exc:
            raise FrontmatterParseError(
                "python", f"Python parse error in frontmatter of '{filename}': {exc}"
            ) from exc
        except Exception as exc:
            raise FrontmatterExecutionError(
                "python",
                f"Execution error in frontmatter of '{filename}': {type(exc).__name__}: {exc}",
            ) from exc
        # Imported modules are plumbing, not document variables
        bindings = {k: v for k, v in bindings.items() if not isinstance(v, ModuleType)}
        logger.debug("Python frontmatter defined %s", sorted(bindings))
        return bindings
