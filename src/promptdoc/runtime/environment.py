"""Per-evaluation Python environments for expressions and frontmatter scripts.

Every call builds a fresh namespace; nothing is shared between dispatches.
"""

from __future__ import annotations

import builtins
from collections.abc import Mapping
from typing import Any

from promptdoc.context import FILENAME_KEY
from promptdoc.runtime.errors import EvaluationError, ExpressionError

# Modules frontmatter scripts and expressions may import.
ALLOWED_MODULES = frozenset(
    {
        "base64",
        "collections",
        "datetime",
        "functools",
        "itertools",
        "json",
        "math",
        "random",
        "re",
        "statistics",
        "string",
        "textwrap",
    }
)

_SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "ascii", "bin", "bool", "bytes", "callable", "chr", "dict",
    "divmod", "enumerate", "filter", "float", "format", "frozenset", "getattr",
    "hasattr", "hash", "hex", "int", "isinstance", "issubclass", "iter", "len",
    "list", "map", "max", "min", "next", "oct", "ord", "pow", "print", "range",
    "repr", "reversed", "round", "set", "slice", "sorted", "str", "sum", "tuple",
    "type", "zip",
    # needed for class bodies and exception handling inside scripts
    "__build_class__", "ArithmeticError", "AssertionError", "AttributeError",
    "Exception", "IndexError", "KeyError", "LookupError", "NameError",
    "RuntimeError", "TypeError", "ValueError", "ZeroDivisionError",
)  # fmt: skip


def _guarded_import(
    name: str,
    globals: Mapping[str, Any] | None = None,
    locals: Mapping[str, Any] | None = None,
    fromlist: tuple[str, ...] = (),
    level: int = 0,
) -> Any:
    root = name.split(".", 1)[0]
    if level != 0 or root not in ALLOWED_MODULES:
        raise ImportError(f"Import of '{name}' is not allowed in documents")
    return builtins.__import__(name, globals, locals, fromlist, level)


def create_safe_env() -> dict[str, Any]:
    """Builtins-only namespace; callers layer context variables on top."""
    safe_builtins: dict[str, Any] = {
        name: getattr(builtins, name) for name in _SAFE_BUILTIN_NAMES
    }
    safe_builtins["__import__"] = _guarded_import
    return {"__builtins__": safe_builtins, "__name__": "promptdoc_document"}


def build_env(variables: Mapping[str, Any]) -> dict[str, Any]:
    env = create_safe_env()
    env.update(variables)
    return env


def evaluate_expression(source: str, env: dict[str, Any]) -> Any:
    """Evaluate one ``{{ }}`` expression.  Raises :class:`ExpressionError`.

    Errors raised by ``include()`` (missing files, circular includes) pass
    through unchanged so they can be reported with their own type.
    """
    filename = env.get(FILENAME_KEY)
    body = source.strip()
    try:
        # Parenthesized so the expression may span lines; the newline ends a trailing comment
        code = compile(f"({body}\n)" if body else body, "<expression>", "eval")
        return eval(code, env)  # noqa: S307
    except EvaluationError:
        raise
    except Exception as exc:
        raise ExpressionError(source, filename, exc) from exc


def execute_script(code: str, env: dict[str, Any]) -> dict[str, Any]:
    """Run a script body in ``env`` and return the bindings it defined or changed.

    Compilation and runtime errors propagate to the caller unchanged.
    """
    before = dict(env)
    compiled = compile(code, "<frontmatter>", "exec")
    exec(compiled, env)  # noqa: S102
    return {
        key: value
        for key, value in env.items()
        if key not in ("__builtins__", "__name__")
        and (key not in before or before[key] is not value)
    }
