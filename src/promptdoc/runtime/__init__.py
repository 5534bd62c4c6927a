"""Expression evaluation, script execution and the include() primitive."""

from promptdoc.runtime.emit import (
    BinaryIncludePart,
    CompositeIncludePart,
    EmitContext,
    Emittable,
    is_emittable,
    to_text,
)
from promptdoc.runtime.environment import (
    ALLOWED_MODULES,
    build_env,
    create_safe_env,
    evaluate_expression,
    execute_script,
)
from promptdoc.runtime.errors import (
    CircularIncludeError,
    EvaluationError,
    ExpressionError,
    FileReferenceError,
)
from promptdoc.runtime.includes import IncludeFunction
from promptdoc.runtime.resolver import FileResolver, mime_by_extension

__all__ = [
    "ALLOWED_MODULES",
    "BinaryIncludePart",
    "CircularIncludeError",
    "CompositeIncludePart",
    "EmitContext",
    "Emittable",
    "EvaluationError",
    "ExpressionError",
    "FileReferenceError",
    "FileResolver",
    "IncludeFunction",
    "build_env",
    "create_safe_env",
    "evaluate_expression",
    "execute_script",
    "is_emittable",
    "mime_by_extension",
    "to_text",
]
