"""Evaluation-level failures.  Contained by the processor, reported as diagnostics."""

from __future__ import annotations


class EvaluationError(Exception):
    """Base class for failures while evaluating message content."""


class ExpressionError(EvaluationError):
    """An inline expression failed to compile or raised while running."""

    def __init__(self, source: str, filename: str | None, cause: BaseException) -> None:
        self.source = source
        self.filename = filename
        self.cause = cause
        super().__init__(
            f"Evaluation error in '{filename or 'N/A'}' for expression "
            f"'{{{{{source}}}}}': {type(cause).__name__}: {cause}"
        )


class FileReferenceError(EvaluationError):
    """A referenced or included file could not be resolved."""

    def __init__(self, filename: str, raw: str | None, reason: str) -> None:
        self.filename = filename
        self.raw = raw
        self.reason = reason
        super().__init__(reason)


class CircularIncludeError(EvaluationError):
    """``include()`` asked for a file already on the include stack."""

    def __init__(self, target: str, requested_by: str | None, include_stack: list[str]) -> None:
        self.target = target
        self.requested_by = requested_by
        self.include_stack = include_stack
        super().__init__(
            f"Circular include for '{target}' (requested by '{requested_by or 'N/A'}'). "
            f"Include stack: {' -> '.join(include_stack)}"
        )
