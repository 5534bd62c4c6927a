"""Result carriers for document evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field

from promptdoc.ast.nodes import Role
from promptdoc.context import Context
from promptdoc.models.errors import Diagnostic, SourceSpan
from promptdoc.models.parts import EvaluatedPart


@dataclass
class EvaluatedFrontmatter:
    """Evaluated context plus frontmatter-specific diagnostics.

    Produced once per dispatch and threaded through every consumer that needs
    the variables, so frontmatter code never runs twice for one dispatch.
    """

    context: Context
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def variables(self) -> dict:
        return self.context.get_variables()


@dataclass
class EvaluatedMessage:
    role: Role
    parts: list[EvaluatedPart] = field(default_factory=list)
    position: SourceSpan | None = None


@dataclass
class EvaluatedResult:
    """Messages with resolved parts, and diagnostics in source order."""

    messages: list[EvaluatedMessage] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
