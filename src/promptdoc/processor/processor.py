"""Walks a parsed Document against a Context and produces evaluated parts."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from promptdoc.ast.nodes import (
    Document,
    ExpressionSegment,
    FileReferenceSegment,
    Message,
    TextSegment,
    ThinkingSegment,
)
from promptdoc.ast.visitor import SegmentVisitor
from promptdoc.context import RESERVED_KEYS, Context
from promptdoc.frontmatter import execute_frontmatter
from promptdoc.models.errors import Diagnostic, DiagnosticType, Severity
from promptdoc.models.parts import EvaluatedPart, ThinkingPart
from promptdoc.parser.document import parse_lines
from promptdoc.processor.results import EvaluatedFrontmatter, EvaluatedMessage, EvaluatedResult
from promptdoc.runtime.emit import EmitContext
from promptdoc.runtime.environment import build_env, evaluate_expression
from promptdoc.runtime.errors import (
    CircularIncludeError,
    ExpressionError,
    FileReferenceError,
)
from promptdoc.runtime.includes import IncludeFunction
from promptdoc.runtime.resolver import FileResolver
from promptdoc.settings import Settings

logger = logging.getLogger("promptdoc.processor")


class LiteralPartBuilder(SegmentVisitor):
    """System/Assistant policy: everything stays literal, thinking is preserved."""

    def __init__(self, message: Message) -> None:
        self.message = message
        self.out = EmitContext()

    def build(self) -> list[EvaluatedPart]:
        for segment in self.message.segments:
            self.visit(segment)
        return self.out.parts

    def visit_text(self, segment: TextSegment) -> None:
        self.out.text(segment.content)

    def visit_expression(self, segment: ExpressionSegment) -> None:
        self.out.text(segment.render())

    def visit_file_reference(self, segment: FileReferenceSegment) -> None:
        self.out.text(segment.render())

    def visit_thinking(self, segment: ThinkingSegment) -> None:
        self.out.part(
            ThinkingPart(
                content=segment.content,
                signature=segment.signature,
                signature_provider=segment.signature_provider,
            )
        )


class EvaluatingPartBuilder(LiteralPartBuilder):
    """You/User policy: expressions run, file references resolve.

    Failures never abort the message: each becomes a warning diagnostic and
    the original source text stays in place.
    """

    def __init__(
        self,
        message: Message,
        env: dict[str, Any],
        include: IncludeFunction,
        diagnostics: list[Diagnostic],
        source_file: str | None,
    ) -> None:
        super().__init__(message)
        self._env = env
        self._include = include
        self._diagnostics = diagnostics
        self._source_file = source_file

    def _report(self, type_: DiagnosticType, message: str, segment: Any, **fields: Any) -> None:
        logger.warning("%s:%s: %s", self._source_file or "N/A", _line(segment), message)
        self._diagnostics.append(
            Diagnostic(
                type=type_,
                severity=Severity.WARNING,
                message=message,
                position=segment.position,
                message_role=self.message.role.value,
                source_file=self._source_file or "N/A",
                **fields,
            )
        )

    def visit_expression(self, segment: ExpressionSegment) -> None:
        try:
            result = evaluate_expression(segment.source, self._env)
            emitted = EmitContext(position=segment.position)
            emitted.emit(result)
        except FileReferenceError as exc:
            self._report(
                DiagnosticType.FILE, str(exc), segment, filename=exc.filename,
                expression=segment.source,
            )
        except (ExpressionError, CircularIncludeError) as exc:
            self._report(DiagnosticType.EXPRESSION, str(exc), segment, expression=segment.source)
        except Exception as exc:
            # Raised from a result's emit(); the expression itself evaluated
            self._report(
                DiagnosticType.EXPRESSION,
                f"Error during emit for expression '{segment.render()}': {exc}",
                segment,
                expression=segment.source,
            )
        else:
            for part in emitted.parts:
                self.out.part(part)
            return
        self.out.text(segment.render())

    def visit_file_reference(self, segment: FileReferenceSegment) -> None:
        try:
            attachment = self._include.binary(segment.path, segment.mime_override)
        except FileReferenceError as exc:
            self._report(DiagnosticType.FILE, str(exc), segment, filename=exc.filename)
            self.out.text(segment.render())
            return
        self.out.file(
            attachment.filename, attachment.mime_type, attachment.data, segment.position
        )


def _line(segment: Any) -> str:
    position = getattr(segment, "position", None)
    return str(position.start_line) if position is not None else "?"


class Processor:
    """Evaluates documents: frontmatter once, then every message by role policy."""

    def __init__(
        self,
        resolver: FileResolver | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else Settings()
        self._resolver = resolver or FileResolver(
            use_file_command=self._settings.use_file_command
        )

    @property
    def resolver(self) -> FileResolver:
        return self._resolver

    # -- frontmatter ---------------------------------------------------------

    def evaluate_frontmatter(
        self, document: Document, context: Context | None = None
    ) -> EvaluatedFrontmatter:
        """Execute the document's frontmatter (if any) exactly once.

        Frontmatter failures propagate as ``FrontmatterError``.
        """
        base = context if context is not None else Context.from_source()
        frontmatter = document.frontmatter
        if frontmatter is None:
            return EvaluatedFrontmatter(context=base)

        variables = execute_frontmatter(
            frontmatter.language, frontmatter.code, base, self._settings
        )
        diagnostics: list[Diagnostic] = []
        for key in sorted(RESERVED_KEYS & variables.keys()):
            variables.pop(key)
            diagnostics.append(
                Diagnostic(
                    type=DiagnosticType.FRONTMATTER,
                    severity=Severity.WARNING,
                    message=f"Frontmatter binding '{key}' is reserved and was ignored",
                    position=frontmatter.position,
                    source_file=base.get_filename() or "N/A",
                )
            )
        logger.debug(
            "Evaluated %s frontmatter: %d variables", frontmatter.language, len(variables)
        )
        return EvaluatedFrontmatter(context=base.extend(variables), diagnostics=diagnostics)

    def evaluate_buffer_frontmatter(
        self, lines: Sequence[str], filename: str | None = None
    ) -> EvaluatedFrontmatter:
        """Convenience: parse ``lines`` and evaluate their frontmatter once."""
        document = parse_lines(lines)
        return self.evaluate_frontmatter(document, Context.from_source(filename))

    # -- messages ------------------------------------------------------------

    def evaluate(
        self,
        document: Document,
        context: Context | None = None,
        evaluated_frontmatter: EvaluatedFrontmatter | None = None,
    ) -> EvaluatedResult:
        """Evaluate every message of ``document``.

        A supplied ``evaluated_frontmatter`` is reused verbatim and ``context``
        is ignored; otherwise frontmatter is evaluated here, once.
        """
        if evaluated_frontmatter is None:
            evaluated_frontmatter = self.evaluate_frontmatter(document, context)
        scope = evaluated_frontmatter.context
        diagnostics = list(evaluated_frontmatter.diagnostics)

        include = IncludeFunction(scope, self._resolver)
        env = build_env(scope.to_eval_env())
        env["include"] = include
        source_file = scope.get_filename()

        messages: list[EvaluatedMessage] = []
        for message in document.messages:
            builder: LiteralPartBuilder
            if message.role.is_evaluated:
                builder = EvaluatingPartBuilder(message, env, include, diagnostics, source_file)
            else:
                builder = LiteralPartBuilder(message)
            messages.append(
                EvaluatedMessage(role=message.role, parts=builder.build(), position=message.position)
            )
        return EvaluatedResult(messages=messages, diagnostics=diagnostics)
