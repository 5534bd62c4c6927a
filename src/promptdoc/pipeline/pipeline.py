"""Orchestrates the full prompt pipeline: Lines → Document → Frontmatter → Evaluation → Prompt."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from promptdoc.ast.nodes import Document, Role
from promptdoc.context import Context
from promptdoc.models.parts import HistoryMessage, Prompt, TextFilePart, TextPart
from promptdoc.parser.document import DocumentParser
from promptdoc.processor.parts import to_generic_parts
from promptdoc.processor.processor import Processor
from promptdoc.processor.results import EvaluatedFrontmatter, EvaluatedResult

logger = logging.getLogger("promptdoc.pipeline")

_HISTORY_ROLES: dict[Role, str] = {
    Role.YOU: "user",
    Role.USER: "user",
    Role.ASSISTANT: "assistant",
}


def assemble_prompt(evaluated: EvaluatedResult) -> Prompt:
    """Partition evaluated messages into the system string and the history."""
    system: str | None = None
    history: list[HistoryMessage] = []
    for index, message in enumerate(evaluated.messages):
        parts = to_generic_parts(message.parts)
        if message.role is Role.SYSTEM:
            if index != 0:
                line = message.position.start_line if message.position else "?"
                logger.warning("Ignoring System message at line %s: not the first message", line)
                continue
            texts = [p.text for p in parts if isinstance(p, (TextPart, TextFilePart))]
            system = "\n".join(texts).strip() or None
            continue
        history.append(HistoryMessage(role=_HISTORY_ROLES[message.role], parts=parts))
    return Prompt(system=system, history=history, diagnostics=list(evaluated.diagnostics))


class PromptPipeline:
    """Orchestrates: Lines → Document → Frontmatter → Evaluation → Prompt."""

    def __init__(self, processor: Processor | None = None) -> None:
        self._parser = DocumentParser()
        self._processor = processor or Processor()

    @property
    def processor(self) -> Processor:
        return self._processor

    def run(
        self,
        source: Sequence[str] | Document,
        context: Context | None = None,
        evaluated_frontmatter: EvaluatedFrontmatter | None = None,
    ) -> tuple[Prompt, EvaluatedFrontmatter]:
        """Build a Prompt from raw lines or an already parsed Document.

        A supplied ``evaluated_frontmatter`` is reused verbatim (``context`` is
        then ignored); otherwise frontmatter runs exactly once here.  The
        evaluated frontmatter is returned so dispatch-level callers can reuse it.
        """
        # Phase 1: Parsing
        document = source if isinstance(source, Document) else self._parser.parse(source)

        # Phase 2: Frontmatter (once per dispatch)
        if evaluated_frontmatter is None:
            evaluated_frontmatter = self._processor.evaluate_frontmatter(document, context)

        # Phase 3: Evaluation
        evaluated = self._processor.evaluate(
            document, evaluated_frontmatter=evaluated_frontmatter
        )

        # Phase 4: Assembly
        prompt = assemble_prompt(evaluated)
        logger.debug(
            "Pipeline produced %d history messages, %d diagnostics",
            len(prompt.history),
            len(prompt.diagnostics),
        )
        return prompt, evaluated_frontmatter
