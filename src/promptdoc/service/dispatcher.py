"""Dispatch driver: one end-to-end turn from document to Prompt.

The dispatcher owns the "evaluate frontmatter once per dispatch" rule.  It
evaluates the frontmatter a single time, hands that result to every consumer
(inspectors such as previews or override readers, then the pipeline), and
keeps nothing between dispatches.  An automated re-dispatch (for example after
a tool round) is simply another :meth:`Dispatcher.dispatch` call.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from promptdoc.context import Context
from promptdoc.frontmatter.errors import FrontmatterError
from promptdoc.models.errors import Diagnostic
from promptdoc.models.parts import Prompt
from promptdoc.parser.document import DocumentParser
from promptdoc.pipeline.pipeline import PromptPipeline
from promptdoc.processor.results import EvaluatedFrontmatter

logger = logging.getLogger("promptdoc.dispatch")

FrontmatterInspector = Callable[[EvaluatedFrontmatter], None]

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class DispatchResult:
    """Everything one dispatch produced."""

    dispatch_id: str
    prompt: Prompt
    evaluated_frontmatter: EvaluatedFrontmatter

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.prompt.diagnostics


@dataclass
class DispatchSummary:
    """Short record of a finished dispatch, for listing."""

    dispatch_id: str
    filename: str | None
    history_messages: int
    diagnostics: int
    has_system: bool
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class Dispatcher:
    """Runs dispatch cycles.  Thread-safe via ``threading.Lock``.

    Dispatches are keyed by short UUID (8-char hex).  Only summaries are
    retained; evaluated frontmatter lives on the returned result alone.
    """

    def __init__(
        self,
        pipeline: PromptPipeline | None = None,
        inspectors: Sequence[FrontmatterInspector] = (),
        history_limit: int = 100,
    ) -> None:
        self._lock = threading.Lock()
        self._pipeline = pipeline or PromptPipeline()
        self._parser = DocumentParser()
        self._inspectors: list[FrontmatterInspector] = list(inspectors)
        self._history: deque[DispatchSummary] = deque(maxlen=history_limit)

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex[:8]

    # -- public API ----------------------------------------------------------

    def add_inspector(self, inspector: FrontmatterInspector) -> None:
        """Register a consumer that needs the evaluated frontmatter before the prompt."""
        with self._lock:
            self._inspectors.append(inspector)

    def dispatch(self, lines: Sequence[str], filename: str | None = None) -> DispatchResult:
        """Run one dispatch cycle.

        Frontmatter errors are logged and re-raised; no prompt is built from a
        failed evaluation.
        """
        dispatch_id = self._new_id()
        document = self._parser.parse(lines)
        context = Context.from_source(filename)

        try:
            evaluated_frontmatter = self._pipeline.processor.evaluate_frontmatter(
                document, context
            )
        except FrontmatterError as exc:
            logger.error(
                "Dispatch %s aborted: %s frontmatter in %s failed: %s",
                dispatch_id,
                exc.language,
                filename or "N/A",
                exc,
            )
            raise

        with self._lock:
            inspectors = list(self._inspectors)
        for inspector in inspectors:
            inspector(evaluated_frontmatter)

        prompt, _ = self._pipeline.run(document, evaluated_frontmatter=evaluated_frontmatter)

        summary = DispatchSummary(
            dispatch_id=dispatch_id,
            filename=filename,
            history_messages=len(prompt.history),
            diagnostics=len(prompt.diagnostics),
            has_system=prompt.system is not None,
        )
        with self._lock:
            self._history.append(summary)
        logger.info(
            "Dispatch %s: %d messages, %d diagnostics",
            dispatch_id,
            summary.history_messages,
            summary.diagnostics,
        )
        return DispatchResult(
            dispatch_id=dispatch_id,
            prompt=prompt,
            evaluated_frontmatter=evaluated_frontmatter,
        )

    def dispatch_file(self, path: Path) -> DispatchResult:
        """Read ``path`` and dispatch it with the file as source identity."""
        with path.open("r", encoding="utf-8") as handle:
            lines = handle.read().splitlines()
        return self.dispatch(lines, str(path))

    def list_dispatches(self) -> list[DispatchSummary]:
        with self._lock:
            return list(self._history)
