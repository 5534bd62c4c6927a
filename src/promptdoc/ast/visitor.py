"""Visitor pattern for segment traversal."""

from __future__ import annotations

from typing import Any

from promptdoc.ast.nodes import (
    ExpressionSegment,
    FileReferenceSegment,
    Segment,
    TextSegment,
    ThinkingSegment,
)


class SegmentVisitor:
    """Base visitor for message segments.

    Override specific visit_* methods to customize behavior.  Dispatch is on
    ``segment.kind``; the defaults render each segment back to its source text.
    """

    def visit(self, segment: Segment) -> Any:
        """Dispatch to the appropriate visit_* method."""
        method = getattr(self, f"visit_{segment.kind}", self.generic_visit)
        return method(segment)

    def generic_visit(self, segment: Segment) -> Any:
        return segment

    def visit_text(self, segment: TextSegment) -> Any:
        return segment.content

    def visit_expression(self, segment: ExpressionSegment) -> Any:
        return segment.render()

    def visit_file_reference(self, segment: FileReferenceSegment) -> Any:
        return segment.render()

    def visit_thinking(self, segment: ThinkingSegment) -> Any:
        return segment.content


class SourceRenderer(SegmentVisitor):
    """Reconstructs message source text from segments, skipping thinking."""

    def visit_thinking(self, segment: ThinkingSegment) -> str:
        return ""

    def render(self, segments: tuple[Segment, ...] | list[Segment]) -> str:
        return "".join(self.visit(seg) for seg in segments)
