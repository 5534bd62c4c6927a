"""Document AST: nodes and segment visitor."""

from promptdoc.ast.nodes import (
    Document,
    ExpressionSegment,
    FileReferenceSegment,
    Frontmatter,
    Message,
    Role,
    Segment,
    TextSegment,
    ThinkingSegment,
    part_kind,
)
from promptdoc.ast.visitor import SegmentVisitor, SourceRenderer

__all__ = [
    "Document",
    "ExpressionSegment",
    "FileReferenceSegment",
    "Frontmatter",
    "Message",
    "Role",
    "Segment",
    "SegmentVisitor",
    "SourceRenderer",
    "TextSegment",
    "ThinkingSegment",
    "part_kind",
]
