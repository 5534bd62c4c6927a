"""Document evaluation: role policies, parts mapping and content chunking."""

from promptdoc.processor.chunks import ContentChunks, FileChunk, TextChunk, WarningsChunk
from promptdoc.processor.parts import to_generic_parts
from promptdoc.processor.processor import (
    EvaluatingPartBuilder,
    LiteralPartBuilder,
    Processor,
)
from promptdoc.processor.results import EvaluatedFrontmatter, EvaluatedMessage, EvaluatedResult

__all__ = [
    "ContentChunks",
    "EvaluatedFrontmatter",
    "EvaluatedMessage",
    "EvaluatedResult",
    "EvaluatingPartBuilder",
    "FileChunk",
    "LiteralPartBuilder",
    "Processor",
    "TextChunk",
    "WarningsChunk",
    "to_generic_parts",
]
