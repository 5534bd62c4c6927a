"""Line parsing with position tracking for chat documents."""

from promptdoc.parser.document import DocumentParser, parse_lines
from promptdoc.parser.segments import SegmentScanner, parse_inline_content

__all__ = [
    "DocumentParser",
    "SegmentScanner",
    "parse_inline_content",
    "parse_lines",
]
