"""Inline tokenizer: ``{{ expressions }}`` and ``@./file`` references."""

from __future__ import annotations

import re
import string
from urllib.parse import unquote_plus

from promptdoc.ast.nodes import ExpressionSegment, FileReferenceSegment, Segment, TextSegment
from promptdoc.models.errors import SourceSpan

# First closing marker wins; expressions may span lines.
_EXPRESSION_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
# "@" + "./" or "../", any run of "." or "/", then non-whitespace.
_FILE_REFERENCE_RE = re.compile(r"@(\.\.?/[./]*\S+)")
_MIME_OVERRIDE_RE = re.compile(r"^([^;]+);type=(.+)$", re.DOTALL)

_PUNCTUATION = string.punctuation


def _split_trailing_punct(value: str) -> tuple[str, str]:
    stripped = value.rstrip(_PUNCTUATION)
    return stripped, value[len(stripped) :]


class SegmentScanner:
    """Single left-to-right scan of a text run into segments.

    ``base_line`` is the 1-indexed source line of the first character so that
    every expression and file reference gets an accurate position.
    """

    def scan(self, text: str, base_line: int = 1) -> list[Segment]:
        segments: list[Segment] = []
        if not text:
            return segments

        def emit_text(value: str) -> None:
            if value:
                segments.append(TextSegment(content=value))

        def span_at(offset: int) -> SourceSpan:
            line = base_line + text.count("\n", 0, offset)
            last_newline = text.rfind("\n", 0, offset)
            return SourceSpan(start_line=line, end_line=line, start_column=offset - last_newline)

        idx = 0
        while idx < len(text):
            expr = _EXPRESSION_RE.search(text, idx)
            ref = _FILE_REFERENCE_RE.search(text, idx)

            if expr is not None and (ref is None or expr.start() < ref.start()):
                emit_text(text[idx : expr.start()])
                position = span_at(expr.start())
                end_line = base_line + text.count("\n", 0, expr.end())
                segments.append(
                    ExpressionSegment(
                        source=expr.group(1),
                        position=position.model_copy(update={"end_line": end_line}),
                    )
                )
                idx = expr.end()
            elif ref is not None:
                emit_text(text[idx : ref.start()])
                reference, trailing = self._file_reference(ref.group(1), span_at(ref.start()))
                if reference is None:
                    # Nothing but punctuation after "./": keep it literal
                    emit_text(ref.group(0))
                else:
                    segments.append(reference)
                    emit_text(trailing)
                idx = ref.end()
            else:
                emit_text(text[idx:])
                break

        return segments

    @staticmethod
    def _file_reference(
        payload: str, position: SourceSpan
    ) -> tuple[FileReferenceSegment | None, str]:
        mime_override: str | None = None
        match = _MIME_OVERRIDE_RE.match(payload)
        if match is None:
            raw_path, trailing = _split_trailing_punct(payload)
            raw = raw_path
        else:
            raw_path = match.group(1)
            mime, trailing = _split_trailing_punct(match.group(2))
            mime_override = mime or None
            raw = f"{raw_path};type={mime}"

        if not raw_path.strip(_PUNCTUATION):
            return None, ""
        return (
            FileReferenceSegment(
                path=unquote_plus(raw_path),
                raw=raw,
                mime_override=mime_override,
                trailing_punct=trailing,
                position=position,
            ),
            trailing,
        )


def parse_inline_content(text: str) -> list[Segment]:
    """Segments for included file content: no frontmatter, no role lines."""
    return SegmentScanner().scan(text or "")
