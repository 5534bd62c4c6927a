"""Pull-based chunking of plain message text into text and file chunks.

For callers that hold a raw string rather than a parsed document: ``@./file``
references are resolved, everything else (including ``{{ }}`` markers) stays
text.  Iteration is finite and restartable; each ``iter()`` rescans.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from promptdoc.ast.nodes import FileReferenceSegment
from promptdoc.models.errors import Diagnostic, DiagnosticType, Severity
from promptdoc.parser.segments import SegmentScanner
from promptdoc.runtime.errors import FileReferenceError
from promptdoc.runtime.resolver import FileResolver

logger = logging.getLogger("promptdoc.processor")


@dataclass(frozen=True)
class TextChunk:
    value: str
    type: str = field(default="text", init=False)


@dataclass(frozen=True)
class FileChunk:
    """A file reference; ``readable`` is False when resolution failed."""

    filename: str
    raw_filename: str
    readable: bool
    mime_type: str | None = None
    content: bytes | None = None
    error: str | None = None
    type: str = field(default="file", init=False)


@dataclass(frozen=True)
class WarningsChunk:
    """Emitted last, only if some reference failed: one diagnostic per reference."""

    warnings: tuple[Diagnostic, ...]
    type: str = field(default="warnings", init=False)


Chunk = TextChunk | FileChunk | WarningsChunk


class ContentChunks:
    def __init__(
        self,
        content: str,
        base_dir: str | None = None,
        resolver: FileResolver | None = None,
        source_file: str | None = None,
    ) -> None:
        self._content = content or ""
        self._base_dir = base_dir
        self._resolver = resolver or FileResolver()
        self._source_file = source_file

    def __iter__(self) -> Iterator[Chunk]:
        warnings: list[Diagnostic] = []
        pending = ""
        for segment in SegmentScanner().scan(self._content):
            if not isinstance(segment, FileReferenceSegment):
                pending += segment.render() if segment.kind == "expression" else segment.content
                continue
            if pending:
                yield TextChunk(pending)
                pending = ""
            chunk = self._resolve(segment)
            if not chunk.readable:
                warnings.append(
                    Diagnostic(
                        type=DiagnosticType.FILE,
                        severity=Severity.WARNING,
                        message=chunk.error or "unreadable file",
                        filename=chunk.filename,
                        position=segment.position,
                        source_file=self._source_file or "N/A",
                    )
                )
            yield chunk
        if pending:
            yield TextChunk(pending)
        if warnings:
            yield WarningsChunk(tuple(warnings))

    def _resolve(self, segment: FileReferenceSegment) -> FileChunk:
        target = self._resolver.resolve(segment.path, self._base_dir)
        try:
            content = self._resolver.read(target, segment.raw)
            mime_type = segment.mime_override or self._resolver.mime_of(target, segment.raw)
        except FileReferenceError as exc:
            logger.debug("Unreadable reference @%s: %s", segment.raw, exc)
            return FileChunk(
                filename=target, raw_filename=segment.raw, readable=False, error=str(exc)
            )
        return FileChunk(
            filename=target,
            raw_filename=segment.raw,
            readable=True,
            mime_type=mime_type,
            content=content,
        )
