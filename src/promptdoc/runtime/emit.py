"""Emit protocol for structured expression results.

An expression result with an ``emit(ctx)`` method contributes parts directly
(text and file attachments) instead of being stringified.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

from promptdoc.models.errors import SourceSpan
from promptdoc.models.parts import EvaluatedPart, FilePart, TextPart


@runtime_checkable
class Emittable(Protocol):
    def emit(self, ctx: EmitContext) -> None: ...


def is_emittable(value: Any) -> bool:
    return callable(getattr(value, "emit", None)) and not isinstance(value, type)


def to_text(value: Any) -> str:
    """Display text for a plain expression result."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


class EmitContext:
    """Collects parts in order; adjacent text is merged as it arrives."""

    def __init__(self, position: SourceSpan | None = None) -> None:
        self.position = position
        self.parts: list[EvaluatedPart] = []

    def text(self, value: str | None) -> None:
        if not value:
            return
        if self.parts and isinstance(self.parts[-1], TextPart):
            last = self.parts[-1]
            self.parts[-1] = TextPart(text=last.text + value)
        else:
            self.parts.append(TextPart(text=value))

    def file(
        self,
        filename: str,
        mime_type: str,
        data: bytes,
        position: SourceSpan | None = None,
    ) -> None:
        self.parts.append(
            FilePart(
                filename=filename,
                mime_type=mime_type,
                data=data,
                position=position or self.position,
            )
        )

    def part(self, part: EvaluatedPart) -> None:
        if isinstance(part, TextPart):
            self.text(part.text)
        else:
            self.parts.append(part)

    def emit(self, value: Any) -> None:
        if is_emittable(value):
            value.emit(self)
        else:
            self.text(to_text(value))


class BinaryIncludePart:
    """A resolved file attachment."""

    def __init__(self, filename: str, mime_type: str, data: bytes) -> None:
        self.filename = filename
        self.mime_type = mime_type
        self.data = data

    def emit(self, ctx: EmitContext) -> None:
        ctx.file(self.filename, self.mime_type, self.data)

    def __str__(self) -> str:
        if self.mime_type.startswith("text/"):
            return self.data.decode("utf-8", errors="replace")
        return f"@{self.filename}"

    def __repr__(self) -> str:
        return f"BinaryIncludePart({self.filename!r}, {self.mime_type!r}, {len(self.data)} bytes)"


class CompositeIncludePart:
    """Evaluated content of a text include: strings and nested emittables."""

    def __init__(self, children: list[Any]) -> None:
        self.children = children

    def emit(self, ctx: EmitContext) -> None:
        for child in self.children:
            ctx.emit(child)

    def __str__(self) -> str:
        return "".join(str(child) for child in self.children)

    def __repr__(self) -> str:
        return f"CompositeIncludePart({len(self.children)} children)"
