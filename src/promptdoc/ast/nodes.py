"""Immutable document AST nodes.  Produced by the parser, never mutated."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from promptdoc.models.errors import SourceSpan


class Role(StrEnum):
    SYSTEM = "System"
    YOU = "You"
    USER = "User"
    ASSISTANT = "Assistant"

    @property
    def is_evaluated(self) -> bool:
        """Only user-authored messages run expressions and resolve files."""
        return self in (Role.YOU, Role.USER)


@dataclass(frozen=True)
class TextSegment:
    """A literal run of message text."""

    content: str
    kind: Literal["text"] = field(default="text", init=False)


@dataclass(frozen=True)
class ExpressionSegment:
    """Raw source between ``{{`` and ``}}``, unevaluated."""

    source: str
    position: SourceSpan | None = None
    kind: Literal["expression"] = field(default="expression", init=False)

    def render(self) -> str:
        return "{{" + self.source + "}}"


@dataclass(frozen=True)
class FileReferenceSegment:
    """An ``@./path[;type=mime]`` reference.

    ``path`` is percent-decoded; ``raw`` keeps the undecoded source text
    (without the ``@`` and without trailing punctuation) so the reference can
    be rendered back literally.
    """

    path: str
    raw: str
    mime_override: str | None = None
    trailing_punct: str = ""
    position: SourceSpan | None = None
    kind: Literal["file_reference"] = field(default="file_reference", init=False)

    def render(self) -> str:
        return "@" + self.raw


@dataclass(frozen=True)
class ThinkingSegment:
    """Literal lines between ``<thinking>`` tags in an Assistant message."""

    content: str
    position: SourceSpan | None = None
    signature: str | None = None
    signature_provider: str | None = None
    kind: Literal["thinking"] = field(default="thinking", init=False)


Segment = TextSegment | ExpressionSegment | FileReferenceSegment | ThinkingSegment


@dataclass(frozen=True)
class Frontmatter:
    """Declared language tag and unparsed body of the leading fenced block."""

    language: str
    code: str
    position: SourceSpan | None = None
    kind: Literal["frontmatter"] = field(default="frontmatter", init=False)


@dataclass(frozen=True)
class Message:
    role: Role
    segments: tuple[Segment, ...] = ()
    position: SourceSpan | None = None
    kind: Literal["message"] = field(default="message", init=False)


@dataclass(frozen=True)
class Document:
    """Root of a parse.  Re-created per parse."""

    frontmatter: Frontmatter | None = None
    messages: tuple[Message, ...] = ()
    position: SourceSpan | None = None
    kind: Literal["document"] = field(default="document", init=False)


def part_kind(segment: Segment) -> Literal["text", "file", "thinking"]:
    """Classify a segment by the kind of part it evaluates to."""
    if isinstance(segment, ThinkingSegment):
        return "thinking"
    if isinstance(segment, FileReferenceSegment):
        return "file"
    return "text"
