"""Evaluated and provider-neutral content parts, plus the assembled Prompt."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from promptdoc.models.errors import Diagnostic, SourceSpan

# ---------------------------------------------------------------------------
# Evaluated parts (processor output)
# ---------------------------------------------------------------------------


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class FilePart(BaseModel):
    """A resolved file attachment.  ``data`` holds the raw bytes."""

    kind: Literal["file"] = "file"
    filename: str
    mime_type: str
    data: bytes
    position: SourceSpan | None = None


class ThinkingPart(BaseModel):
    """Preserved reasoning block; the signature lets providers restore state."""

    kind: Literal["thinking"] = "thinking"
    content: str
    signature: str | None = None
    signature_provider: str | None = None


EvaluatedPart = TextPart | FilePart | ThinkingPart

# ---------------------------------------------------------------------------
# Generic (provider-neutral) parts
# ---------------------------------------------------------------------------


class ImagePart(BaseModel):
    kind: Literal["image"] = "image"
    mime_type: str
    data: str  # base64
    data_url: str
    filename: str


class PdfPart(BaseModel):
    kind: Literal["pdf"] = "pdf"
    mime_type: str = "application/pdf"
    data: str  # base64
    data_url: str
    filename: str


class TextFilePart(BaseModel):
    kind: Literal["text_file"] = "text_file"
    mime_type: str
    text: str
    filename: str


class UnsupportedFilePart(BaseModel):
    kind: Literal["unsupported_file"] = "unsupported_file"
    filename: str | None = None
    mime_type: str | None = None


GenericPart = TextPart | ImagePart | PdfPart | TextFilePart | UnsupportedFilePart | ThinkingPart

# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


class HistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    parts: list[GenericPart] = Field(default_factory=list)


class Prompt(BaseModel):
    """Provider-agnostic prompt consumed by request builders."""

    system: str | None = None
    history: list[HistoryMessage] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
