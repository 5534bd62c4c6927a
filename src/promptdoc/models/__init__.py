"""Pydantic models for diagnostics, content parts and prompts."""

from promptdoc.models.errors import Diagnostic, DiagnosticType, Severity, SourceSpan
from promptdoc.models.parts import (
    EvaluatedPart,
    FilePart,
    GenericPart,
    HistoryMessage,
    ImagePart,
    PdfPart,
    Prompt,
    TextFilePart,
    TextPart,
    ThinkingPart,
    UnsupportedFilePart,
)

__all__ = [
    "Diagnostic",
    "DiagnosticType",
    "EvaluatedPart",
    "FilePart",
    "GenericPart",
    "HistoryMessage",
    "ImagePart",
    "PdfPart",
    "Prompt",
    "Severity",
    "SourceSpan",
    "TextFilePart",
    "TextPart",
    "ThinkingPart",
    "UnsupportedFilePart",
]
