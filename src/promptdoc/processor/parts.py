"""Maps evaluated parts to provider-neutral parts.  Pure, total, no I/O."""

from __future__ import annotations

import base64
from collections.abc import Iterable

from promptdoc.models.parts import (
    EvaluatedPart,
    FilePart,
    GenericPart,
    ImagePart,
    PdfPart,
    TextFilePart,
    TextPart,
    ThinkingPart,
    UnsupportedFilePart,
)


def _file_to_generic(part: FilePart) -> GenericPart:
    mime_type = part.mime_type or ""
    if mime_type.startswith("image/"):
        encoded = base64.b64encode(part.data).decode("ascii")
        return ImagePart(
            mime_type=mime_type,
            data=encoded,
            data_url=f"data:{mime_type};base64,{encoded}",
            filename=part.filename,
        )
    if mime_type == "application/pdf":
        encoded = base64.b64encode(part.data).decode("ascii")
        return PdfPart(
            data=encoded,
            data_url=f"data:application/pdf;base64,{encoded}",
            filename=part.filename,
        )
    if mime_type.startswith("text/"):
        return TextFilePart(
            mime_type=mime_type,
            text=part.data.decode("utf-8", errors="replace"),
            filename=part.filename,
        )
    return UnsupportedFilePart(filename=part.filename, mime_type=mime_type or None)


def to_generic_parts(parts: Iterable[EvaluatedPart]) -> list[GenericPart]:
    """Classify file parts by MIME family; text and thinking pass through."""
    generic: list[GenericPart] = []
    for part in parts:
        if isinstance(part, TextPart):
            if part.text:
                generic.append(part)
        elif isinstance(part, FilePart):
            generic.append(_file_to_generic(part))
        elif isinstance(part, ThinkingPart):
            generic.append(part)
    return generic
