"""Tests for mapping evaluated parts to provider-neutral parts."""

from __future__ import annotations

import base64

from promptdoc.models.parts import (
    FilePart,
    ImagePart,
    PdfPart,
    TextFilePart,
    TextPart,
    ThinkingPart,
    UnsupportedFilePart,
)
from promptdoc.processor.parts import to_generic_parts


class TestGenericParts:
    def test_image(self, png_bytes: bytes) -> None:
        [part] = to_generic_parts([FilePart(filename="/a.png", mime_type="image/png", data=png_bytes)])
        assert isinstance(part, ImagePart)
        encoded = base64.b64encode(png_bytes).decode("ascii")
        assert part.data == encoded
        assert part.data_url == f"data:image/png;base64,{encoded}"
        assert part.filename == "/a.png"

    def test_pdf(self) -> None:
        [part] = to_generic_parts(
            [FilePart(filename="/d.pdf", mime_type="application/pdf", data=b"%PDF-1.4")]
        )
        assert isinstance(part, PdfPart)
        assert part.data_url.startswith("data:application/pdf;base64,")

    def test_text_file(self) -> None:
        [part] = to_generic_parts(
            [FilePart(filename="/n.md", mime_type="text/markdown", data="héllo".encode())]
        )
        assert part == TextFilePart(mime_type="text/markdown", text="héllo", filename="/n.md")

    def test_unsupported(self) -> None:
        [part] = to_generic_parts(
            [FilePart(filename="/z.zip", mime_type="application/zip", data=b"PK")]
        )
        assert part == UnsupportedFilePart(filename="/z.zip", mime_type="application/zip")

    def test_text_and_thinking_pass_through(self) -> None:
        thinking = ThinkingPart(content="c", signature="s", signature_provider="p")
        parts = to_generic_parts([TextPart(text="a"), TextPart(text=""), thinking])
        assert parts == [TextPart(text="a"), thinking]

    def test_order_preserved(self) -> None:
        parts = to_generic_parts(
            [
                TextPart(text="a"),
                FilePart(filename="/t.txt", mime_type="text/plain", data=b"t"),
                TextPart(text="b"),
            ]
        )
        assert [p.kind for p in parts] == ["text", "text_file", "text"]
