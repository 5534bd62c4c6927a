"""End-to-end tests: real files on disk through the full dispatch cycle."""

from __future__ import annotations

from pathlib import Path

from promptdoc.models.errors import DiagnosticType
from promptdoc.models.parts import ImagePart, TextFilePart, TextPart, ThinkingPart
from promptdoc.service import Dispatcher


class TestSampleDocument:
    def test_full_conversation(
        self, dispatcher: Dispatcher, write_file, sample_lines: list[str], tmp_path: Path
    ) -> None:
        write_file("notes.txt", "remember the milk")
        result = dispatcher.dispatch(sample_lines, str(tmp_path / "chat.md"))
        prompt = result.prompt

        assert prompt.system == "You are a helpful assistant."
        assert [m.role for m in prompt.history] == ["user", "assistant", "user"]

        first_user = prompt.history[0]
        assert first_user.parts == [
            TextPart(text="Hello Ada, let's talk about parsing, evaluation.")
        ]

        assistant = prompt.history[1]
        assert assistant.parts[0] == TextPart(text="Sure, {{ name }}! See @./notes.txt\n")
        assert assistant.parts[1] == ThinkingPart(
            content="Consider the topics.", signature="sig-123", signature_provider="anthropic"
        )
        assert assistant.parts[2] == TextPart(text="Happy to help.")

        last_user = prompt.history[2]
        assert last_user.parts[0] == TextPart(text="Thanks, here are my notes: ")
        assert last_user.parts[1] == TextFilePart(
            mime_type="text/plain",
            text="remember the milk",
            filename=str(tmp_path / "notes.txt"),
        )
        assert prompt.diagnostics == []

    def test_missing_attachment_is_a_warning(
        self, dispatcher: Dispatcher, sample_lines: list[str], tmp_path: Path
    ) -> None:
        result = dispatcher.dispatch(sample_lines, str(tmp_path / "chat.md"))
        [diagnostic] = result.diagnostics
        assert diagnostic.type is DiagnosticType.FILE
        assert diagnostic.position.start_line == 14
        assert result.prompt.history[2].parts == [
            TextPart(text="Thanks, here are my notes: @./notes.txt")
        ]


class TestIncludes:
    def test_mutual_include_terminates(self, dispatcher: Dispatcher, write_file) -> None:
        write_file("a.md", "A says {{ include('./b.md') }}")
        write_file("b.md", "B says {{ include('./a.md') }}")
        chat = write_file("chat.md", "@You: {{ include('./a.md') }}\n")

        result = dispatcher.dispatch_file(chat)

        [diagnostic] = result.diagnostics
        assert diagnostic.type is DiagnosticType.EXPRESSION
        assert "Circular include" in diagnostic.message
        assert "a.md" in diagnostic.message
        assert result.prompt.history[0].parts == [
            TextPart(text="{{ include('./a.md') }}")
        ]

    def test_include_chain_with_attachment(
        self, dispatcher: Dispatcher, write_file, png_bytes: bytes
    ) -> None:
        write_file("assets/logo.png", png_bytes)
        write_file("assets/brief.md", "Brief for {{ client }}: @./logo.png")
        chat = write_file(
            "chat.md",
            "```python\nclient = 'ACME'.title()\n```\n@You: {{ include('./assets/brief.md') }}\n",
        )

        result = dispatcher.dispatch_file(chat)

        parts = result.prompt.history[0].parts
        assert parts[0] == TextPart(text="Brief for Acme: ")
        assert isinstance(parts[1], ImagePart)
        assert parts[1].mime_type == "image/png"
        assert result.diagnostics == []

    def test_binary_include_of_text_file(self, dispatcher: Dispatcher, write_file) -> None:
        write_file("raw.md", "{{ untouched }}")
        chat = write_file("chat.md", "@You: {{ include('./raw.md', binary=True) }}\n")

        result = dispatcher.dispatch_file(chat)

        [part] = result.prompt.history[0].parts
        assert isinstance(part, TextFilePart)
        assert part.text == "{{ untouched }}"
        assert part.mime_type == "text/markdown"
