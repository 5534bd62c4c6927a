"""Tests for the document parser, frontmatter fence and inline tokenizer."""

from __future__ import annotations

from promptdoc.ast.nodes import (
    ExpressionSegment,
    FileReferenceSegment,
    Role,
    TextSegment,
    ThinkingSegment,
)
from promptdoc.ast.visitor import SourceRenderer
from promptdoc.parser import DocumentParser, SegmentScanner, parse_inline_content, parse_lines
from promptdoc.parser.fence import split_frontmatter


class TestFrontmatterFence:
    def test_split_closed_fence(self) -> None:
        language, code, body, body_start = split_frontmatter(
            ["```yaml", "a: 1", "b: 2", "```", "@You: x"]
        )
        assert language == "yaml"
        assert code == "a: 1\nb: 2"
        assert body == ["@You: x"]
        assert body_start == 5

    def test_trailing_whitespace_on_fences(self) -> None:
        language, code, _, _ = split_frontmatter(["```json  ", "{}", "```   "])
        assert language == "json"
        assert code == "{}"

    def test_unclosed_fence_is_body(self) -> None:
        lines = ["```json", "{}", "@You: hi"]
        assert split_frontmatter(lines) == (None, None, lines, 1)

    def test_fence_must_be_first_line(self) -> None:
        lines = ["", "```json", "{}", "```"]
        language, code, body, _ = split_frontmatter(lines)
        assert language is None
        assert code is None
        assert body == lines

    def test_empty_input(self) -> None:
        assert split_frontmatter([]) == (None, None, [], 1)


class TestSegmentScanner:
    def test_expression_and_file_reference(self) -> None:
        segments = SegmentScanner().scan("Hello {{1+1}} world @./a.txt.")
        assert segments == [
            TextSegment("Hello "),
            ExpressionSegment("1+1", segments[1].position),
            TextSegment(" world "),
            FileReferenceSegment(
                path="./a.txt", raw="./a.txt", trailing_punct=".", position=segments[3].position
            ),
            TextSegment("."),
        ]

    def test_expression_position(self) -> None:
        segments = SegmentScanner().scan("a\nb {{ x }}", base_line=2)
        expr = segments[1]
        assert isinstance(expr, ExpressionSegment)
        assert expr.position is not None
        assert expr.position.start_line == 3
        assert expr.position.start_column == 3

    def test_multiline_expression(self) -> None:
        segments = SegmentScanner().scan("{{ 1 +\n 2 }}", base_line=5)
        assert len(segments) == 1
        expr = segments[0]
        assert isinstance(expr, ExpressionSegment)
        assert expr.source == " 1 +\n 2 "
        assert expr.position.start_line == 5
        assert expr.position.end_line == 6

    def test_first_closing_marker_wins(self) -> None:
        segments = SegmentScanner().scan("{{ a }} }}")
        assert isinstance(segments[0], ExpressionSegment)
        assert segments[0].source == " a "
        assert segments[1] == TextSegment(" }}")

    def test_unclosed_expression_is_text(self) -> None:
        assert SegmentScanner().scan("{{ oops") == [TextSegment("{{ oops")]

    def test_percent_decoding_and_mime_override(self) -> None:
        segments = SegmentScanner().scan("See @./my%20file.bin;type=image/png!")
        ref = segments[1]
        assert isinstance(ref, FileReferenceSegment)
        assert ref.path == "./my file.bin"
        assert ref.mime_override == "image/png"
        assert ref.trailing_punct == "!"
        assert segments[2] == TextSegment("!")

    def test_parent_directory_reference(self) -> None:
        segments = SegmentScanner().scan("@../docs/spec.md")
        ref = segments[0]
        assert isinstance(ref, FileReferenceSegment)
        assert ref.path == "../docs/spec.md"
        assert ref.trailing_punct == ""

    def test_punctuation_only_path_stays_literal(self) -> None:
        segments = SegmentScanner().scan("see @./...")
        assert all(isinstance(s, TextSegment) for s in segments)
        assert SourceRenderer().render(segments) == "see @./..."

    def test_bare_at_sign_is_text(self) -> None:
        assert SegmentScanner().scan("mail me @ home or @user") == [
            TextSegment("mail me @ home or @user")
        ]

    def test_empty_text(self) -> None:
        assert SegmentScanner().scan("") == []

    def test_parse_inline_content(self) -> None:
        segments = parse_inline_content("Hi {{ x }}")
        assert [s.kind for s in segments] == ["text", "expression"]
        assert parse_inline_content(None) == []  # type: ignore[arg-type]


class TestDocumentParser:
    def test_single_message(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@You: Hello {{1+1}} world @./a.txt."])
        assert doc.frontmatter is None
        assert len(doc.messages) == 1
        message = doc.messages[0]
        assert message.role is Role.YOU
        assert [s.kind for s in message.segments] == [
            "text",
            "expression",
            "text",
            "file_reference",
            "text",
        ]

    def test_frontmatter_and_positions(self, parser: DocumentParser) -> None:
        doc = parser.parse(["```json", '{"a": 1}', "```", "@You: hi"])
        assert doc.frontmatter is not None
        assert doc.frontmatter.language == "json"
        assert doc.frontmatter.code == '{"a": 1}'
        assert doc.frontmatter.position.start_line == 1
        assert doc.frontmatter.position.end_line == 3
        message = doc.messages[0]
        assert message.position.start_line == 4
        assert message.position.end_line == 4
        assert doc.position.end_line == 4

    def test_multiline_messages(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@You:", "line one", "line two", "@Assistant: ok"])
        assert [m.role for m in doc.messages] == [Role.YOU, Role.ASSISTANT]
        assert doc.messages[0].segments == (TextSegment("line one\nline two"),)
        assert doc.messages[0].position.start_line == 1
        assert doc.messages[0].position.end_line == 3
        assert doc.messages[1].position.start_line == 4

    def test_role_line_content_is_left_stripped(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@You:    hi"])
        assert doc.messages[0].segments == (TextSegment("hi"),)

    def test_all_roles(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@System: s", "@You: y", "@User: u", "@Assistant: a"])
        assert [m.role for m in doc.messages] == [
            Role.SYSTEM,
            Role.YOU,
            Role.USER,
            Role.ASSISTANT,
        ]

    def test_lines_before_first_role_are_ignored(self, parser: DocumentParser) -> None:
        doc = parser.parse(["preamble", "", "@You: hi"])
        assert len(doc.messages) == 1
        assert doc.messages[0].position.start_line == 3

    def test_unknown_role_is_content(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@You: hi", "@Bot: x"])
        assert len(doc.messages) == 1
        assert doc.messages[0].segments == (TextSegment("hi\n@Bot: x"),)

    def test_unclosed_fence_is_not_frontmatter(self, parser: DocumentParser) -> None:
        doc = parser.parse(["```json", "{}", "@You: hi"])
        assert doc.frontmatter is None
        assert len(doc.messages) == 1

    def test_frontmatter_only_document(self, parser: DocumentParser) -> None:
        doc = parser.parse(["```json", "{}", "```"])
        assert doc.frontmatter is not None
        assert doc.frontmatter.language == "json"
        assert doc.messages == ()

    def test_unclosed_fence_before_first_role_is_dropped(self, parser: DocumentParser) -> None:
        doc = parser.parse(["```json", "{}", "@You: hi"])
        assert doc.messages[0].segments == (TextSegment("hi"),)

    def test_empty_document(self, parser: DocumentParser) -> None:
        doc = parser.parse([])
        assert doc.frontmatter is None
        assert doc.messages == ()
        assert doc.position is None

    def test_parse_is_deterministic(self) -> None:
        lines = ["```yaml", "a: 1", "```", "@You: {{ a }} @./x.txt", "@Assistant: ok"]
        assert parse_lines(lines) == parse_lines(lines)

    def test_source_round_trip(self, parser: DocumentParser) -> None:
        text = "Hello {{1+1}} world @./my%20f.bin;type=image/png! and {{ 'x' }}"
        doc = parser.parse([f"@You: {text}"])
        assert SourceRenderer().render(doc.messages[0].segments) == text


class TestThinkingBlocks:
    def test_thinking_block(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@Assistant:", "<thinking>", "deep", "</thinking>", "Answer"])
        segments = doc.messages[0].segments
        assert isinstance(segments[0], ThinkingSegment)
        assert segments[0].content == "deep"
        assert segments[0].signature is None
        assert segments[0].position.start_line == 2
        assert segments[0].position.end_line == 4
        assert segments[1] == TextSegment("Answer")

    def test_thinking_signature(self, parser: DocumentParser) -> None:
        doc = parser.parse(
            ["@Assistant:", '<thinking anthropic:signature="abc">', "x", "</thinking>"]
        )
        thinking = doc.messages[0].segments[0]
        assert isinstance(thinking, ThinkingSegment)
        assert thinking.signature == "abc"
        assert thinking.signature_provider == "anthropic"

    def test_self_closing_thinking(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@Assistant: before", '<thinking openai:signature="xyz"/>', "after"])
        segments = doc.messages[0].segments
        assert segments[0] == TextSegment("before\n")
        assert isinstance(segments[1], ThinkingSegment)
        assert segments[1].content == ""
        assert segments[1].signature == "xyz"
        assert segments[1].signature_provider == "openai"
        assert segments[2] == TextSegment("after")

    def test_unclosed_thinking_is_text(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@Assistant:", "<thinking>", "text"])
        assert doc.messages[0].segments == (TextSegment("<thinking>\ntext"),)

    def test_thinking_only_in_assistant(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@You:", "<thinking>", "x", "</thinking>"])
        assert not any(isinstance(s, ThinkingSegment) for s in doc.messages[0].segments)

    def test_assistant_still_tokenizes_markers(self, parser: DocumentParser) -> None:
        doc = parser.parse(["@Assistant: {{ 1 + 1 }} @./a.txt"])
        kinds = [s.kind for s in doc.messages[0].segments]
        assert "expression" in kinds
        assert "file_reference" in kinds
