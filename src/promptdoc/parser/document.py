"""Line-oriented document parser with line-span tracking for every node."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from promptdoc.ast.nodes import Document, Frontmatter, Message, Role, Segment, ThinkingSegment
from promptdoc.models.errors import SourceSpan
from promptdoc.parser.fence import split_frontmatter
from promptdoc.parser.segments import SegmentScanner

logger = logging.getLogger("promptdoc.parser")

_ROLE_RE = re.compile(r"^@(System|You|User|Assistant):")
_THINKING_OPEN_RE = re.compile(r"^<thinking(?:\s+(\w+):signature=\"([^\"]*)\")?\s*>$")
_THINKING_SELF_CLOSING_RE = re.compile(r"^<thinking\s+(\w+):signature=\"([^\"]*)\"\s*/>$")
_THINKING_CLOSE = "</thinking>"


class DocumentParser:
    """Turns raw lines into a :class:`Document`.

    Parsing is total: malformed structure (unclosed fences, unclosed thinking
    tags, stray text before the first role line) degrades to literal text or
    is skipped, never raised.
    """

    def __init__(self) -> None:
        self._scanner = SegmentScanner()

    def parse(self, lines: Sequence[str]) -> Document:
        """Parse ``lines`` into a Document.

        Anything before the first role line is dropped, including the lines
        of an unclosed leading fence, which is not frontmatter.
        """
        lines = list(lines)
        language, code, body, body_start = split_frontmatter(lines)
        frontmatter = None
        if language is not None and code is not None:
            frontmatter = Frontmatter(
                language=language,
                code=code,
                position=SourceSpan(start_line=1, end_line=body_start - 1),
            )

        line_offset = body_start - 1
        messages: list[Message] = []
        i = 0
        while i < len(body):
            match = _ROLE_RE.match(body[i])
            if match is None:
                i += 1
                continue
            message, i = self._parse_message(body, i, line_offset, match)
            messages.append(message)

        logger.debug(
            "Parsed %d lines: frontmatter=%s, %d messages",
            len(lines),
            frontmatter.language if frontmatter else None,
            len(messages),
        )
        position = SourceSpan(start_line=1, end_line=len(lines)) if lines else None
        return Document(frontmatter=frontmatter, messages=tuple(messages), position=position)

    # -- messages ------------------------------------------------------------

    def _parse_message(
        self, body: list[str], start: int, line_offset: int, match: re.Match[str]
    ) -> tuple[Message, int]:
        """Parse the message starting at ``body[start]``; returns it and the next index."""
        role = Role(match.group(1))

        rest = body[start][match.end() :]
        content_lines: list[str] = []
        if rest.strip():
            content_lines.append(rest.lstrip())
            content_start_line = start + 1 + line_offset
        else:
            content_start_line = start + 2 + line_offset

        i = start + 1
        while i < len(body) and _ROLE_RE.match(body[i]) is None:
            content_lines.append(body[i])
            i += 1

        if role is Role.ASSISTANT:
            segments = self._assistant_segments(content_lines, content_start_line)
        else:
            segments = self._scanner.scan("\n".join(content_lines), content_start_line)

        position = SourceSpan(start_line=start + 1 + line_offset, end_line=i + line_offset)
        return Message(role=role, segments=tuple(segments), position=position), i

    def _assistant_segments(self, lines: list[str], base_line: int) -> list[Segment]:
        """Thinking blocks on their own lines; everything else tokenized as usual."""
        segments: list[Segment] = []
        pending: list[str] = []
        pending_line = base_line
        last = len(lines) - 1

        def flush() -> None:
            if pending:
                segments.extend(self._scanner.scan("".join(pending), pending_line))
                pending.clear()

        i = 0
        while i <= last:
            line = lines[i]
            line_no = base_line + i

            self_closing = _THINKING_SELF_CLOSING_RE.match(line)
            if self_closing is not None:
                flush()
                segments.append(
                    ThinkingSegment(
                        content="",
                        position=SourceSpan(start_line=line_no, end_line=line_no),
                        signature=self_closing.group(2),
                        signature_provider=self_closing.group(1),
                    )
                )
                i += 1
                pending_line = base_line + i
                continue

            opening = _THINKING_OPEN_RE.match(line)
            close_idx = _find_close(lines, i + 1) if opening is not None else None
            if opening is not None and close_idx is not None:
                flush()
                segments.append(
                    ThinkingSegment(
                        content="\n".join(lines[i + 1 : close_idx]),
                        position=SourceSpan(start_line=line_no, end_line=base_line + close_idx),
                        signature=opening.group(2),
                        signature_provider=opening.group(1),
                    )
                )
                i = close_idx + 1
                pending_line = base_line + i
                continue

            pending.append(line + "\n" if i < last else line)
            i += 1

        flush()
        return segments


def _find_close(lines: list[str], start: int) -> int | None:
    for idx in range(start, len(lines)):
        if lines[idx] == _THINKING_CLOSE:
            return idx
    return None


def parse_lines(lines: Sequence[str]) -> Document:
    """Parse raw document lines."""
    return DocumentParser().parse(lines)
