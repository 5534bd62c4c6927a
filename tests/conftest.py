"""Shared test fixtures for promptdoc."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from promptdoc.parser.document import DocumentParser
from promptdoc.pipeline.pipeline import PromptPipeline
from promptdoc.processor.processor import Processor
from promptdoc.runtime.resolver import FileResolver
from promptdoc.service.dispatcher import Dispatcher
from promptdoc.settings import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings with MIME sniffing pinned to the extension table."""
    return Settings(use_file_command=False)


@pytest.fixture
def resolver() -> FileResolver:
    return FileResolver(use_file_command=False)


@pytest.fixture
def parser() -> DocumentParser:
    return DocumentParser()


@pytest.fixture
def processor(resolver: FileResolver, settings: Settings) -> Processor:
    return Processor(resolver=resolver, settings=settings)


@pytest.fixture
def pipeline(processor: Processor) -> PromptPipeline:
    return PromptPipeline(processor)


@pytest.fixture
def dispatcher(pipeline: PromptPipeline) -> Dispatcher:
    return Dispatcher(pipeline)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str | bytes], Path]:
    """Write a file under ``tmp_path`` and return its path."""

    def _write(name: str, content: str | bytes) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


# 1x1 transparent PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06"
    b"\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01"
    b"\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)

SAMPLE_DOCUMENT = """\
```yaml
name: Ada
topics:
  - parsing
  - evaluation
```
@System: You are a helpful assistant.
@You: Hello {{ name }}, let's talk about {{ ", ".join(topics) }}.
@Assistant: Sure, {{ name }}! See @./notes.txt
<thinking anthropic:signature="sig-123">
Consider the topics.
</thinking>
Happy to help.
@You: Thanks, here are my notes: @./notes.txt
"""


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def sample_lines() -> list[str]:
    return SAMPLE_DOCUMENT.splitlines()
