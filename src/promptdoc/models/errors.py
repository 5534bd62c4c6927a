"""Structured diagnostics with source position tracking."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class DiagnosticType(StrEnum):
    EXPRESSION = "expression"
    FILE = "file"
    FRONTMATTER = "frontmatter"


class Severity(StrEnum):
    WARNING = "warning"
    ERROR = "error"


class SourceSpan(BaseModel):
    """Points to a 1-indexed, inclusive line range in the source document."""

    model_config = ConfigDict(frozen=True)

    start_line: int
    end_line: int | None = None
    start_column: int | None = None
    file: str | None = None


class Diagnostic(BaseModel):
    """A non-fatal evaluation problem.  Always returned as data, never raised."""

    type: DiagnosticType
    severity: Severity = Severity.WARNING
    message: str
    expression: str | None = None
    filename: str | None = None
    position: SourceSpan | None = None
    message_role: str | None = None
    source_file: str | None = None

    def format(self) -> str:
        """One-line human readable rendering, e.g. for stderr."""
        where = self.source_file or "N/A"
        if self.position is not None:
            where = f"{where}:{self.position.start_line}"
        return f"{where}: {self.severity.value}: [{self.type.value}] {self.message}"
