"""Filesystem and MIME-sniffing collaborator used for file references and includes."""

from __future__ import annotations

import logging
import mimetypes
import os
import shutil
import subprocess

from promptdoc.runtime.errors import FileReferenceError

logger = logging.getLogger("promptdoc.resolver")

# MIME types by extension, tailored for chat attachments. Used when the
# `file` command is disabled, missing, or inconclusive.
MIME_BY_EXTENSION: dict[str, str] = {
    # Documentation & markup
    "txt": "text/plain",
    "md": "text/markdown",
    "markdown": "text/markdown",
    "rst": "text/x-rst",
    "org": "text/org",
    # Config & data
    "json": "application/json",
    "yaml": "application/yaml",
    "yml": "application/yaml",
    "toml": "application/toml",
    "xml": "application/xml",
    "csv": "text/csv",
    "sql": "application/sql",
    # Web frontend
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "ts": "application/typescript",
    "jsx": "text/jsx",
    "tsx": "text/tsx",
    # Programming languages
    "py": "text/x-python",
    "rb": "text/x-ruby",
    "go": "text/x-go",
    "rs": "text/x-rust",
    "c": "text/x-c",
    "h": "text/x-c",
    "cpp": "text/x-c++",
    "hpp": "text/x-c++",
    "java": "text/x-java",
    "kt": "text/x-kotlin",
    "swift": "text/x-swift",
    "php": "text/x-php",
    "sh": "text/x-shellscript",
    "bash": "text/x-shellscript",
    "lua": "text/x-lua",
    # Images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "bmp": "image/bmp",
    # Documents
    "pdf": "application/pdf",
}

# `file` reports these for content it cannot classify; prefer the extension.
_INCONCLUSIVE_MIME = frozenset({"application/octet-stream", "inode/x-empty"})


def mime_by_extension(path: str) -> str | None:
    _, ext = os.path.splitext(path)
    if not ext:
        return None
    found = MIME_BY_EXTENSION.get(ext[1:].lower())
    if found is not None:
        return found
    guessed, _ = mimetypes.guess_type(path)
    return guessed


class FileResolver:
    """Reads referenced files and determines their MIME type."""

    def __init__(self, use_file_command: bool = True) -> None:
        self._use_file_command = use_file_command
        self._file_command: str | None = None
        self._file_command_checked = False

    @staticmethod
    def resolve(relative_path: str, base_dir: str | None) -> str:
        """Absolute, normalized target for a reference made from ``base_dir``."""
        expanded = os.path.expanduser(relative_path)
        if base_dir and not os.path.isabs(expanded):
            expanded = os.path.join(base_dir, expanded)
        return os.path.normpath(os.path.abspath(expanded))

    def read(self, path: str, raw: str | None = None) -> bytes:
        if not os.path.isfile(path):
            raise FileReferenceError(path, raw, f"File not found: {path}")
        try:
            with open(path, "rb") as handle:
                return handle.read()
        except OSError as exc:
            raise FileReferenceError(path, raw, f"Failed to read file: {exc}") from exc

    def read_text(self, path: str, raw: str | None = None) -> str:
        return self.read(path, raw).decode("utf-8", errors="replace")

    def mime_of(self, path: str, raw: str | None = None) -> str:
        detected = self._mime_from_command(path)
        if detected is not None and detected not in _INCONCLUSIVE_MIME:
            return detected
        fallback = mime_by_extension(path)
        if fallback is not None:
            return fallback
        if detected is not None:
            return detected
        raise FileReferenceError(path, raw, f"Could not determine MIME type for: {path}")

    def _mime_from_command(self, path: str) -> str | None:
        if not self._use_file_command:
            return None
        if not self._file_command_checked:
            self._file_command = shutil.which("file")
            self._file_command_checked = True
            if self._file_command is None:
                logger.debug("'file' command not found; using extension table")
        if self._file_command is None:
            return None
        try:
            proc = subprocess.run(
                [self._file_command, "-b", "--mime-type", path],
                capture_output=True,
                text=True,
                check=False,
                timeout=10,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("MIME detection failed for %s: %s", path, exc)
            return None
        mime_type = proc.stdout.strip()
        if proc.returncode != 0 or not mime_type:
            logger.debug("'file' gave no MIME type for %s (exit %d)", path, proc.returncode)
            return None
        logger.debug("Detected MIME type for %s: %s", path, mime_type)
        return mime_type
