"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for document processing.

    Values are read from ``PROMPTDOC_*`` environment variables and from a
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMPTDOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"

    # MIME sniffing: try `file --mime-type` before the extension table
    use_file_command: bool = True

    # YAML frontmatter safety limits
    max_frontmatter_size: int = 1_000_000  # characters
    max_frontmatter_nodes: int = 50_000
    max_frontmatter_depth: int = 20
