"""Structured-data frontmatter: JSON and YAML bodies parsed as a single record."""

from __future__ import annotations

import json
import re
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from promptdoc.context import Context
from promptdoc.frontmatter.base import FrontmatterExecutor
from promptdoc.frontmatter.errors import (
    FrontmatterParseError,
    FrontmatterTypeError,
    YAMLSafetyError,
)
from promptdoc.frontmatter.registry import FrontmatterRegistry

# Regex to detect YAML anchor definitions (&name).
# Matches & at line start or after whitespace/sequence indicators, followed by
# an anchor name, but NOT inside quoted strings (good-enough heuristic).
_ANCHOR_RE = re.compile(r"(?:^|[\s\-:])&(\w+)", re.MULTILINE)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


@FrontmatterRegistry.register
class JsonFrontmatterExecutor(FrontmatterExecutor):
    """```json frontmatter: the body must be one JSON object."""

    @property
    def languages(self) -> tuple[str, ...]:
        return ("json",)

    def execute(self, code: str, context: Context) -> dict[str, Any]:
        try:
            result = json.loads(code)
        except json.JSONDecodeError as exc:
            raise FrontmatterParseError("json", f"JSON parse error: {exc}") from exc
        if not isinstance(result, dict):
            raise FrontmatterTypeError(
                "json", f"JSON frontmatter must be an object, got {_type_name(result)}"
            )
        return result


@FrontmatterRegistry.register
class YamlFrontmatterExecutor(FrontmatterExecutor):
    """```yaml frontmatter, loaded with ruamel.yaml under safety limits."""

    @property
    def languages(self) -> tuple[str, ...]:
        return ("yaml", "yml")

    def _yaml(self) -> YAML:
        yaml = YAML()
        yaml.preserve_quotes = True
        return yaml

    # -- safety checks -------------------------------------------------------

    def _check_yaml_safety(self, content: str) -> None:
        """Pre-parse checks: document size and anchors/aliases."""
        limit = self.settings.max_frontmatter_size
        if len(content) > limit:
            raise YAMLSafetyError(
                "yaml",
                f"YAML frontmatter exceeds maximum size ({len(content):,} chars > {limit:,} limit)",
            )
        if _ANCHOR_RE.search(content):
            raise YAMLSafetyError("yaml", "YAML anchors/aliases are not supported in frontmatter")

    def _check_structure(self, data: Any) -> None:
        """Post-parse defense-in-depth: node count and nesting depth."""
        node_limit = self.settings.max_frontmatter_nodes
        depth_limit = self.settings.max_frontmatter_depth
        count = 0
        stack: list[tuple[Any, int]] = [(data, 1)]
        while stack:
            node, depth = stack.pop()
            count += 1
            if count > node_limit:
                raise YAMLSafetyError(
                    "yaml", f"YAML frontmatter exceeds maximum node count ({node_limit:,})"
                )
            if depth > depth_limit:
                raise YAMLSafetyError(
                    "yaml", f"YAML frontmatter exceeds maximum nesting depth ({depth_limit})"
                )
            if isinstance(node, dict):
                stack.extend((child, depth + 1) for child in node.values())
            elif isinstance(node, list):
                stack.extend((child, depth + 1) for child in node)

    # -- execution -----------------------------------------------------------

    def execute(self, code: str, context: Context) -> dict[str, Any]:
        self._check_yaml_safety(code)
        try:
            data = self._yaml().load(code)
        except YAMLError as exc:
            raise FrontmatterParseError("yaml", f"YAML parse error: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise FrontmatterTypeError(
                "yaml", f"YAML frontmatter must be an object, got {_type_name(data)}"
            )
        self._check_structure(data)
        return {str(k): self._to_plain_value(v) for k, v in data.items()}

    def _to_plain_value(self, data: Any) -> Any:
        """Convert ruamel.yaml CommentedMap/Seq to plain Python dict/list."""
        if isinstance(data, (CommentedMap, dict)):
            return {str(k): self._to_plain_value(v) for k, v in data.items()}
        if isinstance(data, (CommentedSeq, list)):
            return [self._to_plain_value(item) for item in data]
        if isinstance(data, str):
            return str(data)
        return data
