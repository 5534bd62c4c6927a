"""Detection of the leading fenced frontmatter block."""

from __future__ import annotations

import re
from collections.abc import Sequence

_OPEN_FENCE_RE = re.compile(r"^```(\w+)\s*$")
_CLOSE_FENCE_RE = re.compile(r"^```\s*$")


def split_frontmatter(
    lines: Sequence[str],
) -> tuple[str | None, str | None, list[str], int]:
    """Split ``lines`` into frontmatter and body.

    Returns ``(language, code, remaining_lines, body_start)`` where
    ``body_start`` is the 1-indexed line number of the first remaining line.
    Without a complete fence pair, language and code are ``None`` and every
    line is body.
    """
    if not lines:
        return None, None, list(lines), 1
    match = _OPEN_FENCE_RE.match(lines[0])
    if match is None:
        return None, None, list(lines), 1

    for idx in range(1, len(lines)):
        if _CLOSE_FENCE_RE.match(lines[idx]):
            code = "\n".join(lines[1:idx])
            return match.group(1), code, list(lines[idx + 1 :]), idx + 2
    # Unclosed fence: literal text, not an error
    return None, None, list(lines), 1
