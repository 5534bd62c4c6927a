"""The ``include()`` primitive: file attachments and recursive text inclusion."""

from __future__ import annotations

import logging
import os
from typing import Any

from promptdoc.context import Context
from promptdoc.parser.segments import parse_inline_content
from promptdoc.runtime.emit import BinaryIncludePart, CompositeIncludePart, is_emittable, to_text
from promptdoc.runtime.environment import build_env, evaluate_expression
from promptdoc.runtime.errors import CircularIncludeError, FileReferenceError
from promptdoc.runtime.resolver import FileResolver

logger = logging.getLogger("promptdoc.runtime")


class IncludeFunction:
    """``include(path, *, binary=False, mime=None)`` bound to one Context.

    Relative paths resolve against the directory of the context's file.
    Binary mode returns an attachment.  Text mode parses the target for
    expressions and file references, evaluates them in a child context built
    with :meth:`Context.for_include`, and returns the composite result.
    """

    def __init__(self, context: Context, resolver: FileResolver) -> None:
        self._context = context
        self._resolver = resolver

    def __call__(self, path: str, *, binary: bool = False, mime: str | None = None) -> Any:
        if binary:
            return self.binary(path, mime)
        return self.text(path)

    def _target(self, relative_path: str) -> str:
        return self._resolver.resolve(relative_path, self._context.get_dirname())

    def binary(self, relative_path: str, mime: str | None = None) -> BinaryIncludePart:
        target = self._target(relative_path)
        data = self._resolver.read(target, relative_path)
        mime_type = mime or self._resolver.mime_of(target, relative_path)
        logger.debug("Attached %s (%s, %d bytes)", target, mime_type, len(data))
        return BinaryIncludePart(target, mime_type, data)

    def text(self, relative_path: str) -> CompositeIncludePart:
        target = self._target(relative_path)
        if not os.path.isfile(target):
            raise FileReferenceError(target, relative_path, f"File not found: {target}")

        stack = self._context.get_include_stack()
        if any(os.path.abspath(entry) == target for entry in stack):
            raise CircularIncludeError(target, self._context.get_filename(), stack + [target])

        content = self._resolver.read_text(target, relative_path)
        child = self._context.for_include(target)
        child_include = IncludeFunction(child, self._resolver)
        env = build_env(child.to_eval_env())
        env["include"] = child_include

        children: list[Any] = []
        for segment in parse_inline_content(content):
            if segment.kind == "text":
                children.append(segment.content)
            elif segment.kind == "expression":
                result = evaluate_expression(segment.source, env)
                children.append(result if is_emittable(result) else to_text(result))
            elif segment.kind == "file_reference":
                children.append(child_include.binary(segment.path, segment.mime_override))
        logger.debug("Included %s (depth %d)", target, len(stack))
        return CompositeIncludePart(children)
