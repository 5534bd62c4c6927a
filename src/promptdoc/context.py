"""Chained, immutable evaluation scopes.

A ``Context`` node holds only its own bindings and a reference to its parent.
Variable lookup, filename lookup and include-stack reconstruction all walk the
chain back to the root; no node copies its ancestry's data.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

FILENAME_KEY = "__filename"
DIRNAME_KEY = "__dirname"
RESERVED_KEYS = frozenset({FILENAME_KEY, DIRNAME_KEY})


class Context:
    """One node in a scope chain.

    Use :meth:`from_source` for a root, :meth:`extend` to add bindings and
    :meth:`for_include` to descend into an included file.  Checking the include
    stack for cycles before calling :meth:`for_include` is the caller's job.
    """

    __slots__ = ("_filename", "_include_entry", "_parent", "_variables")

    def __init__(
        self,
        *,
        variables: Mapping[str, Any] | None = None,
        parent: Context | None = None,
        filename: str | None = None,
        include_entry: str | None = None,
    ) -> None:
        self._variables: Mapping[str, Any] = MappingProxyType(dict(variables or {}))
        self._parent = parent
        self._filename = filename
        self._include_entry = include_entry

    # -- constructors --------------------------------------------------------

    @classmethod
    def from_source(cls, filename: str | None = None) -> Context:
        """Root context bound to a source identity (``None`` for unnamed buffers)."""
        if not filename:
            return cls()
        return cls(filename=filename, include_entry=filename)

    def extend(self, variables: Mapping[str, Any]) -> Context:
        """Child scope adding or overriding ``variables``; same file and stack."""
        return Context(variables=variables, parent=self)

    def for_include(self, filename: str) -> Context:
        """Child scope for an included file: new filename, stack grows by one."""
        return Context(parent=self, filename=filename, include_entry=filename)

    # -- accessors -----------------------------------------------------------

    @property
    def parent(self) -> Context | None:
        return self._parent

    def get_variables(self) -> dict[str, Any]:
        """Flattened bindings along the chain; children override parents."""
        chain: list[Context] = []
        node: Context | None = self
        while node is not None:
            chain.append(node)
            node = node._parent
        merged: dict[str, Any] = {}
        for ctx in reversed(chain):
            merged.update(ctx._variables)
        return merged

    def lookup(self, name: str, default: Any = None) -> Any:
        node: Context | None = self
        while node is not None:
            if name in node._variables:
                return node._variables[name]
            node = node._parent
        return default

    def get_filename(self) -> str | None:
        node: Context | None = self
        while node is not None:
            if node._filename is not None:
                return node._filename
            node = node._parent
        return None

    def get_dirname(self) -> str | None:
        filename = self.get_filename()
        if filename is None:
            return None
        return os.path.dirname(os.path.abspath(filename))

    def get_include_stack(self) -> list[str]:
        """Source identities from the root to this node, in inclusion order."""
        stack: list[str] = []
        node: Context | None = self
        while node is not None:
            if node._include_entry is not None:
                stack.append(node._include_entry)
            node = node._parent
        stack.reverse()
        return stack

    def is_included(self, filename: str) -> bool:
        node: Context | None = self
        while node is not None:
            if node._include_entry == filename:
                return True
            node = node._parent
        return False

    def to_eval_env(self) -> dict[str, Any]:
        """Fresh flat environment: variables plus ``__filename``/``__dirname``."""
        env = self.get_variables()
        env[FILENAME_KEY] = self.get_filename()
        env[DIRNAME_KEY] = self.get_dirname()
        return env

    def __repr__(self) -> str:
        return (
            f"Context(filename={self.get_filename()!r}, "
            f"include_stack={self.get_include_stack()!r})"
        )
