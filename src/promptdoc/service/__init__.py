"""Service layer: dispatch driver reusable by CLI and host integrations."""

from promptdoc.service.dispatcher import (
    DispatchResult,
    Dispatcher,
    DispatchSummary,
    FrontmatterInspector,
)

__all__ = [
    "DispatchResult",
    "DispatchSummary",
    "Dispatcher",
    "FrontmatterInspector",
]
