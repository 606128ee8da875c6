"""
htmlblocks - Directive-driven HTML build preprocessor

Replaces commented directive blocks in an HTML template with aggregated asset
references, and emits bundle/compile instructions for external build tools.
"""

from .lib import (
    __version__,
    BlockParser,
    HandlerRegistry,
    EventBus,
    BlockError,
    MissingEndTagError,
    DirectiveUsageError,
    DirectiveOptionsError,
    AssetError,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "BlockParser",
    "HandlerRegistry",
    "EventBus",
    "BlockError",
    "MissingEndTagError",
    "DirectiveUsageError",
    "DirectiveOptionsError",
    "AssetError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
