"""
htmlblocks - Directive-driven HTML build preprocessor

Rewrites <!--build:type args--> ... <!--endbuild--> blocks in an HTML document
and emits the build instructions that produce the aggregated assets.
"""

__version__ = "1.0.0"

from .parser import BlockParser
from .handlers import HandlerRegistry
from .events import EventBus
from .tags import tags_extract, args_split, moduleArgs_parse
from .errors import (
    BlockError,
    MissingEndTagError,
    DirectiveUsageError,
    DirectiveOptionsError,
    AssetError,
)
from .log import LOG, state_connectToLogger

__all__ = [
    "BlockParser",
    "HandlerRegistry",
    "EventBus",
    "tags_extract",
    "args_split",
    "moduleArgs_parse",
    "BlockError",
    "MissingEndTagError",
    "DirectiveUsageError",
    "DirectiveOptionsError",
    "AssetError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
