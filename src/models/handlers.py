"""
Handler specification and metadata models

Defines the structure of block handlers for registry management and
documentation.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List


class HandlerOrigin(Enum):
    """
    Where a registered handler came from

    Overrides supplied by the caller replace built-ins of the same type when
    the registry is constructed.
    """
    BUILTIN = "builtin"
    OVERRIDE = "override"


@dataclass
class HandlerSpec:
    """
    Specification for a block handler

    Attributes:
        name: Block type the handler serves (e.g., "js")
        handler: Function (block, parser) -> str | list[str] | other
        origin: Built-in or caller override
        description: Human-readable description
        syntax: Argument grammar, used in usage errors
        examples: Example usage strings
    """
    name: str
    handler: Callable
    origin: HandlerOrigin = HandlerOrigin.BUILTIN
    description: str = ""
    syntax: str = ""
    examples: List[str] = field(default_factory=list)
