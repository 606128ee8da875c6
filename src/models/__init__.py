"""
Models package for htmlblocks

Contains data structures and type definitions for the build pipeline.
"""

from .state import ProgramState, pipeline
from .handlers import HandlerSpec, HandlerOrigin
from .parser import Block, TagRecord, ModuleArgs
from .events import (
    EventName,
    InstructionKind,
    Destination,
    BuildInstruction,
    BlockNotification,
    Notice,
    instructions_group,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "HandlerSpec",
    "HandlerOrigin",
    "Block",
    "TagRecord",
    "ModuleArgs",
    "EventName",
    "InstructionKind",
    "Destination",
    "BuildInstruction",
    "BlockNotification",
    "Notice",
    "instructions_group",
]
