"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current ProgramState's
verbosity level without requiring explicit state passing.

Usage:
    from htmlblocks.lib.log import LOG, state_connectToLogger

    # At start of pipeline function:
    state_connectToLogger(state)

    # Anywhere in that context (parser, handlers):
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Handler notices appear if verbosity >= 2", level=2)
    LOG("Scan traces appear if verbosity >= 3", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with htmlblocks-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this at the start of the pipeline to make the state's verbosity
    setting available to LOG() calls throughout that context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        # opt(depth=1) reports the caller, not this wrapper
        logger.opt(depth=1).debug(message, **kwargs)
