"""
Centralized logging using Loguru with context-aware verbosity.

LOG() and WARN() read the verbosity of whichever ProgramState has been
connected to the current context, so library modules never take a state
argument just to decide whether to print.

Usage:
    from .log import LOG, WARN, state_connectToLogger

    state_connectToLogger(state)

    LOG("Bundling main.z", level=1)
    LOG("Expansion pass 3: 2 substitutions", level=2)
    WARN("Unterminated macro block closed at end of input")

Without a connected state (library use, tests) nothing is printed.
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold the current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: Object with a ``verbosity`` attribute (normally ProgramState)
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when nothing is connected"""
    state = _program_state.get()
    if state is None:
        return 0
    return getattr(state, 'verbosity', 0)


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
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """Log a warning whenever any output is enabled (verbosity >= 1)"""
    if verbosity_get() >= 1:
        logger.opt(depth=1).warning(message, **kwargs)
