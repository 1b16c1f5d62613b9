"""
Verbosity-gated logging on top of Loguru.

Library code (parser, compiler, reveal engine, clear controller, frame,
playback) logs through LOG() and never prints. Nothing is emitted until a
state object with a ``verbosity`` attribute is connected, so the library is
silent when embedded and chatty under the command line tool.

Each verbosity level maps to a Loguru level:

    1  INFO   progress of the command line stages
    2  DEBUG  build and playback summaries (-v)
    3  TRACE  per-span parsing and reveal state transitions (-vv)

Usage:
    from revealtext.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Compiled 3 documents", level=2)
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

# State whose verbosity gates LOG() in the current context
_log_state: ContextVar[Optional[Any]] = ContextVar("revealtext_log_state", default=None)

LEVELS = {1: "INFO", 2: "DEBUG", 3: "TRACE"}

logger_format = (
    "<green>{time:HH:mm:ss.SSS}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <9}</cyan>:<cyan>{function: <18}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="TRACE")


def state_connectToLogger(state: Any) -> None:
    """
    Make state's verbosity govern LOG() in the current context.

    Args:
        state: Any object with a verbosity attribute (ProgramState in the CLI)
    """
    _log_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message when the connected verbosity is at least level.

    Args:
        message: Text to log
        level: Required verbosity, 1 to 3; higher levels are clamped to TRACE
        **kwargs: Passed to Loguru for message formatting
    """
    state = _log_state.get()
    verbosity = getattr(state, "verbosity", 0) if state is not None else 0
    if verbosity < level:
        return
    logger.opt(depth=1).log(LEVELS.get(level, "TRACE"), message, **kwargs)
