"""
revealtext - Markup parser and typewriter reveal engine

Parses compact inline markup into Documents and reveals them character by
character under timer control.
"""

__version__ = "1.0.0"

from .parser import Parser
from .compiler import Compiler, parse, parse_text, parse_with_handlers
from .reveal import RevealEngine, RevealStatus, ScrollMode
from .clear import ClearController
from .frame import Frame
from .playback import Playback
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Compiler",
    "parse",
    "parse_text",
    "parse_with_handlers",
    "RevealEngine",
    "RevealStatus",
    "ScrollMode",
    "ClearController",
    "Frame",
    "Playback",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
