"""
revealtext - Markup parser and typewriter reveal engine

Styled, animatable, incrementally revealed text for dialogue and captions.
"""

__version__ = "1.0.0"

from .lib import (
    Parser,
    Compiler,
    parse,
    parse_text,
    parse_with_handlers,
    RevealEngine,
    RevealStatus,
    ScrollMode,
    ClearController,
    Frame,
    Playback,
    LOG,
    state_connectToLogger,
)
from .models import Document

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
    "Document",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
