"""
Models package for revealtext

Contains data structures and type definitions for parsing and revealing.
"""

from .state import ProgramState, FrameState, pipeline
from .document import (
    Document,
    IndexedModifier,
    IndexedCommand,
    ParsedText,
    Segment,
    Rgba,
    RED,
    GREEN,
    BLUE,
    Color,
    Wave,
    Shake,
    Speed,
    Pause,
    AwaitClear,
    Delete,
)
from .tokens import Normal, Special, Command, Section, ClosureInfo
from .events import CharacterRevealed, WordRevealed, RateTick, FullyRevealed, Cleared, event_name

__all__ = [
    "ProgramState",
    "FrameState",
    "pipeline",
    "Document",
    "IndexedModifier",
    "IndexedCommand",
    "ParsedText",
    "Segment",
    "Rgba",
    "RED",
    "GREEN",
    "BLUE",
    "Color",
    "Wave",
    "Shake",
    "Speed",
    "Pause",
    "AwaitClear",
    "Delete",
    "Normal",
    "Special",
    "Command",
    "Section",
    "ClosureInfo",
    "CharacterRevealed",
    "WordRevealed",
    "RateTick",
    "FullyRevealed",
    "Cleared",
    "event_name",
]
