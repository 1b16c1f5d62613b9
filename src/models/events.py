"""
Reveal events

Discrete outputs of a reveal engine, consumed by rendering and audio
collaborators (e.g. a blip per character, a word sound, closing a dialogue
box on clear).
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class CharacterRevealed:
    """A non-space character entered the visible range"""
    index: int
    character: str


@dataclass(frozen=True)
class WordRevealed:
    """
    The first character of a word entered the visible range

    Fired for a non-space character at index 0 or directly after a space.
    """
    index: int


@dataclass(frozen=True)
class RateTick:
    """A rate period elapsed while scrolling (steady typing-sound cue)"""


@dataclass(frozen=True)
class FullyRevealed:
    """The cursor reached the end of the text (once per reveal pass)"""


@dataclass(frozen=True)
class Cleared:
    """The instance's document was cleared after an await-clear gate"""


RevealEvent = Union[CharacterRevealed, WordRevealed, RateTick, FullyRevealed, Cleared]


def event_name(event: RevealEvent) -> str:
    """Stable snake_case name for an event, used in transcripts"""
    return {
        CharacterRevealed: "character_revealed",
        WordRevealed: "word_revealed",
        RateTick: "rate_tick",
        FullyRevealed: "fully_revealed",
        Cleared: "cleared",
    }[type(event)]
