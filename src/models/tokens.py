"""
Parse-time token models

Type-safe structures produced by Parser.parse() and consumed by the
Compiler. A parse yields a single root Section; each {...} block becomes a
nested Section carrying its ClosureInfo.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .document import CommandKind, ModifierKind


@dataclass
class Normal:
    """
    A literal run of text

    Attributes:
        text: The run, exactly as written in the source
    """
    text: str


@dataclass
class Special:
    """
    A backtick span with its modifiers

    Modifiers apply to the whole span; the Compiler anchors them at
    [0, len(text)) relative to the span and re-bases them on append.

    Attributes:
        text: Span content between the backticks
        modifiers: Colour first (if any), then effect (if any)

    Example:
        Source "`world|red`[wave]" yields
        Special(text="world", modifiers=[Color(RED), Wave()])
    """
    text: str
    modifiers: List[ModifierKind] = field(default_factory=list)


@dataclass
class Command:
    """
    A directive anchored at the current end of the text buffer

    Attributes:
        kind: Speed(f) for <f>, Pause(d) for [d]
        position: Source offset of the directive (for diagnostics)
    """
    kind: CommandKind
    position: int = 0


@dataclass
class ClosureInfo:
    """
    Identity of a {...} block

    Attributes:
        closure_index: 1-based, in depth-first encounter order
        depth: Nesting depth when the block was opened (1 = top-level block)
    """
    closure_index: int
    depth: int


@dataclass
class Section:
    """
    A nesting boundary: the root of a parse, or one {...} block

    Attributes:
        tokens: Child tokens in source order
        closure_info: None for the root section
        position: Source offset where the section starts
    """
    tokens: List["Token"] = field(default_factory=list)
    closure_info: Optional[ClosureInfo] = None
    position: int = 0

    @property
    def is_closure(self) -> bool:
        return self.closure_info is not None

    def closures_count(self) -> int:
        """Number of {...} blocks at any depth below this section"""
        count = 0
        for token in self.tokens:
            if isinstance(token, Section):
                count += 1 + token.closures_count()
        return count


Token = Union[Normal, Special, Command, Section]
