"""
Document model for revealable text

A Document is the flattened result of parsing one contiguous markup unit:
visible text plus index-anchored modifiers (colour and shader effects) and
point commands (speed changes, pauses, await-clear gates).

Offsets are indices into the Python string ``text``. Modifier ranges are
half-open ``[start, end)``; command indices may equal ``len(text)``.

Example:
    >>> doc = Document.from_text("Hello")
    >>> doc.join(Document.from_text(", world")).text
    'Hello, world'
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Rgba:
    """Linear RGBA colour, channels in 0.0..1.0"""
    red: float
    green: float
    blue: float
    alpha: float = 1.0


RED = Rgba(1.0, 0.0, 0.0)
GREEN = Rgba(0.0, 1.0, 0.0)
BLUE = Rgba(0.0, 0.0, 1.0)


# ---------------------------------------------------------------------------
# Modifier kinds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Color:
    """Static colour styling over a span"""
    rgba: Rgba

    is_shader_effect = False

    @property
    def color(self) -> Optional[Rgba]:
        return self.rgba


@dataclass(frozen=True)
class Wave:
    """Glyphs bob along a wave (shader effect)"""

    is_shader_effect = True

    @property
    def color(self) -> Optional[Rgba]:
        return None


@dataclass(frozen=True)
class Shake:
    """
    Glyphs jitter in place (shader effect)

    Attributes:
        intensity: Jitter strength in 0.0..=1.0
    """
    intensity: float = 0.5

    is_shader_effect = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.intensity <= 1.0:
            raise ValueError(f"Shake intensity must lie in 0.0..1.0, got {self.intensity}")

    @property
    def color(self) -> Optional[Rgba]:
        return None


ModifierKind = Union[Color, Wave, Shake]


# ---------------------------------------------------------------------------
# Command kinds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Speed:
    """Relative reveal speed; the timer period becomes base_period / factor"""
    factor: float


@dataclass(frozen=True)
class Pause:
    """Suspend revealing for a number of seconds"""
    duration: float


@dataclass(frozen=True)
class AwaitClear:
    """Gate the reveal until an interact signal clears the text"""


@dataclass(frozen=True)
class Delete:
    """Declared but not supported by the reveal engine"""
    count: int


CommandKind = Union[Speed, Pause, AwaitClear, Delete]


@dataclass(frozen=True)
class IndexedModifier:
    """A modifier over the half-open range [start, end) of a Document's text"""
    start: int
    end: int
    kind: ModifierKind

    def shifted(self, offset: int) -> "IndexedModifier":
        """Return a copy moved right by offset characters"""
        return replace(self, start=self.start + offset, end=self.end + offset)


@dataclass(frozen=True)
class IndexedCommand:
    """A command anchored at a character index of a Document's text"""
    index: int
    kind: CommandKind

    def shifted(self, offset: int) -> "IndexedCommand":
        """Return a copy moved right by offset characters"""
        return replace(self, index=self.index + offset)


@dataclass(frozen=True)
class Document:
    """
    Flattened visible text with its modifiers and commands

    Attributes:
        text: Visible content
        modifiers: Ordered modifier ranges into text
        commands: Point commands, ordered by non-decreasing index
        end: Optional terminal command, applied when the reveal reaches len(text)
    """
    text: str = ""
    modifiers: Tuple[IndexedModifier, ...] = field(default_factory=tuple)
    commands: Tuple[IndexedCommand, ...] = field(default_factory=tuple)
    end: Optional[CommandKind] = None

    def __post_init__(self) -> None:
        # Frozen: normalise sequences through object.__setattr__
        object.__setattr__(self, "modifiers", tuple(self.modifiers))
        object.__setattr__(
            self, "commands", tuple(sorted(self.commands, key=lambda c: c.index))
        )

    @classmethod
    def from_text(cls, text: str) -> "Document":
        """Plain document without modifiers or commands"""
        return cls(text=text)

    @classmethod
    def empty(cls) -> "Document":
        return cls()

    def __len__(self) -> int:
        return len(self.text)

    @property
    def is_empty(self) -> bool:
        return not self.text

    def join(self, other: "Document") -> "Document":
        """
        Concatenate two documents.

        The second document's modifier and command offsets are re-based by
        the length of this document's text, and its terminal command replaces
        this one's.

        Args:
            other: Document appended after this one

        Returns:
            New Document covering both texts
        """
        offset = len(self.text)
        return Document(
            text=self.text + other.text,
            modifiers=self.modifiers + tuple(m.shifted(offset) for m in other.modifiers),
            commands=self.commands + tuple(c.shifted(offset) for c in other.commands),
            end=other.end,
        )

    def commands_at(self, index: int) -> Tuple[IndexedCommand, ...]:
        """All commands anchored exactly at index, in document order"""
        return tuple(c for c in self.commands if c.index == index)

    def modifiers_clamped(self) -> Tuple[IndexedModifier, ...]:
        """
        Modifiers with their ranges clamped to the current text length.

        Documents assembled at runtime may carry ranges past the end of the
        text; those are clamped rather than rejected.
        """
        length = len(self.text)
        clamped = []
        for modifier in self.modifiers:
            start = min(modifier.start, length)
            end = max(start, min(modifier.end, length))
            if (start, end) != (modifier.start, modifier.end):
                modifier = replace(modifier, start=start, end=end)
            clamped.append(modifier)
        return tuple(clamped)


@dataclass(frozen=True)
class Segment:
    """
    One Document produced by a build, tagged with its closure index

    Attributes:
        document: The finished Document
        closure_index: None for top-level content, else the 1-based index of
                       the {...} block it came from
    """
    document: Document
    closure_index: Optional[int] = None

    @property
    def is_closure(self) -> bool:
        return self.closure_index is not None


@dataclass(frozen=True)
class ParsedText:
    """
    Ordered arena of Documents built from one markup string

    Segments appear in source order; closure segments are addressed by their
    sequential closure index rather than by parent/child links.
    """
    segments: Tuple[Segment, ...]

    @property
    def closures(self) -> Tuple[Segment, ...]:
        """Closure segments in closure-index order"""
        return tuple(
            sorted((s for s in self.segments if s.is_closure), key=lambda s: s.closure_index)
        )

    @property
    def closure_count(self) -> int:
        return sum(1 for s in self.segments if s.is_closure)

    @property
    def documents(self) -> Tuple[Document, ...]:
        return tuple(s.document for s in self.segments)
