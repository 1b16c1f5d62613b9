"""
Compiler from token trees to Documents

Flattens the Section tree produced by the Parser into an ordered arena of
Documents (a ParsedText) and binds closure handlers.

Compilation rules:
1. Literal runs and spans append to the current buffer; span modifiers are
   re-based onto the buffer's text.
2. Commands anchor at the buffer's current text length.
3. At top level, each {...} block closes the current buffer as its own
   Document and starts a fresh one. Inside a closure, nested blocks do not
   split the enclosing buffer, so every {...} yields exactly one Document.
4. Each finished buffer is space-deduplicated (see spaces_deduplicate()).
5. The final top-level Document gets the terminal AwaitClear command;
   closure Documents get no terminal command.

Example:
    >>> parse("Hello,  world!").text
    'Hello, world!'
    >>> parse_with_handlers("Hi {there}", [lambda doc: doc.text.upper()])
    (Document(text='Hi ', ...), 'THERE', Document(text='', ...))
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..models.document import (
    AwaitClear,
    CommandKind,
    Document,
    IndexedCommand,
    IndexedModifier,
    ModifierKind,
    ParsedText,
    Segment,
)
from ..models.tokens import Command, Normal, Section, Special
from .errors import ClosureCountMismatch
from .log import LOG
from .parser import Parser


def spaces_deduplicate(
    text: str,
    modifiers: Sequence[IndexedModifier],
    commands: Sequence[IndexedCommand],
) -> Tuple[str, List[IndexedModifier], List[IndexedCommand]]:
    """
    Collapse runs of spaces to one and drop a leading space

    A space is removed when it is the first character or follows another
    space. For every removed index, taken in descending order, each modifier
    start/end and command index that is >= the removed index moves left by
    one (never below zero), so offsets stay valid against the new text.

    Args:
        text: Buffer text
        modifiers: Modifiers indexed into text
        commands: Commands indexed into text

    Returns:
        Tuple of (text, modifiers, commands) after removal

    Example:
        " Hello,  world!" with a command at 8 becomes
        "Hello, world!" with that command at 6.
    """
    removed: List[int] = []
    previous_space = True
    for index, char in enumerate(text):
        is_space = char == " "
        if is_space and previous_space:
            removed.append(index)
        previous_space = is_space

    if not removed:
        return text, list(modifiers), list(commands)

    bounds = [[m.start, m.end] for m in modifiers]
    anchors = [c.index for c in commands]

    for index in reversed(removed):
        for bound in bounds:
            if bound[0] >= index:
                bound[0] = max(0, bound[0] - 1)
            if bound[1] >= index:
                bound[1] = max(0, bound[1] - 1)
        for i, anchor in enumerate(anchors):
            if anchor >= index:
                anchors[i] = max(0, anchor - 1)

    dropped = set(removed)
    new_text = "".join(char for index, char in enumerate(text) if index not in dropped)
    new_modifiers = [
        IndexedModifier(start, end, m.kind) for (start, end), m in zip(bounds, modifiers)
    ]
    new_commands = [IndexedCommand(anchor, c.kind) for anchor, c in zip(anchors, commands)]
    return new_text, new_modifiers, new_commands


class DocumentBuffer:
    """Mutable accumulator for one Document under construction"""

    def __init__(self) -> None:
        self.text = ""
        self.modifiers: List[IndexedModifier] = []
        self.commands: List[IndexedCommand] = []

    @property
    def is_empty(self) -> bool:
        return not (self.text or self.modifiers or self.commands)

    def text_append(self, text: str, modifiers: Sequence[ModifierKind] = ()) -> None:
        """Append text; modifiers cover the whole appended run"""
        offset = len(self.text)
        self.text += text
        for kind in modifiers:
            self.modifiers.append(IndexedModifier(offset, offset + len(text), kind))

    def command_append(self, kind: CommandKind) -> None:
        """Anchor a command at the current end of the text"""
        self.commands.append(IndexedCommand(len(self.text), kind))

    def document_build(self, end: Optional[CommandKind] = None) -> Document:
        """Deduplicate spaces and freeze the buffer into a Document"""
        text, modifiers, commands = spaces_deduplicate(self.text, self.modifiers, self.commands)
        return Document(text=text, modifiers=tuple(modifiers), commands=tuple(commands), end=end)


class Compiler:
    """
    Compiles a token tree into a ParsedText

    Responsibilities:
    - Flatten tokens into Document buffers
    - Split top-level content around closures
    - Reserve one arena slot per closure, in closure-index order
    - Attach the terminal AwaitClear to the final top-level Document
    """

    def __init__(self, root: Section) -> None:
        """
        Initialize compiler

        Args:
            root: Root Section from Parser.parse()
        """
        self.root = root
        self.slots: List[Optional[Segment]] = []

    def compile(self) -> ParsedText:
        """
        Compile the token tree

        Returns:
            ParsedText whose segments appear in source order
        """
        self.slots = []
        self.section_compile(self.root)

        segments = tuple(s for s in self.slots if s is not None)
        LOG(
            f"Compiled {len(segments)} documents "
            f"({sum(1 for s in segments if s.is_closure)} closures)",
            level=2,
        )
        return ParsedText(segments=segments)

    def section_compile(self, section: Section) -> None:
        """
        Compile one Section into the arena

        Closure sections reserve their slot before descending, so a nested
        closure lands after its parent regardless of where the parent's
        content ends.

        Args:
            section: Root or closure Section
        """
        buffer = DocumentBuffer()
        slot: Optional[int] = None
        if section.is_closure:
            slot = len(self.slots)
            self.slots.append(None)

        for token in section.tokens:
            if isinstance(token, Normal):
                buffer.text_append(token.text)
            elif isinstance(token, Special):
                buffer.text_append(token.text, token.modifiers)
            elif isinstance(token, Command):
                buffer.command_append(token.kind)
            elif isinstance(token, Section):
                if not section.is_closure:
                    if not buffer.is_empty:
                        self.slots.append(Segment(buffer.document_build()))
                    buffer = DocumentBuffer()
                self.section_compile(token)
            else:
                raise TypeError(f"Unexpected token {token!r}")

        if slot is not None:
            if section.closure_info is None:
                raise TypeError(f"Closure section without closure info at {section.position}")
            self.slots[slot] = Segment(
                buffer.document_build(), section.closure_info.closure_index
            )
        else:
            self.slots.append(Segment(buffer.document_build(end=AwaitClear())))


def parse_text(source: str) -> ParsedText:
    """
    Parse and compile markup into its full Document arena

    Args:
        source: Raw markup

    Returns:
        ParsedText with top-level and closure segments

    Raises:
        ParseError: Malformed markup
    """
    return Compiler(Parser(source).parse()).compile()


def parse(source: str) -> Document:
    """
    Build the Document for markup without closures

    Args:
        source: Raw markup

    Returns:
        The single top-level Document (terminal command AwaitClear)

    Raises:
        ParseError: Malformed markup
        ClosureCountMismatch: The markup contains {...} blocks, which need
                              handlers (see parse_with_handlers())
    """
    root = Parser(source).parse()
    closures = root.closures_count()
    if closures:
        raise ClosureCountMismatch(expected=closures, supplied=0, source=source)
    return Compiler(root).compile().segments[0].document


def parse_with_handlers(
    source: str, handlers: Sequence[Callable[[Document], Any]]
) -> Tuple[Any, ...]:
    """
    Build markup and bind one handler per {...} block

    Handlers bind by position: handlers[k - 1] receives the Document of
    closure k. Top-level Documents pass through unchanged.

    Args:
        source: Raw markup
        handlers: One callable per closure, in encounter order

    Returns:
        Tuple of results in source order: top-level Documents and handler
        results interleaved

    Raises:
        ParseError: Malformed markup
        ClosureCountMismatch: len(handlers) differs from the closure count
    """
    root = Parser(source).parse()
    closures = root.closures_count()
    if len(handlers) != closures:
        raise ClosureCountMismatch(expected=closures, supplied=len(handlers), source=source)

    parsed = Compiler(root).compile()

    results = []
    for segment in parsed.segments:
        if segment.closure_index is not None:
            results.append(handlers[segment.closure_index - 1](segment.document))
        else:
            results.append(segment.document)
    return tuple(results)
