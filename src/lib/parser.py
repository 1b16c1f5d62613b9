"""
Parser for revealtext markup

Transforms an annotated string into a token tree (a root Section).

Syntax:
    <0.5>               speed directive: relative reveal speed
    [1.5]               pause directive: seconds to wait
    `text`              span
    `text|red`          coloured span (red, green, blue)
    `text`[wave]        span with an effect (wave, shake)
    `text|blue`[shake]  both
    {...}               closure block, bound to an external handler

Everything else is literal text. A '[' directly after a closed span names an
effect; a '[' anywhere else opens a pause. The decision is positional only.

Example:
    >>> root = Parser("<0.3> Hello, `world|red`[wave]!").parse()
    >>> [type(t).__name__ for t in root.tokens]
    ['Command', 'Normal', 'Special', 'Normal']
"""

import math
import re
from typing import List, NoReturn, Optional, Tuple, Type

from ..config import appsettings
from ..models.document import BLUE, GREEN, RED, Color, ModifierKind, Pause, Shake, Speed, Wave
from ..models.tokens import ClosureInfo, Command, Normal, Section, Special, Token
from .errors import (
    InvalidDirectiveValue,
    ParseError,
    UnexpectedCharacter,
    UnknownColor,
    UnknownEffect,
    UnterminatedSpan,
)
from .log import LOG


LITERAL_PATTERN = re.compile(r"[^\[<`{}]*")
FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

COLORS = {
    "red": RED,
    "green": GREEN,
    "blue": BLUE,
}

EFFECTS = ("wave", "shake")


class Parser:
    """
    Single-pass parser for revealtext markup

    Holds no state between parse() calls beyond the source itself, so a
    Parser (or the module-level build functions) can be used from any thread.
    """

    def __init__(self, source: str, shake_intensity: Optional[float] = None):
        """
        Initialize parser with source text

        Args:
            source: Raw markup
            shake_intensity: Intensity for [shake] spans (defaults to settings)

        Attributes:
            source: Source text being parsed
            position: Current character position in source
            depth: Current closure nesting depth
            visited: Closures opened so far (drives closure indices)
        """
        self.source = source
        self.shake_intensity = (
            appsettings.shake_intensity if shake_intensity is None else shake_intensity
        )
        self.position = 0
        self.depth = 0
        self.visited = 0

    def parse(self) -> Section:
        """
        Parse source text into a token tree

        Returns:
            Root Section (closure_info None) whose tokens hold Normal, Special,
            Command and nested closure Sections in source order.

        Raises:
            ParseError: Any malformed span or directive; no partial tree is
                        returned.
        """
        self.position = 0
        self.depth = 0
        self.visited = 0

        root = self.section_parse(None, 0)
        LOG(f"Parsed {len(root.tokens)} top-level tokens, {self.visited} closures", level=3)
        return root

    def section_parse(self, closure_info: Optional[ClosureInfo], start: int) -> Section:
        """
        Parse tokens until end of input or the '}' closing this section

        Args:
            closure_info: Identity of the enclosing {...} block, None at root
            start: Source offset where the section begins

        Returns:
            Section with its tokens
        """
        tokens: List[Token] = []

        while True:
            literal = self.literal_take()
            if literal:
                tokens.append(Normal(literal))

            if self.position >= len(self.source):
                break

            char = self.source[self.position]
            if char == "<":
                value, at = self.directive_read("<", ">", "speed")
                if not value > 0:
                    self.error(InvalidDirectiveValue, f"Speed must be greater than zero, got {value}", at)
                tokens.append(Command(Speed(value), at))
            elif char == "[":
                value, at = self.directive_read("[", "]", "pause")
                if value < 0:
                    self.error(InvalidDirectiveValue, f"Pause must not be negative, got {value}", at)
                tokens.append(Command(Pause(value), at))
            elif char == "`":
                tokens.append(self.span_parse())
            elif char == "{":
                opened_at = self.position
                self.position += 1
                self.depth += 1
                self.visited += 1
                info = ClosureInfo(closure_index=self.visited, depth=self.depth)
                tokens.append(self.section_parse(info, opened_at))
                self.depth -= 1
            else:
                # '}' closes the current closure; with none open it is stray
                if closure_info is None:
                    self.error(UnexpectedCharacter, "Unexpected '}' with no open closure", self.position)
                self.position += 1
                break

        return Section(tokens=tokens, closure_info=closure_info, position=start)

    def literal_take(self) -> str:
        """Consume a maximal run of literal characters (possibly empty)"""
        match = LITERAL_PATTERN.match(self.source, self.position)
        self.position = match.end()
        return match.group(0)

    def directive_read(self, opener: str, closer: str, what: str) -> Tuple[float, int]:
        """
        Read a numeric directive such as <0.5> or [2]

        Args:
            opener: Opening delimiter at self.position
            closer: Required closing delimiter
            what: Directive name for error messages

        Returns:
            Tuple of (value, source offset of the opener)
        """
        start = self.position
        self.position += len(opener)

        match = FLOAT_PATTERN.match(self.source, self.position)
        if not match:
            self.error(
                InvalidDirectiveValue,
                f"Expected a number after '{opener}' in {what} directive",
                self.position,
            )

        end = match.end()
        if not self.source.startswith(closer, end):
            self.error(
                InvalidDirectiveValue,
                f"Expected '{closer}' to close {what} directive",
                end,
            )

        value = float(match.group(0))
        if not math.isfinite(value):
            self.error(InvalidDirectiveValue, f"Value of {what} directive is not finite", self.position)

        self.position = end + len(closer)
        return value, start

    def span_parse(self) -> Special:
        """
        Parse a backtick span with optional |color and trailing [effect]

        Returns:
            Special token with the span text and its modifiers

        Example:
            For source "`world|red`[wave]":
            Returns Special(text="world", modifiers=[Color(RED), Wave()])
        """
        start = self.position
        body_start = start + 1

        stop = body_start
        while stop < len(self.source) and self.source[stop] not in "|`":
            stop += 1
        if stop >= len(self.source):
            self.error(UnterminatedSpan, "Unterminated span: missing closing '`'", start)

        text = self.source[body_start:stop]
        modifiers: List[ModifierKind] = []

        if self.source[stop] == "|":
            name_start = stop + 1
            close = self.source.find("`", name_start)
            if close == -1:
                self.error(UnterminatedSpan, "Unterminated span: missing closing '`'", start)
            name = self.source[name_start:close]
            if name not in COLORS:
                self.error(
                    UnknownColor,
                    f"Unknown color '{name}' (expected one of: {', '.join(COLORS)})",
                    name_start,
                )
            modifiers.append(Color(COLORS[name]))
            self.position = close + 1
        else:
            self.position = stop + 1

        # A '[' right after the closing backtick is always an effect name
        if self.source.startswith("[", self.position):
            modifiers.append(self.effect_parse())

        LOG(f"Span '{text}' with {len(modifiers)} modifiers at {start}", level=3)
        return Special(text=text, modifiers=modifiers)

    def effect_parse(self) -> ModifierKind:
        """Parse '[wave]' or '[shake]' at self.position"""
        name_start = self.position + 1
        close = self.source.find("]", name_start)
        if close == -1:
            self.error(UnknownEffect, "Expected ']' to close effect name", self.position)

        name = self.source[name_start:close]
        self.position = close + 1

        if name == "wave":
            return Wave()
        if name == "shake":
            return Shake(self.shake_intensity)

        self.error(
            UnknownEffect,
            f"Unknown effect '{name}' (expected one of: {', '.join(EFFECTS)})",
            name_start,
        )

    def error(self, kind: Type[ParseError], message: str, position: Optional[int] = None) -> NoReturn:
        """
        Report parser error with source context

        Args:
            kind: ParseError subclass to raise
            message: Human-readable error description
            position: Offending source offset (defaults to current position)

        Raises:
            ParseError: Always (this is an error reporting function)
        """
        at = self.position if position is None else position
        raise kind(message, self.source, at)
