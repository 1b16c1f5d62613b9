"""
Error taxonomy for revealtext

Parse errors fail the whole build and carry the source position. Build
errors report closure arity problems. UnimplementedCommand is raised at
reveal time for authored commands the engine does not support and is never
caught by the library.
"""

from typing import Optional


class ParseError(SyntaxError):
    """
    Malformed markup

    Attributes:
        reason: Human-readable error description (without context)
        position: Character offset in the source
        line: 1-based line number
        column: 1-based column number
    """

    def __init__(self, reason: str, source: str = "", position: int = 0) -> None:
        self.reason = reason
        self.position = position
        self.line = source.count("\n", 0, position) + 1
        line_start = source.rfind("\n", 0, position) + 1
        self.column = position - line_start + 1
        super().__init__(self.message_format(source))

    def message_format(self, source: str) -> str:
        """
        Format the error with source context

        Layout:
            Unknown color 'pink'
            Line 1, column 9 (position 8)
            Context: ...`world|pink`...
                            ^
        """
        context_start = max(0, self.position - 40)
        context_end = min(len(source), self.position + 40)
        context = source[context_start:context_end].replace("\n", " ")

        return (
            f"\n{self.reason}\n"
            f"Line {self.line}, column {self.column} (position {self.position})\n"
            f"Context: ...{context}...\n"
            f"         {' ' * (3 + self.position - context_start)}^"
        )


class UnterminatedSpan(ParseError):
    """A backtick span is missing its closing backtick"""


class InvalidDirectiveValue(ParseError):
    """A <speed> or [pause] directive holds a missing or invalid number"""


class UnknownColor(ParseError):
    """A span names a colour outside the supported vocabulary"""


class UnknownEffect(ParseError):
    """A span names an effect outside the supported vocabulary"""


class UnexpectedCharacter(ParseError):
    """A character that starts no production where input must continue"""


class BuildError(Exception):
    """Post-parse failure while binding closures to handlers"""


class ClosureCountMismatch(BuildError):
    """
    Handlers supplied do not match the {...} blocks in the markup

    Attributes:
        expected: Number of closures in the markup
        supplied: Number of handlers given
    """

    def __init__(self, expected: int, supplied: int, source: Optional[str] = None) -> None:
        self.expected = expected
        self.supplied = supplied
        where = f" in {source!r}" if source is not None else ""
        super().__init__(
            f"Wrong number of closures supplied{where}: "
            f"expected {expected}, got {supplied}"
        )


class UnimplementedCommand(NotImplementedError):
    """A command the reveal engine deliberately does not implement"""

    def __init__(self, command: object, index: int) -> None:
        self.command = command
        self.index = index
        super().__init__(f"{command!r} at index {index} is not implemented")
