"""
Custom Pygments lexer for revealtext syntax highlighting

Provides syntax highlighting for revealtext markup when writing source
previews next to playback transcripts.

Token types:
- Keyword: Speed directives (e.g., <0.5>)
- Number: Pause directives (e.g., [1.5])
- String: Backtick span text
- Name.Attribute: Span colours (e.g., |red)
- Name.Decorator: Span effects (e.g., [wave])
- Punctuation: Backticks and closure braces
- Text: Literal text
"""

from pygments.lexer import RegexLexer, bygroups, default
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Number,
)


class RevealTextLexer(RegexLexer):
    """
    Lexer for revealtext markup

    Example:
        <0.3> Hello, `world|red`[wave]! {aside}

    Tokens:
        <0.3> → Keyword
        `     → Punctuation
        world → String
        |red  → Name.Attribute
        [wave] → Name.Decorator
        {     → Punctuation
    """

    name = 'RevealText'
    aliases = ['revealtext', 'rt']
    filenames = ['*.rt']

    tokens = {
        'root': [
            # Speed directive
            (r'<[^>]*>', Keyword),

            # Pause directive
            (r'\[[^\]]*\]', Number),

            # Span opening
            (r'`', Punctuation, 'span'),

            # Closure braces
            (r'[{}]', Punctuation),

            # Everything else is text
            (r'[^\[<`{}]+', Text),
        ],

        'span': [
            # Span text up to colour separator or closing backtick
            (r'[^|`]+', String),

            # Colour name and closing backtick
            (r'(\|)([^`]*)(`)', bygroups(Punctuation, Name.Attribute, Punctuation), 'after-span'),

            # Plain closing backtick
            (r'`', Punctuation, 'after-span'),
        ],

        'after-span': [
            # An immediately following bracket names an effect
            (r'(\[)([^\]]*)(\])', bygroups(Punctuation, Name.Decorator, Punctuation), '#pop:2'),

            # Anything else: back to root without consuming
            default('#pop:2'),
        ],
    }


def get_lexer() -> RevealTextLexer:
    """
    Get the RevealTextLexer instance

    Returns:
        RevealTextLexer instance ready for use with Pygments
    """
    return RevealTextLexer()
