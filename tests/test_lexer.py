"""
Lexer tests

Tests the Pygments lexer used for highlighted source previews.
"""

from pygments.token import Keyword, Name, Number, Punctuation, String, Text

from revealtext.lib.lexer import RevealTextLexer, get_lexer


def tokens_of(source):
    """Non-whitespace tokens as (type, value) pairs"""
    return [(t, v.strip()) for t, v in RevealTextLexer().get_tokens(source) if v.strip()]


class TestDirectives:
    """Test directive tokens"""

    def test_speed_is_keyword(self):
        assert (Keyword, "<0.5>") in tokens_of("<0.5>hello")

    def test_pause_is_number(self):
        assert (Number, "[1.5]") in tokens_of("wait[1.5]")

    def test_braces_are_punctuation(self):
        tokens = tokens_of("{aside}")
        assert tokens[0] == (Punctuation, "{")
        assert tokens[-1] == (Punctuation, "}")


class TestSpans:
    """Test span tokens"""

    def test_colored_span_with_effect(self):
        """Span text, colour and effect get their own token types"""
        assert tokens_of("`world|red`[wave]") == [
            (Punctuation, "`"),
            (String, "world"),
            (Punctuation, "|"),
            (Name.Attribute, "red"),
            (Punctuation, "`"),
            (Punctuation, "["),
            (Name.Decorator, "wave"),
            (Punctuation, "]"),
        ]

    def test_bracket_after_space_is_pause(self):
        """Only a bracket right after the span is an effect"""
        tokens = tokens_of("`a` [1]")
        assert (Number, "[1]") in tokens
        assert all(t is not Name.Decorator for t, _ in tokens)

    def test_text_after_span(self):
        """Lexing returns to plain text after a span"""
        assert (Text, "after") in tokens_of("`a`after")


class TestLexerLookup:
    """Test lexer metadata"""

    def test_get_lexer(self):
        lexer = get_lexer()
        assert isinstance(lexer, RevealTextLexer)
        assert "rt" in lexer.aliases
