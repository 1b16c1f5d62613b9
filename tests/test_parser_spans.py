"""
Span parsing tests

Tests backtick spans with colours and effects, how their modifiers are
anchored in the built Document, and the positional rule for '['.
"""

import pytest

from revealtext.lib.parser import Parser
from revealtext.lib.compiler import Compiler, parse
from revealtext.lib.errors import UnknownEffect
from revealtext.models import (
    BLUE,
    GREEN,
    RED,
    Color,
    IndexedCommand,
    IndexedModifier,
    Pause,
    Shake,
    Speed,
    Special,
    Wave,
)


class TestPlainSpans:
    """Test spans without modifiers"""

    def test_span_text_only(self):
        """A bare span contributes its text and no modifiers"""
        doc = parse("`hi`")
        assert doc.text == "hi"
        assert doc.modifiers == ()

    def test_empty_span(self):
        """An empty span is allowed"""
        assert parse("a``b").text == "ab"

    def test_span_special_token(self):
        """The parser emits a Special token for spans"""
        root = Parser("`world|red`[wave]").parse()
        assert root.tokens == [Special(text="world", modifiers=[Color(RED), Wave()])]


class TestColors:
    """Test |color on spans"""

    @pytest.mark.parametrize("name,rgba", [("red", RED), ("green", GREEN), ("blue", BLUE)])
    def test_color_names(self, name, rgba):
        """Each colour name resolves to its constant"""
        doc = parse(f"`hi|{name}`")
        assert doc.modifiers == (IndexedModifier(0, 2, Color(rgba)),)

    def test_color_offset_after_text(self):
        """Span modifiers are re-based onto the preceding text"""
        doc = parse("abc `de|blue`")
        assert doc.text == "abc de"
        assert doc.modifiers == (IndexedModifier(4, 6, Color(BLUE)),)

    def test_color_property(self):
        """Colour modifiers expose their RGBA; effects expose none"""
        assert Color(RED).color == RED
        assert Wave().color is None
        assert not Color(RED).is_shader_effect
        assert Wave().is_shader_effect


class TestEffects:
    """Test [effect] after spans"""

    def test_wave(self):
        """[wave] directly after a span adds Wave"""
        doc = parse("`hi`[wave]")
        assert doc.modifiers == (IndexedModifier(0, 2, Wave()),)

    def test_shake_default_intensity(self):
        """[shake] takes the configured intensity"""
        doc = parse("`hi`[shake]")
        assert doc.modifiers == (IndexedModifier(0, 2, Shake(0.5)),)

    def test_shake_custom_intensity(self):
        """The parser can be given a shake intensity"""
        parsed = Compiler(Parser("`hi`[shake]", shake_intensity=0.25).parse()).compile()
        assert parsed.documents[0].modifiers == (IndexedModifier(0, 2, Shake(0.25)),)

    def test_shake_intensity_range(self):
        """Shake intensity outside 0..1 is rejected"""
        with pytest.raises(ValueError):
            Shake(1.5)

    def test_color_then_effect(self):
        """Colour comes first, then the effect, both over the span"""
        doc = parse("`hi|green`[shake]")
        assert [m.kind for m in doc.modifiers] == [Color(GREEN), Shake(0.5)]
        assert all((m.start, m.end) == (0, 2) for m in doc.modifiers)


class TestBracketPosition:
    """Test that '[' meaning depends only on position"""

    def test_bracket_after_space_is_pause(self):
        """A space between span and '[' makes it a pause"""
        doc = parse("`a` [1]")
        assert doc.text == "a "
        assert doc.modifiers == ()
        assert doc.commands == (IndexedCommand(2, Pause(1.0)),)

    def test_bracket_after_span_is_effect(self):
        """A number directly after a span is an unknown effect, not a pause"""
        with pytest.raises(UnknownEffect):
            parse("`a`[1]")


class TestMixedMarkup:
    """Test complete lines mixing directives and spans"""

    def test_speeds_and_colored_wave(self):
        """Speed directives, deduplicated spaces and a coloured wave span"""
        doc = parse("<0.3> Hello, <0.5> `world|red`[wave]!")
        assert doc.text == "Hello, world!"
        assert doc.modifiers == (
            IndexedModifier(7, 12, Color(RED)),
            IndexedModifier(7, 12, Wave()),
        )
        assert doc.commands == (
            IndexedCommand(0, Speed(0.3)),
            IndexedCommand(6, Speed(0.5)),
        )

    def test_modifier_ranges_within_text(self):
        """Every modifier range lies inside the text"""
        doc = parse(" a  `b|red`   `c`[wave]  [1] `d|blue`[shake] ")
        for modifier in doc.modifiers:
            assert 0 <= modifier.start <= modifier.end <= len(doc.text)
        for command in doc.commands:
            assert 0 <= command.index <= len(doc.text)

    def test_modifier_covers_span_text(self):
        """After deduplication each modifier still covers its span's text"""
        doc = parse("x   `yes|red` z")
        modifier = doc.modifiers[0]
        assert doc.text[modifier.start:modifier.end] == "yes"
