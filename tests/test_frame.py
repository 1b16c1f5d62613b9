"""
Frame coordinator tests

Tests the fixed stage order of one frame (input, advance, clear, collect)
across one or more engines.
"""

from revealtext.lib.compiler import parse
from revealtext.lib.frame import Frame
from revealtext.lib.reveal import RevealEngine, RevealStatus
from revealtext.models import CharacterRevealed, Cleared, FullyRevealed, RateTick

PERIOD = 0.25


def engine_make(source, name=""):
    return RevealEngine(parse(source), base_period=PERIOD, mode="once", name=name)


class TestFrameUpdate:
    """Test single-engine frames"""

    def test_update_returns_events(self):
        """Events emitted during the frame are returned per engine"""
        engine = engine_make("Hi")
        frame = Frame([engine])
        events = frame.update(PERIOD * 2)
        revealed = [e for e in events[engine] if not isinstance(e, RateTick)]
        assert revealed[0] == CharacterRevealed(0, "H")
        assert revealed[-1] == FullyRevealed()
        assert events[engine].count(RateTick()) == 2
        assert engine.status is RevealStatus.AWAITING_CLEAR

    def test_interact_clears_gated_engine(self):
        """An interact reaching a gated engine clears it in the same frame"""
        engine = engine_make("Hi")
        frame = Frame([engine])
        frame.update(PERIOD * 2)
        frame.interact()
        events = frame.update(0.0)
        assert events[engine] == [Cleared()]
        assert engine.status is RevealStatus.IDLE

    def test_skip_does_not_also_clear(self):
        """One interact skips to the end; it does not clear in the same frame"""
        engine = engine_make("Hello")
        frame = Frame([engine])
        frame.update(PERIOD)
        frame.interact()
        events = frame.update(0.0)
        assert events[engine] == [FullyRevealed()]
        assert engine.status is RevealStatus.AWAITING_CLEAR

        frame.update(0.0)
        assert engine.status is RevealStatus.AWAITING_CLEAR

    def test_unconsumed_interact_dropped(self):
        """An interact nothing consumed does not survive the frame"""
        engine = RevealEngine(base_period=PERIOD)
        frame = Frame([engine])
        frame.interact()
        frame.update(0.0)
        assert engine.interact_pending is False


class TestMultipleEngines:
    """Test frames over several engines"""

    def test_interact_broadcast(self):
        """One interact reaches every engine"""
        first, second = engine_make("a", "first"), engine_make("b", "second")
        frame = Frame([first, second])
        frame.update(PERIOD)
        frame.interact()
        events = frame.update(0.0)
        assert events[first] == [Cleared()]
        assert events[second] == [Cleared()]

    def test_engines_independent(self):
        """Engines advance on their own documents"""
        short, long = engine_make("a"), engine_make("abcd")
        frame = Frame([short, long])
        frame.update(PERIOD * 2)
        assert short.status is RevealStatus.AWAITING_CLEAR
        assert long.cursor == 2
        assert long.status is RevealStatus.SCROLLING

    def test_add_and_remove(self):
        """Engines can join and leave a frame"""
        frame = Frame()
        engine = frame.add(engine_make("a"))
        assert frame.update(PERIOD)[engine]
        frame.remove(engine)
        assert frame.update(PERIOD) == {}
