"""
Reveal engine (typewriter state machine)

Advances a cursor through a Document's text under timer control, reacting to
the commands anchored in it. One RevealEngine exists per display instance and
is only mutated from its own slot in the per-frame pass (see frame.Frame).

States:
    IDLE            cursor 0, nothing bound (or just cleared)
    SCROLLING       cursor advancing on the timer
    PAUSED          suspended by a Pause command
    AWAITING_CLEAR  gated until an interact signal clears the text
    FINISHED        ONCE mode, pass complete

While scrolling, a RateTick event fires every `rate` seconds (a steady
cue for typing sounds, independent of the characters revealed).

Timing uses accumulated delta-time only; nothing sleeps, so a run is
reproducible under fast-forwarded or replayed time.

Example:
    >>> engine = RevealEngine(Document.from_text("Hi!"), base_period=0.25)
    >>> engine.tick(0.5)
    >>> engine.visible_text
    'Hi'
"""

from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from ..config import appsettings
from ..models.document import (
    AwaitClear,
    Color,
    CommandKind,
    Delete,
    Document,
    ModifierKind,
    Pause,
    Speed,
)
from ..models.events import CharacterRevealed, FullyRevealed, RateTick, RevealEvent, WordRevealed
from .errors import UnimplementedCommand
from .log import LOG


class ScrollMode(Enum):
    """What happens once a reveal pass completes"""
    ONCE = "once"
    REPEATING = "repeating"


class RevealStatus(Enum):
    IDLE = "idle"
    SCROLLING = "scrolling"
    PAUSED = "paused"
    AWAITING_CLEAR = "awaiting_clear"
    FINISHED = "finished"


ActiveModifier = Tuple[range, ModifierKind]


class RevealEngine:
    """
    Per-instance typewriter state machine

    Control inputs: bind(document), tick(delta), interact().
    Outputs: visible_range, active_modifiers(), drain_events().
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        base_period: Optional[float] = None,
        mode: Union[ScrollMode, str, None] = None,
        on_finished: Optional[Callable[["RevealEngine"], None]] = None,
        on_clear: Optional[Callable[["RevealEngine"], None]] = None,
        name: str = "",
        rate: Optional[float] = None,
    ) -> None:
        """
        Initialize a reveal engine

        Args:
            document: Document to bind immediately (otherwise stays IDLE)
            base_period: Seconds per character at speed 1 (defaults to settings)
            mode: ScrollMode or its value (defaults to settings)
            on_finished: Called with the engine whenever a pass completes
            on_clear: Called with the engine after it is cleared
            name: Label used in logs and transcripts
            rate: Seconds between RateTick cues while scrolling (defaults to
                  base_period)
        """
        self.base_period = appsettings.base_period if base_period is None else base_period
        if self.base_period <= 0:
            raise ValueError(f"base_period must be positive, got {self.base_period}")
        self.rate = self.base_period if rate is None else rate
        if self.rate <= 0:
            raise ValueError(f"rate must be positive, got {self.rate}")
        self.mode = ScrollMode(mode if mode is not None else appsettings.default_mode)
        self.on_finished = on_finished
        self.on_clear = on_clear
        self.name = name

        self.interact_pending = False
        self.clear_requested = False
        self._events: List[RevealEvent] = []
        self._transients: List[Callable[[], None]] = []
        self._state_reset(Document.empty())

        if document is not None:
            self.bind(document)

    def __repr__(self) -> str:
        return (
            f"RevealEngine(name={self.name!r}, status={self.status.value}, "
            f"cursor={self.cursor}/{len(self.document)})"
        )

    # ------------------------------------------------------------------
    # Control inputs
    # ------------------------------------------------------------------

    def bind(self, document: Document) -> None:
        """
        Bind a new Document and start revealing it from the beginning

        Discards any pause, await-clear gate, pending interact or speed
        change from the previous Document in a single replacement.
        """
        self._state_reset(document)
        self.status = RevealStatus.SCROLLING
        LOG(f"{self.name or 'engine'}: bound {len(document)} characters", level=3)

    def reset(self) -> None:
        """Unbind: empty Document, cursor 0, IDLE"""
        self._state_reset(Document.empty())

    def interact(self) -> None:
        """
        Signal an interaction

        Consumed by the next tick() (reveal everything while scrolling or
        paused) or by the clear controller (while awaiting clear).
        """
        self.interact_pending = True

    def set_period(self, base_period: float) -> None:
        """Change the seconds-per-character at speed 1"""
        if base_period <= 0:
            raise ValueError(f"base_period must be positive, got {base_period}")
        self.base_period = base_period

    def tick(self, delta: float) -> None:
        """
        Advance the state machine by delta seconds

        Args:
            delta: Elapsed wall-clock seconds since the previous tick
        """
        if delta < 0:
            raise ValueError(f"delta must not be negative, got {delta}")

        if self.interact_pending and self.status in (RevealStatus.SCROLLING, RevealStatus.PAUSED):
            self.reveal_all()

        if self.status is RevealStatus.SCROLLING:
            self._rate_accumulate(delta)

        if self.status is RevealStatus.PAUSED:
            self._pause_remaining -= delta
            if self._pause_remaining > 0:
                return
            self._pause_remaining = 0.0
            self.status = RevealStatus.SCROLLING
            # One catch-up step right after unpausing, without re-evaluating
            # the commands at the cursor
            self._advance()
            return

        if self.status is not RevealStatus.SCROLLING:
            return

        self._elapsed += delta
        while self.status is RevealStatus.SCROLLING and self._elapsed >= self.period:
            self._elapsed -= self.period
            self._timeout()

    def reveal_all(self) -> bool:
        """
        Jump the cursor to the end of the text, bypassing the timer

        Runs the usual completion handling. Per-character events are not
        emitted for the skipped text.

        Returns:
            True if the engine was scrolling or paused and the skip happened
        """
        if self.status not in (RevealStatus.SCROLLING, RevealStatus.PAUSED):
            return False

        self.interact_pending = False
        self._pause_remaining = 0.0
        self.status = RevealStatus.SCROLLING

        if self._pass_complete:
            # Only a terminal pause (and the held terminal command) was left
            self._advance()
        else:
            self.cursor = len(self.document)
            self._complete()
        LOG(f"{self.name or 'engine'}: revealed all", level=3)
        return True

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def period(self) -> float:
        """Current timer period: base_period / speed"""
        return self.base_period / self.speed

    @property
    def visible_range(self) -> range:
        return range(0, min(self.cursor, len(self.document)))

    @property
    def visible_text(self) -> str:
        return self.document.text[: self.visible_range.stop]

    def active_modifiers(self) -> List[ActiveModifier]:
        """
        Modifiers intersecting the visible range

        Ranges are clamped to the text and clipped to the visible range, so
        drifted runtime indices never address past the end.
        """
        visible_end = self.visible_range.stop
        active = []
        for modifier in self.document.modifiers_clamped():
            end = min(modifier.end, visible_end)
            if modifier.start < end:
                active.append((range(modifier.start, end), modifier.kind))
        return active

    def active_effects(self) -> List[ActiveModifier]:
        """Visible Wave/Shake modifiers, for glyph geometry and materials"""
        return [(r, kind) for r, kind in self.active_modifiers() if kind.is_shader_effect]

    def active_colors(self) -> List[ActiveModifier]:
        """Visible Color modifiers, for text styling"""
        return [(r, kind) for r, kind in self.active_modifiers() if isinstance(kind, Color)]

    def drain_events(self) -> List[RevealEvent]:
        """Return and forget the events emitted since the last drain"""
        events, self._events = self._events, []
        return events

    def event_emit(self, event: RevealEvent) -> None:
        self._events.append(event)

    # ------------------------------------------------------------------
    # Transient children
    # ------------------------------------------------------------------

    def own(self, release: Callable[[], None]) -> None:
        """Register a transient visual child, released when the text is cleared"""
        self._transients.append(release)

    def transients_release(self) -> int:
        """Release every owned transient child; returns how many there were"""
        transients, self._transients = self._transients, []
        for release in transients:
            release()
        return len(transients)

    # ------------------------------------------------------------------
    # State machine internals
    # ------------------------------------------------------------------

    def _state_reset(self, document: Document) -> None:
        self.document = document
        self.status = RevealStatus.IDLE
        self.cursor = 0
        self.speed = 1.0
        self.interact_pending = False
        self._elapsed = 0.0
        self._pause_remaining = 0.0
        self._rate_elapsed = 0.0
        self._pass_complete = False
        self._end_held: Optional[CommandKind] = None

    def _timeout(self) -> None:
        """One timer period elapsed: evaluate commands at the cursor, then advance"""
        if self.cursor < len(self.document):
            proceed = True
            for command in self.document.commands_at(self.cursor):
                proceed = self._command_apply(command.kind, command.index) and proceed
            if not proceed:
                return
        self._advance()

    def _advance(self) -> None:
        length = len(self.document)
        if self.cursor < length:
            self.cursor += 1
            self._reveal_emit(self.cursor - 1)
            if self.cursor == length:
                self._complete()
        elif not self._pass_complete:
            self._complete()
        else:
            self._pass_finish()

    def _complete(self) -> None:
        """
        Completion handling once the cursor reaches the end of the text

        Fires FullyRevealed once per pass, then evaluates the commands anchored
        at len(text). The terminal command is held until those commands have
        run their course, so a trailing pause is honoured before the gate.
        """
        self._pass_complete = True
        self.event_emit(FullyRevealed())
        LOG(f"{self.name or 'engine'}: fully revealed", level=3)
        if self.on_finished is not None:
            self.on_finished(self)

        length = len(self.document)
        proceed = True
        for command in self.document.commands_at(length):
            proceed = self._command_apply(command.kind, command.index) and proceed
        self._end_held = self.document.end
        if not proceed:
            return
        self._pass_finish()

    def _pass_finish(self) -> None:
        """Apply the held terminal command, then restart or finish"""
        if self._end_held is not None:
            end, self._end_held = self._end_held, None
            if not self._command_apply(end, len(self.document)):
                return

        if self.mode is ScrollMode.REPEATING:
            self._restart()
        else:
            self.status = RevealStatus.FINISHED

    def _restart(self) -> None:
        self.cursor = 0
        self._pass_complete = False
        self.status = RevealStatus.SCROLLING

    def _command_apply(self, kind: CommandKind, index: int) -> bool:
        """
        Apply one command

        Returns:
            False if the command suppresses advancing (pause, await clear)

        Raises:
            UnimplementedCommand: For Delete, which is not supported
        """
        if isinstance(kind, Speed):
            if kind.factor <= 0:
                raise ValueError(f"Speed factor must be positive, got {kind.factor}")
            self.speed = kind.factor
            return True
        if isinstance(kind, Pause):
            self.status = RevealStatus.PAUSED
            self._pause_remaining = kind.duration
            LOG(f"{self.name or 'engine'}: paused {kind.duration}s at {index}", level=3)
            return False
        if isinstance(kind, AwaitClear):
            self.status = RevealStatus.AWAITING_CLEAR
            LOG(f"{self.name or 'engine'}: awaiting clear at {index}", level=3)
            return False
        if isinstance(kind, Delete):
            raise UnimplementedCommand(kind, index)
        raise TypeError(f"Unknown command {kind!r}")

    def _rate_accumulate(self, delta: float) -> None:
        """Emit one RateTick per elapsed rate period"""
        self._rate_elapsed += delta
        while self._rate_elapsed >= self.rate:
            self._rate_elapsed -= self.rate
            self.event_emit(RateTick())

    def _reveal_emit(self, index: int) -> None:
        text = self.document.text
        char = text[index]
        if char == " ":
            return
        self.event_emit(CharacterRevealed(index, char))
        if index == 0 or text[index - 1] == " ":
            self.event_emit(WordRevealed(index))
