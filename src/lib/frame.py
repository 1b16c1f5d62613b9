"""
Per-frame coordinator for reveal engines

One Frame.update(delta) call is one logical tick. It runs fixed stages in
order over a FrameState:

    input_ingest     queued interact signals reach every engine
    reveal_advance   each engine ticks (skip-to-end happens here)
    clear_evaluate   gated engines that saw an interact are cleared
    events_collect   events are drained; unconsumed interacts are dropped

An interact queued before update() is therefore applied in that same frame,
and a held input never fires twice.

Example:
    >>> frame = Frame([RevealEngine(parse("Hi"), base_period=0.1)])
    >>> events = frame.update(0.1)
"""

from typing import Dict, Iterable, List, Optional

from ..models.events import RevealEvent
from ..models.state import FrameState, pipeline
from .clear import ClearController
from .log import LOG
from .reveal import RevealEngine


def input_ingest(inputstate: FrameState) -> FrameState:
    """Broadcast queued interact signals to every engine"""
    state = inputstate.copy()
    if state.interactions:
        LOG(f"Interact x{state.interactions} -> {len(state.engines)} engines", level=3)
        for engine in state.engines:
            engine.interact()
    return state


def reveal_advance(inputstate: FrameState) -> FrameState:
    """Tick every engine by the frame delta"""
    state = inputstate.copy()
    for engine in state.engines:
        engine.tick(state.delta)
    return state


def clear_evaluate(inputstate: FrameState) -> FrameState:
    """Let the clear controller act on each engine"""
    state = inputstate.copy()
    for engine in state.engines:
        state.controller.evaluate(engine)
    return state


def events_collect(inputstate: FrameState) -> FrameState:
    """Drain each engine's events and drop interacts nothing consumed"""
    state = inputstate.copy()
    state.events = {}
    for engine in state.engines:
        state.events[engine] = engine.drain_events()
        engine.interact_pending = False
    return state


class Frame:
    """
    Owns a set of reveal engines and drives them tick by tick
    """

    def __init__(
        self,
        engines: Iterable[RevealEngine] = (),
        controller: Optional[ClearController] = None,
    ) -> None:
        self.engines: List[RevealEngine] = list(engines)
        self.controller = controller if controller is not None else ClearController()
        self._interactions = 0

    def add(self, engine: RevealEngine) -> RevealEngine:
        self.engines.append(engine)
        return engine

    def remove(self, engine: RevealEngine) -> None:
        self.engines.remove(engine)

    def interact(self) -> None:
        """Queue an interact signal for the next update()"""
        self._interactions += 1

    def update(self, delta: float) -> Dict[RevealEngine, List[RevealEvent]]:
        """
        Run one frame

        Args:
            delta: Seconds since the previous frame

        Returns:
            Events emitted by each engine during this frame
        """
        interactions, self._interactions = self._interactions, 0
        state = FrameState(
            delta=delta,
            engines=list(self.engines),
            controller=self.controller,
            interactions=interactions,
        )
        state = pipeline(state, input_ingest, reveal_advance, clear_evaluate, events_collect)
        return state.events
