"""
Clear/await controller

Resets reveal engines that are gated on AwaitClear once an interact signal
arrives, or when a clear is requested explicitly. Clearing replaces the
engine's Document with an empty one so every consumer keyed off content
rebuilds from scratch.
"""

from ..models.events import Cleared
from .log import LOG
from .reveal import RevealEngine, RevealStatus


class ClearController:
    """
    Evaluates clear conditions for reveal engines

    Run once per frame, after every engine has advanced. Holds no per-engine
    state: a pending request is a flag on the engine, like interact_pending.
    """

    def request(self, engine: RevealEngine) -> None:
        """Clear engine at the next evaluate(), whatever its state"""
        engine.clear_requested = True

    def evaluate(self, engine: RevealEngine) -> bool:
        """
        Clear engine if it awaits clear and saw an interact, or was requested

        Args:
            engine: Engine to evaluate

        Returns:
            True if the engine was cleared
        """
        requested = engine.clear_requested
        gated = engine.interact_pending and engine.status is RevealStatus.AWAITING_CLEAR
        if not (requested or gated):
            return False

        engine.clear_requested = False
        self.clear(engine)
        return True

    def clear(self, engine: RevealEngine) -> None:
        """
        Clear one engine

        Order: replace the Document with an empty one (back to IDLE with the
        interact consumed), release transient children, run on_clear, emit
        Cleared.
        """
        engine.reset()
        released = engine.transients_release()
        if engine.on_clear is not None:
            engine.on_clear(engine)
        engine.event_emit(Cleared())
        LOG(f"{engine.name or 'engine'}: cleared ({released} transients released)", level=3)
