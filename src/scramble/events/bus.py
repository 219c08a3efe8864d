from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so handlers owned by systems nobody stores still fire.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                          # payload: dt=float (seconds)


# ============================================================================
# REVEAL ANIMATION
# ============================================================================
EVENT_REVEAL_STARTED = "reveal_started"      # payload: entity=int, container=Container, total=int
EVENT_REVEAL_FRAME = "reveal_frame"          # payload: entity=int, cursor=int, total=int
EVENT_REVEAL_COMPLETED = "reveal_completed"  # payload: entity=int, container=Container
EVENT_REVEAL_CANCEL = "reveal_cancel"        # payload: entity=int
EVENT_REVEAL_CANCELLED = "reveal_cancelled"  # payload: entity=int, container=Container, reason=str
