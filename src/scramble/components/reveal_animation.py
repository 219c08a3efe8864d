from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from scramble.components.fragment import Fragment, RevealCoordinate, RevealFrame
from scramble.components.reveal_options import RevealOptions
from scramble.markup.document import Container
from scramble.markup.tree import Text


class RevealPhase(Enum):
    """Lifecycle of a reveal.

    IDLE only exists while the factory is building the component, before the
    working tree is mounted; every registered reveal starts out RUNNING.
    CONVERGED and CANCELLED are terminal.
    """
    IDLE = auto()
    RUNNING = auto()
    CONVERGED = auto()
    CANCELLED = auto()


@dataclass(slots=True)
class RevealAnimation:
    """State of one running reveal bound to a single container.

    ``live_nodes`` are the text leaves of the mounted working tree, captured
    once at mount time and indexed like ``fragments``.
    """

    container: Container
    options: RevealOptions
    fragments: tuple[Fragment, ...]
    live_nodes: tuple[Text, ...]
    order: tuple[RevealCoordinate, ...]
    frame: RevealFrame
    phase: RevealPhase = RevealPhase.IDLE
    elapsed_ms: float = 0.0
    frames_run: int = 0

    @property
    def targets(self) -> tuple[str, ...]:
        return tuple(fragment.content for fragment in self.fragments)

    @property
    def total(self) -> int:
        return len(self.order)

    @property
    def finished(self) -> bool:
        return self.phase in (RevealPhase.CONVERGED, RevealPhase.CANCELLED)
