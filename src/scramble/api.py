"""Entry point for starting scramble-to-reveal animations.

``animate`` mounts a noise copy of the target markup into a container and
hands back a ``RevealHandle``; the ``RevealSystem`` subscribed to the same
event bus advances it on every host tick.
"""
from __future__ import annotations

import logging

from esper import World

from scramble.components.reveal_animation import RevealAnimation, RevealPhase
from scramble.components.reveal_options import RevealOptions
from scramble.events.bus import EVENT_REVEAL_STARTED, EventBus
from scramble.factories.reveal_factory import RevealFactory
from scramble.markup.document import Container
from scramble.systems.reveal_system import cancel_reveal, reveals_for_container

logger = logging.getLogger(__name__)


class RevealHandle:
    """Caller-side view of one animation."""

    def __init__(self, world: World, event_bus: EventBus, entity: int, animation: RevealAnimation) -> None:
        self._world = world
        self._event_bus = event_bus
        self.entity = entity
        self.animation = animation

    @property
    def phase(self) -> RevealPhase:
        return self.animation.phase

    @property
    def container(self) -> Container:
        return self.animation.container

    @property
    def progress(self) -> float:
        total = self.animation.total
        if total == 0:
            return 1.0 if self.animation.phase is RevealPhase.CONVERGED else 0.0
        return self.animation.frame.cursor / total

    def is_converged(self) -> bool:
        return self.animation.phase is RevealPhase.CONVERGED

    def is_running(self) -> bool:
        return self.animation.phase is RevealPhase.RUNNING

    def cancel(self) -> bool:
        if self.animation.finished:
            return False
        return cancel_reveal(self._world, self._event_bus, self.entity)

    def __repr__(self) -> str:
        return f"RevealHandle(entity={self.entity}, phase={self.animation.phase.name})"


def animate(
    world: World,
    event_bus: EventBus,
    container: Container | str,
    target_markup: str,
    options: RevealOptions | None = None,
    **overrides,
) -> RevealHandle:
    """Start revealing ``target_markup`` inside ``container``.

    ``container`` is a ``Container`` or a name / ``#name`` selector looked up
    in ``world.document``. Keyword overrides (``pool``, ``interval``,
    ``flicker``) are applied on top of ``options``. A reveal already running
    on the same container is cancelled once the new tree is mounted.

    Raises ``ContainerNotFound``, ``RevealConfigError`` or
    ``MarkupParseError`` before any animation state exists.
    """
    target = world.document.resolve(container)
    resolved_options = (options or RevealOptions()).replace(**overrides)

    factory = RevealFactory(world)
    previous = reveals_for_container(world, target)
    entity = factory.create_reveal(target, target_markup, resolved_options)
    for previous_entity, _ in previous:
        cancel_reveal(world, event_bus, previous_entity, reason="replaced")

    animation = world.component_for_entity(entity, RevealAnimation)
    logger.debug("Reveal %s started on %r with %d characters to lock", entity, target, animation.total)
    event_bus.emit(EVENT_REVEAL_STARTED, entity=entity, container=target, total=animation.total)
    return RevealHandle(world, event_bus, entity, animation)
