from __future__ import annotations

import logging
from typing import List, Tuple

from esper import World

from scramble.components.reveal_animation import RevealAnimation, RevealPhase
from scramble.events.bus import (
    EVENT_REVEAL_CANCEL,
    EVENT_REVEAL_CANCELLED,
    EVENT_REVEAL_COMPLETED,
    EVENT_REVEAL_FRAME,
    EVENT_TICK,
    EventBus,
)
from scramble.markup.document import Container
from scramble.systems.reveal_ops import advance_frame, is_exhausted, write_final, write_frame

logger = logging.getLogger(__name__)


def reveals_for_container(world: World, container: Container) -> List[Tuple[int, RevealAnimation]]:
    return [
        (entity, animation)
        for entity, animation in world.get_component(RevealAnimation)
        if animation.container is container
    ]


def cancel_reveal(world: World, event_bus: EventBus, entity: int, *, reason: str = "cancelled") -> bool:
    """Stop a running reveal and release its entity.

    The container keeps whatever the last frame wrote. Returns False when the
    entity no longer carries a reveal (already converged or cancelled).
    """
    try:
        animation = world.component_for_entity(entity, RevealAnimation)
    except KeyError:
        return False
    animation.phase = RevealPhase.CANCELLED
    world.delete_entity(entity, immediate=True)
    logger.debug("Reveal %s on %r cancelled (%s) at %d/%d", entity, animation.container, reason,
                 animation.frame.cursor, animation.total)
    event_bus.emit(EVENT_REVEAL_CANCELLED, entity=entity, container=animation.container, reason=reason)
    return True


class RevealSystem:
    """Runs one frame per due animation on every host tick.

    A frame is due once the animation has accumulated ``interval`` milliseconds
    of tick time; a non-positive interval makes every tick due. Backlog beyond
    one interval is dropped so a stalled host never triggers catch-up bursts.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_REVEAL_CANCEL, self.on_cancel_request)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        for entity, animation in list(self.world.get_component(RevealAnimation)):
            if animation.phase is not RevealPhase.RUNNING:
                continue
            if not animation.container.attached:
                cancel_reveal(self.world, self.event_bus, entity, reason="detached")
                continue
            if not self._frame_due(animation, dt):
                continue
            self._run_frame(entity, animation)

    def on_cancel_request(self, sender, **kwargs):
        entity = kwargs.get('entity')
        if entity is None:
            return
        cancel_reveal(self.world, self.event_bus, entity)

    def _frame_due(self, animation: RevealAnimation, dt: float) -> bool:
        interval = animation.options.interval
        if interval <= 0.0:
            return True
        animation.elapsed_ms += max(0.0, dt) * 1000.0
        if animation.elapsed_ms < interval:
            return False
        animation.elapsed_ms %= interval
        return True

    def _run_frame(self, entity: int, animation: RevealAnimation) -> None:
        if not animation.order:
            # Nothing to reveal: converge without a character write.
            self._converge(entity, animation)
            return
        options = animation.options
        animation.frame = advance_frame(
            animation.frame,
            animation.order,
            animation.targets,
            pool=options.pool,
            flicker=options.flicker,
            rng=self.world.random,
        )
        animation.frames_run += 1
        write_frame(animation.live_nodes, animation.frame)
        self.event_bus.emit(
            EVENT_REVEAL_FRAME,
            entity=entity,
            cursor=animation.frame.cursor,
            total=animation.total,
        )
        # A frame listener may have cancelled or replaced this reveal.
        if animation.phase is not RevealPhase.RUNNING:
            return
        if is_exhausted(animation.frame, animation.order):
            self._converge(entity, animation)

    def _converge(self, entity: int, animation: RevealAnimation) -> None:
        # Final corrective write guarantees exact target text.
        write_final(animation.live_nodes, animation.targets)
        animation.phase = RevealPhase.CONVERGED
        self.world.delete_entity(entity, immediate=True)
        logger.debug("Reveal %s on %r converged after %d frames", entity, animation.container,
                     animation.frames_run)
        self.event_bus.emit(EVENT_REVEAL_COMPLETED, entity=entity, container=animation.container)
