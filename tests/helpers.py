from __future__ import annotations

import random
from typing import Tuple

from esper import World

from scramble.events.bus import EVENT_TICK, EventBus
from scramble.markup.document import Container
from scramble.systems.reveal_system import RevealSystem
from scramble.world import create_world


def make_reveal_env(seed: int = 1234, container_name: str = "target") -> Tuple[EventBus, World, Container]:
    """Bus, world with a seeded rng, and one attached container."""

    bus = EventBus()
    world = create_world(bus, rng=random.Random(seed))
    RevealSystem(world, bus)
    container = world.document.add_container(container_name)
    return bus, world, container


def drive(bus: EventBus, ticks: int, dt: float = 1 / 64) -> None:
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)
