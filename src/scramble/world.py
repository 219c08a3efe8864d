import random

from esper import World
from .events.bus import EventBus
from scramble.markup.document import Document


def create_world(
    event_bus: EventBus,
    *,
    document: Document | None = None,
    rng: random.Random | None = None,
) -> World:
    """World carrying the host document and the shared random source."""
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "document", document or Document())
    return world
