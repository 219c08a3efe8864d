"""Demo window for the scramble-to-reveal effect.

Run with: ``python src/main.py [markup]``. Space replays the reveal, Escape
cancels it.
"""
import logging
import sys

from arcade import Window, key, run, set_background_color, color

from scramble.api import animate
from scramble.constants import (
    DEMO_CONTAINER,
    DEMO_INTERVAL_MS,
    DEMO_MARKUP,
    UPDATE_RATE,
    WINDOW_HEIGHT,
    WINDOW_TITLE,
    WINDOW_WIDTH,
)
from scramble.events.bus import EVENT_TICK, EVENT_REVEAL_COMPLETED, EventBus
from scramble.rendering.reveal_render_system import RevealRenderSystem
from scramble.systems.reveal_system import RevealSystem
from scramble.world import create_world

logger = logging.getLogger(__name__)


class RevealWindow(Window):
    def __init__(self, markup: str):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE)
        self.set_update_rate(UPDATE_RATE)
        self.markup = markup
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus)
        self.world.document.add_container(DEMO_CONTAINER)
        self.reveal_system = RevealSystem(self.world, self.event_bus)
        self.render_system = RevealRenderSystem(self.world.document, self, [DEMO_CONTAINER])
        self.event_bus.subscribe(EVENT_REVEAL_COMPLETED, self._on_reveal_completed)
        self.handle = None
        set_background_color(color.BLACK)
        self.replay()

    def replay(self):
        self.handle = animate(
            self.world,
            self.event_bus,
            f"#{DEMO_CONTAINER}",
            self.markup,
            interval=DEMO_INTERVAL_MS,
        )

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == key.SPACE:
            self.replay()
        elif symbol == key.ESCAPE and self.handle is not None:
            self.handle.cancel()

    def _on_reveal_completed(self, sender, **payload):
        logger.info("Revealed: %s", payload["container"].inner_markup())


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = sys.argv[1:] if argv is None else argv
    markup = " ".join(args) if args else DEMO_MARKUP
    RevealWindow(markup)
    run()

if __name__ == "__main__":
    main()
