from esper import World

from scramble.components.reveal_animation import RevealAnimation, RevealPhase
from scramble.components.reveal_options import RevealOptions
from scramble.markup.document import Container
from scramble.markup.tree import clone, iter_text_nodes, parse
from scramble.systems.reveal_ops import build_reveal_order, collect_fragments, initial_frame, write_frame


class RevealFactory:
    def __init__(self, world: World):
        self.world = world

    def create_reveal(self, container: Container, target_markup: str, options: RevealOptions) -> int:
        """Mount a noise copy of ``target_markup`` and register its animation.

        Parse errors propagate before the container is touched.
        """
        final_tree = parse(target_markup)
        working_tree = clone(final_tree)
        rng = self.world.random

        fragments = tuple(collect_fragments(final_tree))
        frame = initial_frame(fragments, options.pool, rng)
        order = build_reveal_order(fragments, rng)

        live_nodes = tuple(iter_text_nodes(working_tree))
        write_frame(live_nodes, frame)
        container.mount(working_tree)

        animation = RevealAnimation(
            container=container,
            options=options,
            fragments=fragments,
            live_nodes=live_nodes,
            order=order,
            frame=frame,
        )
        animation.phase = RevealPhase.RUNNING
        return self.world.create_entity(animation)
