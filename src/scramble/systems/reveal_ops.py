"""Pure reveal operations: flattening, noise, scheduling and the frame step.

Nothing here touches the world or the event bus; randomness always comes from
the ``random.Random`` passed in.
"""
from __future__ import annotations

import random
from typing import Iterable, List, Sequence

from scramble.components.fragment import Fragment, RevealCoordinate, RevealFrame
from scramble.constants import WHITESPACE
from scramble.markup.tree import Node, Text, iter_text_nodes


def collect_fragments(nodes: Iterable[Node]) -> List[Fragment]:
    """Text leaves of a tree as fragments, in document order."""
    return [
        Fragment(index=index, content=node.content)
        for index, node in enumerate(iter_text_nodes(nodes))
    ]


def is_whitespace(ch: str) -> bool:
    return ch in WHITESPACE


def draw_char(rng: random.Random, pool: str) -> str:
    return pool[rng.randrange(len(pool))]


def init_working_array(content: str, pool: str, rng: random.Random) -> List[str]:
    """Noise copy of ``content``; whitespace is kept as-is and never redrawn."""
    return [ch if is_whitespace(ch) else draw_char(rng, pool) for ch in content]


def reveal_coordinates(fragments: Sequence[Fragment]) -> List[RevealCoordinate]:
    return [
        RevealCoordinate(fragment.index, char_index)
        for fragment in fragments
        for char_index, ch in enumerate(fragment.content)
        if not is_whitespace(ch)
    ]


def build_reveal_order(fragments: Sequence[Fragment], rng: random.Random) -> tuple[RevealCoordinate, ...]:
    """Every non-whitespace coordinate exactly once, uniformly shuffled."""
    coordinates = reveal_coordinates(fragments)
    rng.shuffle(coordinates)
    return tuple(coordinates)


def initial_frame(fragments: Sequence[Fragment], pool: str, rng: random.Random) -> RevealFrame:
    arrays = tuple(init_working_array(fragment.content, pool, rng) for fragment in fragments)
    return RevealFrame(arrays=arrays, cursor=0)


def advance_frame(
    frame: RevealFrame,
    order: Sequence[RevealCoordinate],
    targets: Sequence[str],
    *,
    pool: str,
    flicker: float,
    rng: random.Random,
) -> RevealFrame:
    """Lock the next coordinate, then flicker the ones still pending.

    Returns a new frame; ``frame`` itself is left untouched.
    """
    arrays = tuple(list(chars) for chars in frame.arrays)
    cursor = frame.cursor
    if cursor < len(order):
        fragment_index, char_index = order[cursor]
        arrays[fragment_index][char_index] = targets[fragment_index][char_index]
        cursor += 1
    if flicker > 0.0:
        for position in range(cursor, len(order)):
            if rng.random() < flicker:
                fragment_index, char_index = order[position]
                arrays[fragment_index][char_index] = draw_char(rng, pool)
    return RevealFrame(arrays=arrays, cursor=cursor)


def is_exhausted(frame: RevealFrame, order: Sequence[RevealCoordinate]) -> bool:
    return frame.cursor >= len(order)


def write_frame(live_nodes: Sequence[Text], frame: RevealFrame) -> None:
    for node, chars in zip(live_nodes, frame.arrays):
        node.content = "".join(chars)


def write_final(live_nodes: Sequence[Text], targets: Sequence[str]) -> None:
    for node, target in zip(live_nodes, targets):
        node.content = target
