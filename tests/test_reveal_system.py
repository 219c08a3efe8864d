import random

import pytest

from scramble.api import animate
from scramble.components.reveal_animation import RevealAnimation, RevealPhase
from scramble.components.reveal_options import RevealOptions
from scramble.errors import ContainerNotFound, MarkupParseError, RevealConfigError
from scramble.events.bus import (
    EVENT_REVEAL_CANCEL,
    EVENT_REVEAL_CANCELLED,
    EVENT_REVEAL_COMPLETED,
    EVENT_REVEAL_FRAME,
    EVENT_REVEAL_STARTED,
    EventBus,
)
from scramble.markup.tree import parse, structure
from scramble.systems.reveal_system import RevealSystem
from scramble.world import create_world
from tests.helpers import drive, make_reveal_env


def _record(bus, name):
    events = []

    def handler(sender, **payload):
        events.append(payload)

    bus.subscribe(name, handler)
    return events


def _active_reveals(world):
    return list(world.get_component(RevealAnimation))


def test_bold_scenario_converges_with_structure_and_space_intact():
    bus, world, container = make_reveal_env()
    markup = "<b>Hi</b> you"
    shape = structure(parse(markup))

    handle = animate(world, bus, container, markup, pool="AB", flicker=0, interval=0)

    text = container.text_content()
    assert text[2] == " "
    assert set(text.replace(" ", "")) <= set("AB")
    assert structure(container.children) == shape

    ticks = 0
    while not handle.is_converged():
        drive(bus, 1)
        ticks += 1
        assert ticks <= 5
        text = container.text_content()
        assert text[2] == " "
        assert structure(container.children) == shape
        # Targets share no characters with the pool, so matches count locked slots.
        assert sum(a == b for a, b in zip(text, "Hi you")) == 1 + handle.animation.frame.cursor

    assert ticks == 5
    assert container.text_content() == "Hi you"
    assert container.inner_markup() == "<b>Hi</b> you"
    assert handle.progress == 1.0
    assert not _active_reveals(world)


def test_empty_markup_converges_on_first_tick_without_frames():
    bus, world, container = make_reveal_env()
    frames = _record(bus, EVENT_REVEAL_FRAME)
    completed = _record(bus, EVENT_REVEAL_COMPLETED)

    handle = animate(world, bus, container, "")
    assert handle.is_running()
    assert handle.progress == 0.0

    drive(bus, 1)

    assert handle.is_converged()
    assert handle.progress == 1.0
    assert frames == []
    assert len(completed) == 1
    assert container.children == []


def test_whitespace_only_markup_converges_immediately():
    bus, world, container = make_reveal_env()
    frames = _record(bus, EVENT_REVEAL_FRAME)

    handle = animate(world, bus, container, " <br>\t\n <i>  </i>")
    assert container.text_content() == " \t\n   "

    drive(bus, 1)

    assert handle.is_converged()
    assert frames == []
    assert container.text_content() == " \t\n   "


def test_whitespace_never_changes_under_full_flicker():
    bus, world, container = make_reveal_env(seed=7)
    markup = "<p>a b\tc\n<i>d  e</i> <a href='#'>f\u00a0g</a></p>"
    target = "a b\tc\nd  e f\u00a0g"
    whitespace = [i for i, ch in enumerate(target) if ch.isspace()]

    handle = animate(world, bus, container, markup, pool="xyz", flicker=1.0)

    while not handle.is_converged():
        text = container.text_content()
        assert all(text[i] == target[i] for i in whitespace)
        drive(bus, 1)

    assert container.text_content() == target


def test_locked_characters_never_change_and_unlocked_keep_flickering():
    bus, world, container = make_reveal_env(seed=99)
    markup = "<em>decrypt</em> <strong>this</strong>"
    target = "decrypt this"

    handle = animate(world, bus, container, markup, pool="0123456789", flicker=1.0)
    animation = handle.animation
    locked_positions = []

    while not handle.is_converged():
        drive(bus, 1)
        if handle.is_converged():
            break
        live = [node.content for node in animation.live_nodes]
        for fragment_index, char_index in animation.order[:animation.frame.cursor]:
            assert live[fragment_index][char_index] == animation.targets[fragment_index][char_index]
        for fragment_index, char_index in animation.order[animation.frame.cursor:]:
            assert live[fragment_index][char_index].isdigit()
        locked_positions.append(animation.frame.cursor)

    assert locked_positions == list(range(1, len(locked_positions) + 1))
    assert container.text_content() == target


def test_reveal_events_report_progress():
    bus, world, container = make_reveal_env()
    started = _record(bus, EVENT_REVEAL_STARTED)
    frames = _record(bus, EVENT_REVEAL_FRAME)
    completed = _record(bus, EVENT_REVEAL_COMPLETED)

    handle = animate(world, bus, container, "<b>ab</b> c")
    drive(bus, 10)

    assert started == [{"entity": handle.entity, "container": container, "total": 3}]
    assert [f["cursor"] for f in frames] == [1, 2, 3]
    assert all(f["total"] == 3 for f in frames)
    assert completed == [{"entity": handle.entity, "container": container}]


def test_interval_accumulates_tick_time():
    bus, world, container = make_reveal_env()
    handle = animate(world, bus, container, "abcd", interval=500)

    drive(bus, 1, dt=0.25)
    assert handle.animation.frame.cursor == 0
    drive(bus, 1, dt=0.25)
    assert handle.animation.frame.cursor == 1
    drive(bus, 3, dt=0.25)
    assert handle.animation.frame.cursor == 2


def test_long_stall_runs_a_single_frame():
    bus, world, container = make_reveal_env()
    handle = animate(world, bus, container, "abcd", interval=100)

    drive(bus, 1, dt=2.0)

    assert handle.animation.frame.cursor == 1


@pytest.mark.parametrize("interval", [0, -20])
def test_non_positive_interval_runs_one_frame_per_tick(interval):
    bus, world, container = make_reveal_env()
    handle = animate(world, bus, container, "abcdef", interval=interval)

    drive(bus, 3, dt=0.0)

    assert handle.animation.frame.cursor == 3
    assert not handle.is_converged()


def test_cancel_stops_animation_and_keeps_last_frame():
    bus, world, container = make_reveal_env()
    cancelled = _record(bus, EVENT_REVEAL_CANCELLED)
    handle = animate(world, bus, container, "<i>secret message</i>", flicker=1.0)

    drive(bus, 2)
    assert handle.cancel() is True
    snapshot = container.inner_markup()
    drive(bus, 20)

    assert handle.phase is RevealPhase.CANCELLED
    assert not handle.is_converged()
    assert container.inner_markup() == snapshot
    assert handle.cancel() is False
    assert not _active_reveals(world)
    assert cancelled == [{"entity": handle.entity, "container": container, "reason": "cancelled"}]


def test_cancel_after_convergence_is_noop():
    bus, world, container = make_reveal_env()
    cancelled = _record(bus, EVENT_REVEAL_CANCELLED)
    handle = animate(world, bus, container, "ok")

    drive(bus, 5)

    assert handle.is_converged()
    assert handle.cancel() is False
    assert cancelled == []


def test_cancel_request_event():
    bus, world, container = make_reveal_env()
    handle = animate(world, bus, container, "hello")

    bus.emit(EVENT_REVEAL_CANCEL, entity=handle.entity)

    assert handle.phase is RevealPhase.CANCELLED
    assert not _active_reveals(world)


def test_detached_container_cancels_its_animation():
    bus, world, container = make_reveal_env()
    cancelled = _record(bus, EVENT_REVEAL_CANCELLED)
    handle = animate(world, bus, container, "going away")

    world.document.remove_container(container.name)
    drive(bus, 1)

    assert handle.phase is RevealPhase.CANCELLED
    assert cancelled[0]["reason"] == "detached"
    assert handle.animation.frame.cursor == 0


def test_new_animation_replaces_running_one_on_same_container():
    bus, world, container = make_reveal_env()
    cancelled = _record(bus, EVENT_REVEAL_CANCELLED)
    first = animate(world, bus, container, "first text")
    drive(bus, 2)

    second = animate(world, bus, "#target", "<b>second</b>")
    drive(bus, 10)

    assert first.phase is RevealPhase.CANCELLED
    assert cancelled[0]["reason"] == "replaced"
    assert second.is_converged()
    assert container.inner_markup() == "<b>second</b>"


def test_animations_on_separate_containers_are_independent():
    bus, world, left = make_reveal_env()
    right = world.document.add_container("right")

    short = animate(world, bus, left, "ab")
    long = animate(world, bus, right, "abcdef")
    drive(bus, 2)

    assert short.is_converged()
    assert long.is_running()
    assert long.animation.frame.cursor == 2
    drive(bus, 4)
    assert long.is_converged()
    assert right.text_content() == "abcdef"


def test_missing_container_raises_before_any_state():
    bus, world, _ = make_reveal_env()

    with pytest.raises(ContainerNotFound):
        animate(world, bus, "#nowhere", "<b>text</b>")

    assert not _active_reveals(world)


def test_malformed_markup_propagates_and_leaves_container_untouched():
    bus, world, container = make_reveal_env()
    container.mount(parse("<b>before</b>"))

    with pytest.raises(MarkupParseError):
        animate(world, bus, container, "<b>unbalanced</i>")

    assert container.inner_markup() == "<b>before</b>"
    assert not _active_reveals(world)


def test_invalid_options_rejected_at_entry():
    bus, world, container = make_reveal_env()

    with pytest.raises(RevealConfigError):
        animate(world, bus, container, "text", flicker=1.5)
    with pytest.raises(RevealConfigError):
        animate(world, bus, container, "text", RevealOptions(), pool="")

    assert not _active_reveals(world)
    assert container.children == []


def test_same_seed_replays_identical_frames():
    def run(seed):
        bus = EventBus()
        world = create_world(bus, rng=random.Random(seed))
        RevealSystem(world, bus)
        container = world.document.add_container("c")
        handle = animate(world, bus, container, "<p>same <b>frames</b></p>")
        seen = [container.text_content()]
        while not handle.is_converged():
            drive(bus, 1)
            seen.append(container.text_content())
        return seen

    assert run(42) == run(42)


def test_cancel_from_last_frame_listener_leaves_reveal_cancelled():
    bus, world, container = make_reveal_env()
    completed = _record(bus, EVENT_REVEAL_COMPLETED)
    handles = {}

    def on_frame(sender, **payload):
        if payload["cursor"] == payload["total"]:
            handles["reveal"].cancel()

    bus.subscribe(EVENT_REVEAL_FRAME, on_frame)
    handles["reveal"] = animate(world, bus, container, "a")

    drive(bus, 1)

    assert handles["reveal"].phase is RevealPhase.CANCELLED
    assert completed == []
    assert not _active_reveals(world)


def test_replacing_from_last_frame_listener_starts_the_new_reveal():
    bus, world, container = make_reveal_env()
    cancelled = _record(bus, EVENT_REVEAL_CANCELLED)
    replacements = []

    def on_frame(sender, **payload):
        if payload["cursor"] == payload["total"] and not replacements:
            replacements.append(animate(world, bus, container, "<b>next</b>"))

    bus.subscribe(EVENT_REVEAL_FRAME, on_frame)
    first = animate(world, bus, container, "a")

    drive(bus, 1)

    assert first.phase is RevealPhase.CANCELLED
    assert cancelled[0]["reason"] == "replaced"
    assert replacements[0].is_running()

    drive(bus, 4)

    assert replacements[0].is_converged()
    assert container.inner_markup() == "<b>next</b>"


def test_registered_reveal_is_running_before_first_tick():
    bus, world, container = make_reveal_env()

    handle = animate(world, bus, container, "text")

    assert handle.phase is RevealPhase.RUNNING
    assert _active_reveals(world)[0][1].phase is RevealPhase.RUNNING
