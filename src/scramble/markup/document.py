from __future__ import annotations

from typing import Iterable, List

from scramble.errors import ContainerNotFound
from scramble.markup.tree import Node, Text, iter_text_nodes, render_text, to_markup


class Container:
    """Mount point for a markup tree inside a ``Document``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.children: List[Node] = []
        self.attached = True

    def mount(self, nodes: Iterable[Node]) -> None:
        """Replace the mounted content with ``nodes``."""
        self.children = list(nodes)

    def text_nodes(self) -> List[Text]:
        return list(iter_text_nodes(self.children))

    def text_content(self) -> str:
        return render_text(self.children)

    def inner_markup(self) -> str:
        return to_markup(self.children)

    def __repr__(self) -> str:
        return f"Container({self.name!r})"


class Document:
    """In-memory collection of named containers."""

    def __init__(self) -> None:
        self._containers: dict[str, Container] = {}

    def add_container(self, name: str) -> Container:
        if name in self._containers:
            raise ValueError(f"Container '{name}' already exists")
        container = Container(name)
        self._containers[name] = container
        return container

    def remove_container(self, name: str) -> Container:
        try:
            container = self._containers.pop(name)
        except KeyError as exc:
            raise ContainerNotFound(f"Container '{name}' not found") from exc
        container.attached = False
        return container

    def has(self, name: str) -> bool:
        return name in self._containers

    def resolve(self, ref: Container | str | None) -> Container:
        """Resolve a container instance, a name, or a ``#name`` selector."""
        if isinstance(ref, Container):
            if not ref.attached:
                raise ContainerNotFound(f"Container '{ref.name}' is not attached")
            return ref
        if isinstance(ref, str):
            name = ref[1:] if ref.startswith("#") else ref
            container = self._containers.get(name)
            if container is not None:
                return container
        raise ContainerNotFound(f"Container {ref!r} not found")
