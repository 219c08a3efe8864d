"""Tagged-variant markup tree and the HTML-like parser that builds it.

The tree only knows two node kinds: ``Text`` leaves carrying literal
characters and ``Element`` nodes carrying a tag, attributes and children.
Everything that walks a tree matches on those two variants.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from html import escape
from html.parser import HTMLParser
from typing import Iterable, Iterator, List, Tuple

from scramble.errors import MarkupParseError

Attribute = Tuple[str, "str | None"]

# Elements that never carry children or a closing tag.
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})


@dataclass(slots=True)
class Text:
    """Leaf node; ``content`` is overwritten in place while animating."""
    content: str


@dataclass(slots=True)
class Element:
    tag: str
    attrs: tuple[Attribute, ...] = ()
    children: list[Node] = field(default_factory=list)


Node = Text | Element


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.roots: List[Node] = []
        self._stack: List[Element] = []

    def _append(self, node: Node) -> None:
        siblings = self._stack[-1].children if self._stack else self.roots
        siblings.append(node)

    def handle_starttag(self, tag, attrs):
        element = Element(tag=tag, attrs=tuple(attrs))
        self._append(element)
        if tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag, attrs):
        self._append(Element(tag=tag, attrs=tuple(attrs)))

    def handle_endtag(self, tag):
        if tag in VOID_ELEMENTS:
            return
        if not self._stack:
            raise MarkupParseError(f"Closing tag </{tag}> has no matching opening tag")
        open_tag = self._stack[-1].tag
        if open_tag != tag:
            raise MarkupParseError(f"Closing tag </{tag}> does not match open <{open_tag}>")
        self._stack.pop()

    def handle_data(self, data):
        if not data:
            return
        siblings = self._stack[-1].children if self._stack else self.roots
        # Adjacent chunks belong to one text node.
        if siblings and isinstance(siblings[-1], Text):
            siblings[-1].content += data
        else:
            siblings.append(Text(data))

    def finish(self) -> List[Node]:
        self.close()
        if self._stack:
            unclosed = ", ".join(f"<{el.tag}>" for el in self._stack)
            raise MarkupParseError(f"Unclosed tags: {unclosed}")
        return self.roots


def parse(markup: str) -> List[Node]:
    """Parse ``markup`` into a list of top-level nodes.

    Comments and doctype declarations are dropped; character references are
    decoded into the text they stand for. Raises ``MarkupParseError`` for
    unbalanced tags rather than repairing them.
    """
    if not isinstance(markup, str):
        raise MarkupParseError(f"Markup must be a string, got {type(markup).__name__}")
    builder = _TreeBuilder()
    builder.feed(markup)
    return builder.finish()


def clone(nodes: Iterable[Node]) -> List[Node]:
    copies: List[Node] = []
    for node in nodes:
        match node:
            case Text(content=content):
                copies.append(Text(content))
            case Element(tag=tag, attrs=attrs, children=children):
                copies.append(Element(tag=tag, attrs=attrs, children=clone(children)))
    return copies


def iter_text_nodes(nodes: Iterable[Node]) -> Iterator[Text]:
    """Yield every text leaf in depth-first, pre-order document order."""
    for node in nodes:
        match node:
            case Text():
                yield node
            case Element(children=children):
                yield from iter_text_nodes(children)


def render_text(nodes: Iterable[Node]) -> str:
    return "".join(node.content for node in iter_text_nodes(nodes))


def to_markup(nodes: Iterable[Node]) -> str:
    parts: List[str] = []
    for node in nodes:
        match node:
            case Text(content=content):
                parts.append(escape(content, quote=False))
            case Element(tag=tag, attrs=attrs, children=children):
                rendered_attrs = "".join(
                    f" {name}" if value is None else f' {name}="{escape(value)}"'
                    for name, value in attrs
                )
                if tag in VOID_ELEMENTS:
                    parts.append(f"<{tag}{rendered_attrs}>")
                else:
                    parts.append(f"<{tag}{rendered_attrs}>{to_markup(children)}</{tag}>")
    return "".join(parts)


def structure(nodes: Iterable[Node]) -> tuple:
    """Shape of a tree with text content erased.

    Two trees are positionally isomorphic exactly when their shapes compare
    equal.
    """
    shape = []
    for node in nodes:
        match node:
            case Text():
                shape.append("#text")
            case Element(tag=tag, attrs=attrs, children=children):
                shape.append((tag, attrs, structure(children)))
    return tuple(shape)
