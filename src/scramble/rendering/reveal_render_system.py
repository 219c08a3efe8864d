from __future__ import annotations

import arcade

from scramble.constants import FONT_SIZE, TEXT_MARGIN
from scramble.markup.document import Document


class RevealRenderSystem:
    """Draws the current text of each named container, one block per row."""

    def __init__(self, document: Document, window, container_names: list[str]) -> None:
        self.document = document
        self.window = window
        self.container_names = list(container_names)
        self._texts: dict[str, arcade.Text] = {}

    def process(self) -> None:
        top = self.window.height - TEXT_MARGIN
        width = self.window.width - TEXT_MARGIN * 2
        for name in self.container_names:
            if not self.document.has(name):
                continue
            content = self.document.resolve(name).text_content()
            text = self._texts.get(name)
            if text is None:
                text = arcade.Text(
                    content,
                    TEXT_MARGIN,
                    top,
                    arcade.color.ANTIQUE_WHITE,
                    font_size=FONT_SIZE,
                    font_name=("Courier New", "Courier", "monospace"),
                    width=width,
                    multiline=True,
                    anchor_x="left",
                    anchor_y="top",
                )
                self._texts[name] = text
            else:
                text.text = content
                text.y = top
            text.draw()
            top -= text.content_height + TEXT_MARGIN
