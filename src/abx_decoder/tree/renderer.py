"""Indented markup rendering of a decoded element tree.

By default text and attribute values are written exactly as decoded, without
escaping reserved characters, which is what existing ``abx2xml`` converters
print. Such output can be malformed XML; set ``RenderConfig.escape_markup`` to
get escaped, well-formed output instead.
"""

import io
from typing import List, Optional, TextIO, Tuple, Union
from xml.sax.saxutils import escape

from abx_decoder.shared import RenderConfig
from abx_decoder.tree.model import AbxDocument, AbxElement

_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


class MarkupRenderer:
    """Depth-first, pre-order serializer for ``AbxElement`` trees."""

    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        self.config = config or RenderConfig()

    def _text(self, value: str) -> str:
        return escape(value) if self.config.escape_markup else value

    def _attribute(self, value: str) -> str:
        if self.config.escape_markup:
            return escape(value, _ATTRIBUTE_ENTITIES)
        return value

    def _open_tag(self, element: AbxElement) -> str:
        parts = [f"<{element.tag}"]
        for name, value in element.attributes.items():
            parts.append(f' {name}="{self._attribute(value)}"')
        return "".join(parts)

    def render_to(self, tree: Union[AbxDocument, AbxElement], stream: TextIO) -> None:
        """Write the rendered tree to a text stream.

        Args:
            tree: Decoded document or any element to render as the root
            stream: Destination with a ``write`` method
        """
        root = tree.root if isinstance(tree, AbxDocument) else tree
        newline = self.config.newline
        unit = " " * self.config.indent

        if self.config.include_declaration:
            stream.write(self.config.declaration + newline)

        # (element, depth, closing) entries; closing entries emit the end tag
        pending: List[Tuple[AbxElement, int, bool]] = [(root, 0, False)]
        while pending:
            element, depth, closing = pending.pop()
            indentation = unit * depth

            if closing:
                stream.write(f"{indentation}</{element.tag}>{newline}")
                continue

            stream.write(indentation + self._open_tag(element))
            if element.is_empty:
                stream.write("/>" + newline)
                continue

            stream.write(">")
            if element.text:
                stream.write(self._text(element.text))
            if not element.children:
                stream.write(f"</{element.tag}>{newline}")
                continue

            stream.write(newline)
            pending.append((element, depth, True))
            pending.extend(
                (child, depth + 1, False) for child in reversed(element.children)
            )

    def render(self, tree: Union[AbxDocument, AbxElement]) -> str:
        """Render the tree and return it as a string."""
        buffer = io.StringIO()
        self.render_to(tree, buffer)
        return buffer.getvalue()
