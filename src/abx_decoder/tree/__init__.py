"""Tree building and rendering for ABX documents.

Key Components:
    AbxTreeBuilder: Token-driven state machine producing the element tree
    DecoderState: Explicit states of the builder
    AbxDocument: Decoded document with root element and statistics
    AbxElement: Element with tag, attributes, text and ordered children
    MarkupRenderer: Indented markup serializer
"""

from .builder import AbxTreeBuilder, DecoderState
from .model import AbxDocument, AbxElement
from .renderer import MarkupRenderer

__all__ = [
    "AbxDocument",
    "AbxElement",
    "AbxTreeBuilder",
    "DecoderState",
    "MarkupRenderer",
]
