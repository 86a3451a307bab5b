"""Element tree produced by the ABX decoder.

Each element is owned by exactly one parent (or by the caller, for the root).
Elements keep no back-reference to their parent, so the object graph is the
same strict tree as the document.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass(eq=False)
class AbxElement:
    """A single element with its attributes, text and ordered children."""

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    children: List["AbxElement"] = field(default_factory=list)
    _attached: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        """Take ownership of initial children."""
        initial = self.children
        self.children = []
        for child in initial:
            self.add_child(child)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "tag" and "tag" in self.__dict__:
            raise AttributeError("Element tag cannot be changed after creation")
        super().__setattr__(name, value)

    @property
    def is_empty(self) -> bool:
        """True when the element has neither text nor children."""
        return not self.text and not self.children

    def add_child(self, child: "AbxElement") -> None:
        """Append a child element, taking ownership of it.

        Raises:
            TypeError: If ``child`` is not an AbxElement
            ValueError: If ``child`` already has a parent or would create a cycle
        """
        if not isinstance(child, AbxElement):
            raise TypeError("Child must be an AbxElement instance")
        if child._attached:
            raise ValueError(f"Element <{child.tag}> already belongs to a parent")
        if child is self or (
            child.children and any(node is self for node in child.iter())
        ):
            raise ValueError("Adding this child would make the tree cyclic")

        child._attached = True
        self.children.append(child)

    def append_text(self, text: str) -> None:
        """Concatenate text content without a separator."""
        self.text += text

    def iter(self) -> Iterator["AbxElement"]:
        """Iterate over this element and all descendants in document order."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def iter_with_depth(self, depth: int = 0) -> Iterator[Tuple["AbxElement", int]]:
        """Like ``iter`` but also yields each element's depth below this one."""
        stack = [(self, depth)]
        while stack:
            element, level = stack.pop()
            yield element, level
            stack.extend((child, level + 1) for child in reversed(element.children))

    def find_child(self, tag: str) -> Optional["AbxElement"]:
        """Find first direct child with matching tag name."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def find_children(self, tag: str) -> List["AbxElement"]:
        """Find all direct children with matching tag name."""
        return [child for child in self.children if child.tag == tag]

    def find(self, tag: str) -> Optional["AbxElement"]:
        """Find first descendant (excluding self) with matching tag name."""
        return next((el for el in self.iter() if el is not self and el.tag == tag), None)

    def find_all(self, tag: str) -> List["AbxElement"]:
        """Find all descendants (excluding self) with matching tag name."""
        return [el for el in self.iter() if el is not self and el.tag == tag]

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        """Set attribute value; an existing value is replaced."""
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        self.attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        """Check if element has specific attribute."""
        return name in self.attributes

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "tag": self.tag,
            "attributes": dict(self.attributes),
        }
        if self.text:
            result["text"] = self.text
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class AbxDocument:
    """Decoded document: the root element plus decode metadata."""

    root: AbxElement
    multi_root: bool = False
    interned_strings: int = 0

    total_elements: int = field(default=0, init=False)
    total_attributes: int = field(default=0, init=False)
    max_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Calculate document statistics."""
        depth = 0
        for element, level in self.root.iter_with_depth():
            self.total_elements += 1
            self.total_attributes += len(element.attributes)
            depth = max(depth, level)
        self.max_depth = depth

    @property
    def top_level_elements(self) -> List[AbxElement]:
        """Elements that appeared at the top of the stream.

        In multi-root mode these are the wrapper's children; otherwise the root.
        """
        if self.multi_root:
            return list(self.root.children)
        return [self.root]

    def iter_elements(self) -> Iterator[AbxElement]:
        """Iterate over all elements in document order."""
        return self.root.iter()

    def find(self, tag: str) -> Optional[AbxElement]:
        """Find first element (root included) with matching tag name."""
        return next((el for el in self.root.iter() if el.tag == tag), None)

    def find_all(self, tag: str) -> List[AbxElement]:
        """Find all elements (root included) with matching tag name."""
        return [el for el in self.root.iter() if el.tag == tag]

    def find_by_attribute(self, name: str, value: Optional[str] = None) -> List[AbxElement]:
        """Find elements by attribute name and optionally value."""
        return [
            el for el in self.root.iter()
            if name in el.attributes and (value is None or el.attributes[name] == value)
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary representation."""
        return {
            "multi_root": self.multi_root,
            "interned_strings": self.interned_strings,
            "total_elements": self.total_elements,
            "total_attributes": self.total_attributes,
            "max_depth": self.max_depth,
            "root": self.root.to_dict(),
        }
