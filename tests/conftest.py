"""Shared fixtures for ABX decoder tests.

``AbxStreamWriter`` assembles ABX byte streams token by token so tests can state
their input the way a writer would produce it.
"""

import struct
from typing import Callable, Dict, Union

import pytest

MAGIC = b"ABX\x00"

START_DOCUMENT = 0
END_DOCUMENT = 1
START_TAG = 2
END_TAG = 3
TEXT = 4
ATTRIBUTE = 15

TYPE_NULL = 0x10
TYPE_STRING = 0x20
TYPE_STRING_INTERNED = 0x30
TYPE_BYTES_HEX = 0x40
TYPE_BYTES_BASE64 = 0x50
TYPE_INT = 0x60
TYPE_INT_HEX = 0x70
TYPE_LONG = 0x80
TYPE_LONG_HEX = 0x90
TYPE_FLOAT = 0xA0
TYPE_DOUBLE = 0xB0
TYPE_BOOLEAN_TRUE = 0xC0
TYPE_BOOLEAN_FALSE = 0xD0


class AbxStreamWriter:
    """Minimal ABX writer for building decoder input in tests.

    Names passed to tag and attribute methods are interned the way the platform
    writer does it: defined inline on first use, referenced by index afterwards.
    All methods return the writer so calls can be chained.
    """

    def __init__(self, magic: bytes = MAGIC) -> None:
        self._buffer = bytearray(magic)
        self._interned: Dict[str, int] = {}

    def raw(self, data: Union[bytes, int]) -> "AbxStreamWriter":
        """Append raw bytes (or a single byte value) verbatim."""
        if isinstance(data, int):
            data = bytes([data])
        self._buffer += data
        return self

    def short(self, value: int) -> "AbxStreamWriter":
        return self.raw(struct.pack(">h", value))

    def run(self, data: Union[str, bytes]) -> "AbxStreamWriter":
        """Append a u16 length-prefixed run."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        return self.raw(struct.pack(">H", len(data)) + data)

    def interned(self, name: str) -> "AbxStreamWriter":
        if name in self._interned:
            return self.short(self._interned[name])
        self._interned[name] = len(self._interned)
        return self.short(-1).run(name)

    def start_document(self) -> "AbxStreamWriter":
        return self.raw(START_DOCUMENT | TYPE_NULL)

    def end_document(self) -> "AbxStreamWriter":
        return self.raw(END_DOCUMENT | TYPE_NULL)

    def start_tag(self, name: str) -> "AbxStreamWriter":
        return self.raw(START_TAG | TYPE_STRING_INTERNED).interned(name)

    def end_tag(self, name: str) -> "AbxStreamWriter":
        return self.raw(END_TAG | TYPE_STRING_INTERNED).interned(name)

    def text(self, value: Union[str, bytes]) -> "AbxStreamWriter":
        return self.raw(TEXT | TYPE_STRING).run(value)

    def attribute(self, name: str, value_type: int, payload: bytes = b"") -> "AbxStreamWriter":
        """Append an attribute with an already encoded payload."""
        return self.raw(ATTRIBUTE | value_type).interned(name).raw(payload)

    def attr_string(self, name: str, value: str) -> "AbxStreamWriter":
        return self.raw(ATTRIBUTE | TYPE_STRING).interned(name).run(value)

    def attr_interned(self, name: str, value: str) -> "AbxStreamWriter":
        return self.raw(ATTRIBUTE | TYPE_STRING_INTERNED).interned(name).interned(value)

    def attr_int(self, name: str, value: int, hex_form: bool = False) -> "AbxStreamWriter":
        value_type = TYPE_INT_HEX if hex_form else TYPE_INT
        return self.attribute(name, value_type, struct.pack(">i", value))

    def attr_long(self, name: str, value: int, hex_form: bool = False) -> "AbxStreamWriter":
        value_type = TYPE_LONG_HEX if hex_form else TYPE_LONG
        return self.attribute(name, value_type, struct.pack(">q", value))

    def attr_float(self, name: str, value: float) -> "AbxStreamWriter":
        return self.attribute(name, TYPE_FLOAT, struct.pack(">f", value))

    def attr_double(self, name: str, value: float) -> "AbxStreamWriter":
        return self.attribute(name, TYPE_DOUBLE, struct.pack(">d", value))

    def attr_bool(self, name: str, value: bool) -> "AbxStreamWriter":
        return self.attribute(name, TYPE_BOOLEAN_TRUE if value else TYPE_BOOLEAN_FALSE)

    def attr_null(self, name: str) -> "AbxStreamWriter":
        return self.attribute(name, TYPE_NULL)

    def attr_bytes(self, name: str, value: bytes, base64_form: bool = False) -> "AbxStreamWriter":
        value_type = TYPE_BYTES_BASE64 if base64_form else TYPE_BYTES_HEX
        return self.raw(ATTRIBUTE | value_type).interned(name).run(value)

    def element(self, name: str, text: str = "") -> "AbxStreamWriter":
        """Append a complete leaf element."""
        self.start_tag(name)
        if text:
            self.text(text)
        return self.end_tag(name)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


@pytest.fixture
def abx_writer() -> AbxStreamWriter:
    """Fresh writer with the magic already written."""
    return AbxStreamWriter()


@pytest.fixture
def abx_writer_factory() -> Callable[..., AbxStreamWriter]:
    """Factory for tests that need several independent streams."""
    return AbxStreamWriter


@pytest.fixture
def simple_document() -> bytes:
    """<a x="5"/> as a complete ABX stream."""
    return (
        AbxStreamWriter()
        .start_document()
        .start_tag("a")
        .attr_int("x", 5)
        .end_tag("a")
        .end_document()
        .to_bytes()
    )


@pytest.fixture
def nested_document() -> bytes:
    """A small settings-style document with text, nesting and mixed attributes."""
    return (
        AbxStreamWriter()
        .start_document()
        .start_tag("settings")
        .attr_int("version", 3)
        .text("\n  ")
        .start_tag("setting")
        .attr_string("name", "volume")
        .attr_bool("enabled", True)
        .text("11")
        .end_tag("setting")
        .start_tag("setting")
        .attr_string("name", "theme")
        .attr_bool("enabled", False)
        .end_tag("setting")
        .text("\n")
        .end_tag("settings")
        .end_document()
        .to_bytes()
    )


@pytest.fixture
def multi_root_document() -> bytes:
    """Two top-level siblings and no outer element."""
    return (
        AbxStreamWriter()
        .start_document()
        .element("first", "one")
        .element("second")
        .end_document()
        .to_bytes()
    )
