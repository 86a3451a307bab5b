"""Append-only string intern table used for tag and attribute names."""

from typing import Iterator, List, Optional

from abx_decoder.binary.reader import ByteReader
from abx_decoder.shared.errors import InvalidInternReference

DEFINE_INLINE = -1


class StringInternTable:
    """Strings indexed by the order in which the stream defined them."""

    def __init__(self) -> None:
        self._strings: List[str] = []

    def __len__(self) -> int:
        return len(self._strings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def __getitem__(self, index: int) -> str:
        return self.resolve(index)

    def define(self, value: str) -> int:
        """Append a string and return its index."""
        self._strings.append(value)
        return len(self._strings) - 1

    def resolve(self, index: int, offset: Optional[int] = None) -> str:
        """Return the string defined at ``index``."""
        if not 0 <= index < len(self._strings):
            raise InvalidInternReference(
                f"Interned string reference {index} is not defined "
                f"({len(self._strings)} strings known)",
                offset=offset,
                details={"reference": index, "defined": len(self._strings)},
            )
        return self._strings[index]

    def resolve_or_define(self, reader: ByteReader) -> str:
        """Read a reference and either resolve it or read an inline definition.

        A reference of -1 means the string follows as a text run and becomes the
        next entry; any other value must index an existing entry.
        """
        offset = reader.offset
        reference = reader.read_short()
        if reference == DEFINE_INLINE:
            value = reader.read_text_run()
            self.define(value)
            return value
        return self.resolve(reference, offset)
