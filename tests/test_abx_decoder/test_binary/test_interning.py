"""Tests for the string intern table."""

import pytest

from abx_decoder.binary import DEFINE_INLINE, ByteReader, StringInternTable
from abx_decoder.shared import InvalidInternReference


def _inline(value: str) -> bytes:
    data = value.encode("utf-8")
    return b"\xff\xff" + len(data).to_bytes(2, "big") + data


class TestStringInternTable:
    """Test define and resolve."""

    def test_define_assigns_sequential_indices(self) -> None:
        """Test indices start at 0 and increase by one."""
        table = StringInternTable()
        assert [table.define(name) for name in ("a", "b", "c")] == [0, 1, 2]
        assert len(table) == 3
        assert list(table) == ["a", "b", "c"]

    def test_resolve_defined_index(self) -> None:
        """Test resolving an existing entry."""
        table = StringInternTable()
        table.define("tag")
        assert table.resolve(0) == "tag"
        assert table[0] == "tag"

    def test_resolve_undefined_index_raises(self) -> None:
        """Test out-of-range references raise InvalidInternReference."""
        table = StringInternTable()
        table.define("only")
        with pytest.raises(InvalidInternReference) as exc_info:
            table.resolve(1, offset=9)
        assert exc_info.value.offset == 9
        assert exc_info.value.details == {"reference": 1, "defined": 1}

    def test_negative_index_other_than_inline_raises(self) -> None:
        """Test negative references never index from the end."""
        table = StringInternTable()
        table.define("x")
        with pytest.raises(InvalidInternReference):
            table.resolve(-2)

    def test_duplicates_get_new_indices(self) -> None:
        """Test defining the same string twice appends a second entry."""
        table = StringInternTable()
        assert table.define("a") == 0
        assert table.define("a") == 1


class TestResolveOrDefine:
    """Test reading references from a byte stream."""

    def test_inline_definition(self) -> None:
        """Test a -1 reference reads and defines the string."""
        table = StringInternTable()
        reader = ByteReader(_inline("package"))
        assert table.resolve_or_define(reader) == "package"
        assert list(table) == ["package"]
        assert DEFINE_INLINE == -1

    def test_reference_reuses_entry_without_reading_text(self) -> None:
        """Test a non-negative reference consumes only the 2-byte index."""
        table = StringInternTable()
        reader = ByteReader(_inline("a") + b"\x00\x00")
        table.resolve_or_define(reader)
        before = reader.offset
        assert table.resolve_or_define(reader) == "a"
        assert reader.offset == before + 2
        assert len(table) == 1

    def test_indices_follow_definition_order(self) -> None:
        """Test interleaved definitions and references stay deterministic."""
        table = StringInternTable()
        reader = ByteReader(
            _inline("a") + _inline("b") + b"\x00\x01" + _inline("c") + b"\x00\x00"
        )
        values = [table.resolve_or_define(reader) for _ in range(5)]
        assert values == ["a", "b", "b", "c", "a"]
        assert list(table) == ["a", "b", "c"]

    def test_undefined_reference_reports_offset(self) -> None:
        """Test the error offset points at the reference itself."""
        table = StringInternTable()
        reader = ByteReader(b"\x00\x00\x00\x03")
        reader.read_short()
        with pytest.raises(InvalidInternReference) as exc_info:
            table.resolve_or_define(reader)
        assert exc_info.value.offset == 2
