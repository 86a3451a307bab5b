"""Tests for magic validation and header extension skipping."""

import pytest

from abx_decoder.binary import ByteReader
from abx_decoder.shared import InvalidMagic, MalformedHeaderExtension
from abx_decoder.tokenization import MAGIC, HeaderExtensionSkipper

START_DOCUMENT_TOKEN = b"\x10"


def _skipper(data: bytes) -> HeaderExtensionSkipper:
    return HeaderExtensionSkipper(ByteReader(data))


class TestReadMagic:
    """Test the 4-byte preamble."""

    def test_valid_magic(self) -> None:
        """Test a correct preamble is consumed."""
        skipper = _skipper(MAGIC)
        skipper.read_magic()
        assert skipper.reader.offset == 4

    def test_wrong_magic(self) -> None:
        """Test a wrong preamble raises InvalidMagic at offset 0."""
        with pytest.raises(InvalidMagic, match="Invalid magic") as exc_info:
            _skipper(b"<?xm").read_magic()
        assert exc_info.value.offset == 0
        assert exc_info.value.details["found"] == "3c3f786d"

    def test_short_input(self) -> None:
        """Test input shorter than the preamble is a magic failure."""
        with pytest.raises(InvalidMagic, match="too short"):
            _skipper(b"AB").read_magic()


class TestSkipExtensions:
    """Test records between the magic and start-of-document."""

    def test_no_extensions(self) -> None:
        """Test the start-of-document token is left unread."""
        skipper = _skipper(START_DOCUMENT_TOKEN)
        assert skipper.skip() == 0
        assert skipper.reader.offset == 0
        assert skipper.reader.read_byte() == 0x10

    def test_fixed_width_records(self) -> None:
        """Test INT and LONG records skip their fixed payloads."""
        data = b"\x61" + bytes(4) + b"\x81" + bytes(8) + START_DOCUMENT_TOKEN
        skipper = _skipper(data)
        assert skipper.skip() == 2
        assert skipper.reader.offset == 14

    def test_run_records(self) -> None:
        """Test string and byte records skip a length-prefixed run."""
        data = b"\x21\x00\x02hi" + b"\x41\x00\x01\xff" + START_DOCUMENT_TOKEN
        skipper = _skipper(data)
        assert skipper.skip() == 2
        assert skipper.reader.read_byte() == 0x10

    def test_unassigned_type_uses_low_nibble_width(self) -> None:
        """Test unassigned types skip as many bytes as the low nibble."""
        data = b"\xe3" + b"abc" + START_DOCUMENT_TOKEN
        skipper = _skipper(data)
        assert skipper.skip() == 1
        assert skipper.reader.offset == 4

    def test_truncated_record(self) -> None:
        """Test a record running past the end is malformed."""
        with pytest.raises(MalformedHeaderExtension) as exc_info:
            _skipper(b"\x21\x00\x10ab").skip()
        assert exc_info.value.offset == 0

    def test_missing_start_document(self) -> None:
        """Test input ending inside the header is malformed."""
        with pytest.raises(MalformedHeaderExtension) as exc_info:
            _skipper(b"\x11").skip()
        assert exc_info.value.details == {"records_skipped": 1}
