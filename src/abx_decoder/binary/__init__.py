"""Binary primitives for ABX decoding.

Key Components:
    ByteReader: Big-endian reader with one byte of pushback
    StringInternTable: Append-only table behind interned tag and attribute names
"""

from .interning import DEFINE_INLINE, StringInternTable
from .reader import ByteReader, ByteSource

__all__ = [
    "DEFINE_INLINE",
    "ByteReader",
    "ByteSource",
    "StringInternTable",
]
