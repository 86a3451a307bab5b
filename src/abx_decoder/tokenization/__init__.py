"""Token layer for ABX decoding.

Key Components:
    TokenKind: Structural token kinds carried in the low nibble
    ValueType: Value encodings carried in the high nibble
    Token: A token byte together with its stream offset
    ValueDecoder: Turns typed payloads into attribute text
    HeaderExtensionSkipper: Magic check and vendor record skipping
"""

from .header import MAGIC, HeaderExtensionSkipper
from .tokens import KIND_MASK, TYPE_MASK, Token, TokenKind, ValueType
from .values import ValueDecoder

__all__ = [
    "KIND_MASK",
    "MAGIC",
    "TYPE_MASK",
    "HeaderExtensionSkipper",
    "Token",
    "TokenKind",
    "ValueDecoder",
    "ValueType",
]
