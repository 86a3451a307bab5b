"""ABX Decoder.

Decodes Android Binary XML (ABX) streams into an element tree and renders them
as indented, human-readable markup.

Progressive API Disclosure:
- Level 1: Simple functions - decode(), decode_bytes(), decode_file(), to_xml()
- Level 2: Configured decoder - AbxDecoder class
- Level 3: Building blocks - AbxTreeBuilder, MarkupRenderer, ByteReader
"""

__version__ = "0.1.0"
__author__ = "ABX Decoder Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured decoder
from .api import AbxDecoder, DecodeResult, decode, decode_bytes, decode_file, to_xml

# Configuration and error types
from .shared import (
    AbxDecodeError,
    ConverterConfig,
    DecoderConfig,
    ErrorKind,
    RenderConfig,
)

# Core result objects and building blocks
from .binary import ByteReader
from .tree import AbxDocument, AbxElement, AbxTreeBuilder, MarkupRenderer

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple decoding functions
    "decode",
    "decode_bytes",
    "decode_file",
    "to_xml",

    # Level 2: Configured decoder
    "AbxDecoder",

    # Result objects and data structures
    "DecodeResult",
    "AbxDocument",
    "AbxElement",

    # Building blocks
    "AbxTreeBuilder",
    "MarkupRenderer",
    "ByteReader",

    # Configuration and errors
    "ConverterConfig",
    "DecoderConfig",
    "RenderConfig",
    "AbxDecodeError",
    "ErrorKind",
]
