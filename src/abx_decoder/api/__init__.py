"""Public decoding API.

Key Components:
    decode, decode_bytes, decode_file: One-call decoding into a DecodeResult
    to_xml: Decode and render in one step
    AbxDecoder: Reusable configured decoder
    get_adapter: Export decoded trees to ElementTree or lxml
"""

from .adapters import (
    AdapterMetadata,
    AdapterRegistry,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
    register_adapter,
)
from .decoder import (
    AbxDecoder,
    DecodeResult,
    decode,
    decode_bytes,
    decode_file,
    to_xml,
)

__all__ = [
    "AbxDecoder",
    "DecodeResult",
    "decode",
    "decode_bytes",
    "decode_file",
    "to_xml",
    "AdapterMetadata",
    "AdapterRegistry",
    "ConversionResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "get_adapter",
    "list_available_adapters",
    "register_adapter",
]
