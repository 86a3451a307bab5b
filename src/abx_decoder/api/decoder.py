"""Decoding API with progressive disclosure.

Level 1 is the module-level functions (``decode``, ``decode_bytes``,
``decode_file``, ``to_xml``); level 2 is the reusable ``AbxDecoder`` class.
Decoding functions never raise for bad input: failures come back as a
``DecodeResult`` whose ``error`` holds the typed ``AbxDecodeError``.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, TextIO, Union

from abx_decoder.shared import (
    AbxDecodeError,
    ConverterConfig,
    DecodeMetrics,
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    SourceReadError,
    get_logger,
)
from abx_decoder.tree import AbxDocument, AbxTreeBuilder, MarkupRenderer

# Type definitions for input data
InputType = Union[bytes, bytearray, memoryview, str, Path, BinaryIO]

MS_PER_SECOND = 1000  # Milliseconds per second conversion


@dataclass
class DecodeResult:
    """Outcome of a single decode.

    Exactly one of ``document`` and ``error`` is set: a failed decode never
    exposes a partial tree.
    """

    document: Optional[AbxDocument] = None
    error: Optional[AbxDecodeError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: DecodeMetrics = field(default_factory=DecodeMetrics)
    source_name: Optional[str] = None
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate that the outcome is unambiguous."""
        if (self.document is None) == (self.error is None):
            raise ValueError("DecodeResult needs exactly one of document or error")

    @property
    def success(self) -> bool:
        """True when the document decoded completely."""
        return self.error is None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        """Failure category, or None on success."""
        return self.error.kind if self.error is not None else None

    @property
    def element_count(self) -> int:
        """Get total number of elements in the decoded document."""
        return self.document.total_elements if self.document else 0

    @property
    def processing_time_ms(self) -> float:
        """Get processing time in milliseconds."""
        return self.metrics.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        offset: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                offset=offset,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def unwrap(self) -> AbxDocument:
        """Return the document or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.document

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "success": self.success,
            "source": self.source_name,
            "error": self.error.to_dict() if self.error is not None else None,
            "document": self.document.to_dict() if self.document else None,
            "diagnostics": [entry.to_dict() for entry in self.diagnostics],
            "metrics": self.metrics.to_dict(),
            "correlation_id": self.correlation_id,
        }


def _describe_source(source: Any) -> Optional[str]:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", None) if hasattr(source, "read") else None


def _run_builder(
    builder: AbxTreeBuilder,
    source: Any,
    source_name: Optional[str],
    correlation_id: Optional[str],
) -> DecodeResult:
    """Run one build and package the outcome, logging only the final result."""
    logger = get_logger(__name__, correlation_id, "decode")
    start_time = time.time()

    document: Optional[AbxDocument] = None
    error: Optional[AbxDecodeError] = None
    try:
        document = builder.build(source)
    except AbxDecodeError as e:
        error = e
    except OSError as e:
        error = SourceReadError(
            f"Failed to read {source_name or 'input'}: {e.strerror or e}",
            details={"errno": e.errno},
        )

    metrics = builder.metrics
    metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
    result = DecodeResult(
        document=document,
        error=error,
        metrics=metrics,
        source_name=source_name,
        correlation_id=correlation_id,
    )

    if error is None:
        logger.info(
            "Decode completed",
            extra={
                "source": source_name,
                "elements": document.total_elements,
                "bytes_consumed": metrics.bytes_consumed,
                "processing_time_ms": metrics.processing_time_ms,
            },
        )
    else:
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            str(error),
            "decoder",
            offset=error.offset,
            details=error.to_dict(),
        )
        logger.error(
            "Decode failed",
            extra={
                "source": source_name,
                "error": type(error).__name__,
                "error_kind": error.kind.name,
                "offset": error.offset,
            },
        )
    return result


def _create_error_result(
    error: AbxDecodeError,
    source_name: Optional[str],
    correlation_id: Optional[str],
    processing_time: float = 0.0,
) -> DecodeResult:
    """Create error result for failures that happen before decoding starts."""
    get_logger(__name__, correlation_id, "decode").error(
        "Decode failed",
        extra={
            "source": source_name,
            "error": type(error).__name__,
            "error_kind": error.kind.name,
        },
    )
    result = DecodeResult(
        error=error,
        metrics=DecodeMetrics(processing_time_ms=processing_time),
        source_name=source_name,
        correlation_id=correlation_id,
    )
    result.add_diagnostic(DiagnosticSeverity.ERROR, str(error), "decoder")
    return result


def decode(
    source: InputType,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> DecodeResult:
    """Decode an ABX document from bytes, a path or a binary stream.

    Strings are treated as file paths, since ABX is a binary format.

    Args:
        source: Raw bytes, a ``Path`` or path string, or a binary file object
        config: Converter configuration (defaults to single-root UTF-8)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        DecodeResult with the document on success or the typed error on failure

    Examples:
        >>> result = decode(Path("settings.abx"))
        >>> result.success
        True
        >>> result.document.root.tag
        'settings'
    """
    if isinstance(source, (str, Path)):
        return decode_file(source, config, correlation_id)
    if isinstance(source, (bytes, bytearray, memoryview)):
        return decode_bytes(source, config, correlation_id)

    config = config or ConverterConfig.default()
    builder = AbxTreeBuilder(config.decoder, correlation_id)
    return _run_builder(builder, source, _describe_source(source), correlation_id)


def decode_bytes(
    data: Union[bytes, bytearray, memoryview],
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> DecodeResult:
    """Decode an ABX document held in memory.

    Args:
        data: Complete ABX byte content
        config: Converter configuration (defaults to single-root UTF-8)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        DecodeResult for the decoded content
    """
    config = config or ConverterConfig.default()
    builder = AbxTreeBuilder(config.decoder, correlation_id)
    return _run_builder(builder, bytes(data), None, correlation_id)


def decode_file(
    file_path: Union[str, Path],
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> DecodeResult:
    """Decode an ABX file.

    The file is read incrementally and closed on every exit path. A path that
    cannot be opened yields a failed result with ``ErrorKind.SOURCE_UNAVAILABLE``.

    Args:
        file_path: Path to the ABX file (string or Path object)
        config: Converter configuration (defaults to single-root UTF-8)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        DecodeResult for the file content

    Examples:
        >>> result = decode_file("missing.abx")
        >>> result.success
        False
        >>> result.error_kind
        <ErrorKind.SOURCE_UNAVAILABLE: 5>
    """
    path_obj = Path(file_path)
    config = config or ConverterConfig.default()
    builder = AbxTreeBuilder(config.decoder, correlation_id)

    try:
        with path_obj.open("rb") as stream:
            return _run_builder(builder, stream, str(path_obj), correlation_id)
    except OSError as e:
        reason = e.strerror or str(e)
        return _create_error_result(
            SourceReadError(
                f"Cannot open {path_obj}: {reason}", details={"errno": e.errno}
            ),
            str(path_obj),
            correlation_id,
        )


def to_xml(
    source: InputType,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> str:
    """Decode a source and render it as markup text.

    Raises:
        AbxDecodeError: If decoding fails
    """
    return AbxDecoder(config, correlation_id).to_xml(source)


class AbxDecoder:
    """Reusable decoder bound to one configuration.

    Keeps usage statistics across calls. Instances are not meant to be shared
    between threads; each ``decode`` call has its own decoding state.

    Examples:
        >>> decoder = AbxDecoder(ConverterConfig.multi_root())
        >>> document = decoder.decode_or_raise(data)
        >>> print(decoder.render(document))
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize decoder with configuration.

        Args:
            config: Converter configuration (defaults to ``ConverterConfig.default()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ConverterConfig.default()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "abx_decoder")
        self._renderer = MarkupRenderer(self.config.render)

        self._decode_count = 0
        self._successful_decodes = 0
        self._total_processing_time = 0.0

    def decode(
        self, source: InputType, correlation_id: Optional[str] = None
    ) -> DecodeResult:
        """Decode a source with this decoder's configuration.

        Args:
            source: Raw bytes, a ``Path`` or path string, or a binary file object
            correlation_id: Optional override for this call

        Returns:
            DecodeResult for the source
        """
        result = decode(source, self.config, correlation_id or self.correlation_id)
        self._decode_count += 1
        self._total_processing_time += result.processing_time_ms
        if result.success:
            self._successful_decodes += 1
        return result

    def decode_or_raise(self, source: InputType) -> AbxDocument:
        """Decode a source and return the document.

        Raises:
            AbxDecodeError: The typed failure of the decode
        """
        return self.decode(source).unwrap()

    def render(self, tree: AbxDocument) -> str:
        """Render a decoded document with this decoder's render settings."""
        return self._renderer.render(tree)

    def render_to(self, tree: AbxDocument, stream: TextIO) -> None:
        """Write a decoded document to a text stream."""
        self._renderer.render_to(tree, stream)

    def to_xml(self, source: InputType) -> str:
        """Decode a source and return its markup.

        Raises:
            AbxDecodeError: If decoding fails
        """
        return self.render(self.decode_or_raise(source))

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get decoder usage statistics."""
        return {
            "total_decodes": self._decode_count,
            "successful_decodes": self._successful_decodes,
            "success_rate": (
                self._successful_decodes / self._decode_count
                if self._decode_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset decoder usage statistics."""
        self._decode_count = 0
        self._successful_decodes = 0
        self._total_processing_time = 0.0
