"""Diagnostic and metrics types shared by the decoding layers."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    offset: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to dictionary representation."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.offset is not None:
            result["offset"] = self.offset
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class DecodeMetrics:
    """Counters collected during a single decode."""

    processing_time_ms: float = 0.0
    bytes_consumed: int = 0
    tokens_processed: int = 0
    header_records_skipped: int = 0
    interned_strings: int = 0
    elements_created: int = 0
    attributes_decoded: int = 0
    whitespace_text_skipped: int = 0
    unknown_tokens_skipped: int = 0

    @property
    def bytes_per_second(self) -> float:
        """Calculate bytes consumed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_consumed * 1000.0) / self.processing_time_ms

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary representation."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "bytes_consumed": self.bytes_consumed,
            "tokens_processed": self.tokens_processed,
            "header_records_skipped": self.header_records_skipped,
            "interned_strings": self.interned_strings,
            "elements_created": self.elements_created,
            "attributes_decoded": self.attributes_decoded,
            "whitespace_text_skipped": self.whitespace_text_skipped,
            "unknown_tokens_skipped": self.unknown_tokens_skipped,
        }
