"""Integration adapters exporting decoded trees to other XML object models.

Conversion is one-way: a decoded ``AbxDocument`` (or a successful
``DecodeResult``) becomes an element of the target library. Adapters are looked
up by name through a process-wide registry.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from abx_decoder.api.decoder import DecodeResult
from abx_decoder.shared import DiagnosticEntry, DiagnosticSeverity, get_logger
from abx_decoder.tree import AbxDocument, AbxElement

ConvertibleType = Union[DecodeResult, AbxDocument]

MS_PER_SECOND = 1000


@dataclass(frozen=True)
class AdapterMetadata:
    """Name and target library of an adapter."""

    name: str
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Outcome of exporting one decoded document."""

    success: bool
    converted_data: Any
    source: Any
    conversion_time_ms: float
    element_count: int = 0
    library_version: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class IntegrationAdapter(ABC):
    """Base class for exporting an ``AbxDocument`` to a foreign element type.

    Subclasses name themselves with the ``name``/``target_library`` class
    attributes and import their library in ``_load_target``. The element walk
    is shared: every target only needs ``Element``, ``set`` and ``append``.
    """

    name: str = ""
    target_library: str = ""
    description: str = ""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    def metadata(self) -> AdapterMetadata:
        """Describe this adapter."""
        return AdapterMetadata(self.name, self.target_library, self.description)

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _load_target(self) -> Any:
        """Import and return the target library's etree module."""

    def _library_version(self, etree: Any) -> Optional[str]:
        return None

    def to_target(self, source: ConvertibleType) -> ConversionResult:
        """Convert a decoded document to the target library's element type.

        Args:
            source: A successful ``DecodeResult`` or an ``AbxDocument``

        Returns:
            ConversionResult whose ``converted_data`` is the target root element
        """
        start_time = time.time()

        document = source.document if isinstance(source, DecodeResult) else source
        if not isinstance(document, AbxDocument):
            return self._failure(
                "Nothing to convert: decode failed or input is not an AbxDocument",
                source,
                start_time,
            )

        try:
            etree = self._load_target()
            target_root, count = self._convert_element(document.root, etree)
        except ImportError as e:
            return self._failure(
                f"{self.target_library} is not installed: {e}", source, start_time
            )
        except (TypeError, ValueError) as e:
            # Target libraries reject names or characters that ABX allows
            return self._failure(
                f"Failed to convert to {self.target_library}: {e}", source, start_time
            )

        return ConversionResult(
            success=True,
            converted_data=target_root,
            source=source,
            conversion_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            element_count=count,
            library_version=self._library_version(etree),
        )

    def _convert_element(self, element: AbxElement, etree: Any) -> Tuple[Any, int]:
        """Build the target tree iteratively so deep documents do not recurse.

        Returns:
            Tuple of the target root element and the number of elements built
        """
        target_root = self._new_element(element, etree)
        count = 1
        pending = [(element, target_root)]
        while pending:
            source_element, target_element = pending.pop()
            for child in source_element.children:
                target_child = self._new_element(child, etree)
                target_element.append(target_child)
                pending.append((child, target_child))
                count += 1
        return target_root, count

    @staticmethod
    def _new_element(element: AbxElement, etree: Any) -> Any:
        target = etree.Element(element.tag)
        for key, value in element.attributes.items():
            target.set(key, value)
        if element.text:
            target.text = element.text
        return target

    def _failure(self, message: str, source: Any, start_time: float) -> ConversionResult:
        self._logger.warning(message, extra={"adapter": self.name})
        return ConversionResult(
            success=False,
            converted_data=None,
            source=source,
            conversion_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            errors=[message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id,
                )
            ],
        )


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter producing ``xml.etree.ElementTree`` elements."""

    name = "elementtree"
    target_library = "xml.etree.ElementTree"
    description = "AbxDocument to ElementTree"

    def is_available(self) -> bool:
        """ElementTree ships with Python."""
        return True

    def _load_target(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET


class LxmlAdapter(IntegrationAdapter):
    """Adapter producing ``lxml.etree`` elements (requires the lxml extra)."""

    name = "lxml"
    target_library = "lxml"
    description = "AbxDocument to lxml.etree"

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
        except ImportError:
            return False
        return True

    def _load_target(self) -> Any:
        import lxml.etree as ET
        return ET

    def _library_version(self, etree: Any) -> Optional[str]:
        return ".".join(str(part) for part in etree.LXML_VERSION)


class AdapterRegistry:
    """Adapter classes keyed by their ``name``."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class, replacing any with the same name."""
        if not adapter_class.name:
            raise ValueError(f"{adapter_class.__name__} does not define a name")
        with self._lock:
            self._adapters[adapter_class.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Return a new adapter, or None if the name is unknown or unavailable."""
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        adapter = adapter_class(correlation_id)
        return adapter if adapter.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """Metadata for every registered adapter whose library is installed."""
        with self._lock:
            classes = list(self._adapters.values())
        adapters = [adapter_class() for adapter_class in classes]
        return [adapter.metadata for adapter in adapters if adapter.is_available()]


_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an adapter in the process-wide registry."""
    _registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance, or None if unknown or unavailable."""
    return _registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List the adapters whose target library is installed."""
    return _registry.list_available_adapters()


register_adapter(ElementTreeAdapter)
register_adapter(LxmlAdapter)
