"""Tree building state machine for ABX token streams.

The builder reads tokens one at a time, keeps an explicit stack of open
elements and produces a single rooted tree. Single-root and multi-root decoding
share the same transitions: multi-root mode only pushes a synthetic wrapper
before the first token, which raises the stack base from 0 to 1.
"""

from enum import Enum, auto
from typing import Callable, Dict, List, Optional

from abx_decoder.binary import ByteReader, ByteSource, StringInternTable
from abx_decoder.shared import (
    AttributeOutsideElement,
    DecodeMetrics,
    DecoderConfig,
    InvalidTokenDataType,
    MaxDepthExceeded,
    MismatchedEndTag,
    MultipleRootElements,
    NoRootElement,
    TextOutsideElement,
    UnclosedElements,
    UnexpectedEndTag,
    get_logger,
)
from abx_decoder.tokenization import (
    HeaderExtensionSkipper,
    Token,
    TokenKind,
    ValueDecoder,
    ValueType,
)
from abx_decoder.tree.model import AbxDocument, AbxElement

# Characters the ABX writer treats as ignorable whitespace
_WHITESPACE = " \t\n\r\x0b\x0c"


class DecoderState(Enum):
    """Position of the builder within the document."""

    EXPECT_START = auto()   # After the header, before start-of-document
    IN_DOCUMENT = auto()    # Between start-of-document and end-of-document
    ROOT_CLOSED = auto()    # Single-root mode: the root element has closed
    FINISHED = auto()       # End-of-document consumed


class AbxTreeBuilder:
    """Builds an ``AbxDocument`` from an ABX byte stream.

    A builder may be reused; every ``build`` call starts from fresh state and
    owns its own intern table and element stack.
    """

    def __init__(
        self,
        config: Optional[DecoderConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Decoder configuration (single-root UTF-8 by default)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or DecoderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "abx_tree_builder")

        self._handlers: Dict[Optional[TokenKind], Callable[[Token], None]] = {
            TokenKind.START_DOCUMENT: self._process_start_document,
            TokenKind.END_DOCUMENT: self._process_end_document,
            TokenKind.START_TAG: self._process_start_tag,
            TokenKind.END_TAG: self._process_end_tag,
            TokenKind.TEXT: self._process_text,
            TokenKind.ATTRIBUTE: self._process_attribute,
        }
        self._reset_state()

    @property
    def state(self) -> DecoderState:
        """Current state of the last (or ongoing) build."""
        return self._state

    @property
    def metrics(self) -> DecodeMetrics:
        """Counters for the last (or ongoing) build."""
        return self._metrics

    def _reset_state(self) -> None:
        self._reader: Optional[ByteReader] = None
        self._interns = StringInternTable()
        self._values: Optional[ValueDecoder] = None
        self._stack: List[AbxElement] = []
        self._base = 0
        self._root: Optional[AbxElement] = None
        self._state = DecoderState.EXPECT_START
        self._metrics = DecodeMetrics()

    def build(self, source: ByteSource) -> AbxDocument:
        """Decode a complete ABX stream.

        Args:
            source: Raw bytes or a binary file-like object positioned at the magic

        Returns:
            AbxDocument whose root is the decoded root element, or the synthetic
            wrapper in multi-root mode

        Raises:
            AbxDecodeError: Any decoding failure; no partial tree is returned
        """
        self._reset_state()
        self._reader = ByteReader(
            source,
            text_encoding=self.config.text_encoding,
            text_errors=self.config.text_errors,
        )
        self._values = ValueDecoder(self._reader, self._interns)

        header = HeaderExtensionSkipper(self._reader)
        header.read_magic()
        self._metrics.header_records_skipped = header.skip()

        if self.config.multi_root:
            self._root = AbxElement(self.config.wrapper_tag)
            self._stack.append(self._root)
            self._base = 1

        try:
            while self._state is not DecoderState.FINISHED:
                if self._reader.at_end():
                    self._handle_early_end_of_input()
                    break
                token = Token(self._reader.read_byte(), self._reader.offset - 1)
                self._metrics.tokens_processed += 1
                self._process_token(token)
        finally:
            self._metrics.bytes_consumed = self._reader.offset
            self._metrics.interned_strings = len(self._interns)

        if self._root is None:
            raise NoRootElement(
                "No root element found", offset=self._reader.offset
            )

        return AbxDocument(
            root=self._root,
            multi_root=self.config.multi_root,
            interned_strings=len(self._interns),
        )

    @property
    def _open_depth(self) -> int:
        """Open elements excluding the multi-root wrapper."""
        return len(self._stack) - self._base

    def _process_token(self, token: Token) -> None:
        handler = self._handlers.get(token.kind, self._skip_unknown_token)
        handler(token)

    def _expect_type(self, token: Token, expected: ValueType) -> None:
        if token.raw_type != expected:
            raise InvalidTokenDataType(
                f"Invalid {token.kind.name} data type: got {token.describe()}, "
                f"expected {expected.name}",
                offset=token.offset,
                details={"expected": expected.name, "actual": token.raw_type},
            )

    def _process_start_document(self, token: Token) -> None:
        self._expect_type(token, ValueType.NULL)
        if self._state is DecoderState.EXPECT_START:
            self._state = DecoderState.IN_DOCUMENT

    def _process_end_document(self, token: Token) -> None:
        self._expect_type(token, ValueType.NULL)
        if self._open_depth > 0:
            open_tags = [element.tag for element in self._stack[self._base:]]
            raise UnclosedElements(
                f"Unclosed elements at end of document: {', '.join(open_tags)}",
                offset=token.offset,
                details={"open_tags": open_tags},
            )
        self._state = DecoderState.FINISHED

    def _process_start_tag(self, token: Token) -> None:
        self._expect_type(token, ValueType.STRING_INTERNED)
        tag = self._interns.resolve_or_define(self._reader)

        if self._state is DecoderState.ROOT_CLOSED:
            raise MultipleRootElements(
                f"Second top-level element <{tag}> after root <{self._root.tag}> "
                f"closed; enable multi-root mode to accept it",
                offset=token.offset,
                details={"tag": tag, "root": self._root.tag},
            )

        max_depth = self.config.max_depth
        if max_depth is not None and self._open_depth >= max_depth:
            raise MaxDepthExceeded(
                f"Element <{tag}> exceeds maximum depth {max_depth}",
                offset=token.offset,
                details={"tag": tag, "max_depth": max_depth},
            )

        element = AbxElement(tag)
        if self._stack:
            self._stack[-1].add_child(element)
        else:
            self._root = element
        self._stack.append(element)
        self._state = DecoderState.IN_DOCUMENT
        self._metrics.elements_created += 1

    def _process_end_tag(self, token: Token) -> None:
        self._expect_type(token, ValueType.STRING_INTERNED)
        if self._open_depth == 0:
            raise UnexpectedEndTag(
                "Unexpected end tag with no open element", offset=token.offset
            )

        tag = self._interns.resolve_or_define(self._reader)
        current = self._stack[-1]
        if current.tag != tag:
            raise MismatchedEndTag(
                f"Mismatched end tag </{tag}>, expected </{current.tag}>",
                offset=token.offset,
                details={"expected": current.tag, "actual": tag},
            )

        self._stack.pop()
        if not self._stack:
            self._state = DecoderState.ROOT_CLOSED

    def _process_text(self, token: Token) -> None:
        value = self._reader.read_text_run()
        if not value.strip(_WHITESPACE):
            self._metrics.whitespace_text_skipped += 1
            return
        if not self._stack:
            raise TextOutsideElement(
                "Unexpected text outside of element",
                offset=token.offset,
                details={"length": len(value)},
            )
        self._stack[-1].append_text(value)

    def _process_attribute(self, token: Token) -> None:
        if self._open_depth == 0:
            raise AttributeOutsideElement(
                "Unexpected attribute with no open element", offset=token.offset
            )
        name = self._interns.resolve_or_define(self._reader)
        self._stack[-1].attributes[name] = self._values.decode(
            token.raw_type, token.offset
        )
        self._metrics.attributes_decoded += 1

    def _skip_unknown_token(self, token: Token) -> None:
        self._values.skip_payload(token.raw_type, token.offset)
        self._metrics.unknown_tokens_skipped += 1

    def _handle_early_end_of_input(self) -> None:
        if self._open_depth > 0:
            self.logger.warning(
                "Input ended before end of document with elements still open",
                extra={
                    "open_tags": [element.tag for element in self._stack[self._base:]],
                    "offset": self._reader.offset,
                },
            )
