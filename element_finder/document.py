"""Query, extract from and rewrite HTML or XML documents."""
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Pattern, Union

from . import engine
from .collection import DocumentCollection, NodeCollection, StringCollection
from .engine import DEFAULT_OPTIONS, EMPTY_DOCUMENT, NESTED_XML_DOCUMENT, DocumentKind, ParseOption
from .errors import CardinalityMismatch, InvalidInput, ReparseError
from .handles import NodeHandle
from .regex import as_match_selector, compile_pattern, iter_matches
from .translators import ExpressionTranslator, XPathExpression

if TYPE_CHECKING:  # pragma: no cover
    from .config import FinderConfig

logger = logging.getLogger(__name__)


class Document:
    """A parsed HTML or XML document that can be queried and rewritten.

    Example::

        page = Document("<html><body><p>Hi</p></body></html>")
        page.value("//p")  # ["Hi"]

    Selectors pass through the document's :class:`ExpressionTranslator`
    before evaluation; the default expects XPath. Queries run with the root
    element as context node, so ``.`` is the root element and absolute paths
    cover the whole document. A bare ``/`` also yields the root element.

    Kind and parser options are fixed at construction. The tree may be
    replaced by :meth:`replace`, which bumps :attr:`epoch` and so invalidates
    every :class:`NodeHandle` obtained before.
    """

    def __init__(
        self,
        markup: Union[str, bytes],
        kind: Union[DocumentKind, int, str] = DocumentKind.HTML,
        options: int = DEFAULT_OPTIONS,
        translator: Optional[ExpressionTranslator] = None,
        namespaces: Optional[Mapping[str, str]] = None,
    ):
        if not isinstance(markup, (str, bytes, bytearray)) or not markup:
            raise InvalidInput("Expect not empty string")
        self._kind = DocumentKind.coerce(kind)

        if not isinstance(options, int) or isinstance(options, bool):
            raise InvalidInput(f"Expect int options, got {options!r}")
        self._options = ParseOption(options)

        self._translator: ExpressionTranslator = XPathExpression()
        if translator is not None:
            self.translator = translator
        self._namespaces: Dict[str, str] = dict(namespaces or {})

        if isinstance(markup, (bytes, bytearray)):
            markup = engine.decode(bytes(markup), self._kind)

        self._epoch = 0
        self._root = None
        self._xpath = None
        self._install(engine.parse(markup, self._kind, self._options))

    @classmethod
    def from_config(cls, markup: Union[str, bytes], config: "FinderConfig") -> "Document":
        """Build a document with the kind, options and translator from ``config``."""

        return cls(
            markup,
            kind=config.document_kind(),
            options=config.parse_options(),
            translator=config.build_translator(),
            namespaces=config.namespaces,
        )

    # Lifecycle -------------------------------------------------------------
    def _install(self, root) -> None:
        # Tree and query context are always replaced together.
        self._root = root
        self._xpath = engine.evaluator(root, self._namespaces) if root is not None else None

    def close(self) -> None:
        """Release the tree and its query context; outstanding handles go stale."""

        self._install(None)
        self._epoch += 1

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __str__(self) -> str:
        return self._serialize_document()

    def __repr__(self) -> str:
        return f"<Document kind={self._kind.name} epoch={self._epoch} empty={self.is_empty}>"

    # Properties ------------------------------------------------------------
    @property
    def kind(self) -> DocumentKind:
        return self._kind

    @property
    def options(self) -> ParseOption:
        return self._options

    @property
    def epoch(self) -> int:
        """Incremented whenever the tree is replaced."""

        return self._epoch

    @property
    def is_empty(self) -> bool:
        return self._root is None

    @property
    def translator(self) -> ExpressionTranslator:
        return self._translator

    @translator.setter
    def translator(self, translator: ExpressionTranslator) -> None:
        if not isinstance(translator, ExpressionTranslator):
            raise InvalidInput(f"Expect an ExpressionTranslator, got {translator!r}")
        self._translator = translator

    @property
    def namespaces(self) -> Dict[str, str]:
        return dict(self._namespaces)

    def register_namespace(self, prefix: str, uri: str) -> "Document":
        """Make ``prefix`` usable in queries, including after a reparse."""

        self._namespaces[prefix] = uri
        if self._xpath is not None:
            self._xpath.register_namespace(prefix, uri)
        return self

    # Querying --------------------------------------------------------------
    def _query(self, selector: str) -> list:
        query = self._translator.convert(selector)
        if self._xpath is None:
            return []
        if query.strip() == "/":
            # lxml drops document nodes from results; the root element stands in.
            return [self._root]
        return engine.evaluate(self._xpath, query)

    def _serialize_document(self) -> str:
        if self._root is None:
            return ""
        return engine.serialize(self._root, self._kind, outer=True)

    # Extraction ------------------------------------------------------------
    def html(self, selector: str, outer: bool = False) -> StringCollection:
        """Inner markup (or outer markup with ``outer=True``) of every match."""

        return StringCollection(
            engine.serialize(node, self._kind, outer=outer) for node in self._query(selector)
        )

    def outer_html(self, selector: str) -> StringCollection:
        return self.html(selector, outer=True)

    def value(self, selector: str) -> StringCollection:
        """Text content of every match."""

        return StringCollection(engine.text_of(node) for node in self._query(selector))

    def attribute(self, selector: str) -> StringCollection:
        """Values of matched attribute nodes.

        ```
        page.attribute("//a/@href")
        page.attribute("//a[1]/@title").first()
        ```

        The selector should end on the attribute axis; anything else yields
        whatever text the engine reports for the matched node.
        """

        return StringCollection(engine.text_of(node) for node in self._query(selector))

    def node(self, selector: str) -> list:
        """Raw lxml results; they belong to this document's current tree."""

        return self._query(selector)

    def elements(self, selector: str) -> NodeCollection:
        epoch = self._epoch
        return NodeCollection(NodeHandle(self, node, epoch) for node in self._query(selector))

    def key_value(self, base: str, key_selector: str, value_selector: str) -> Dict[str, str]:
        """Pair the text of ``base + key_selector`` with ``base + value_selector``.

        ```
        page.key_value("//table//tr", "/td[1]", "/td[2]")
        ```
        """

        keys = self._query(base + key_selector)
        values = self._query(base + value_selector)
        if len(keys) != len(values):
            raise CardinalityMismatch(len(keys), len(values))
        return {engine.text_of(key): engine.text_of(value) for key, value in zip(keys, values)}

    def object(self, selector: str, outer: bool = False) -> DocumentCollection:
        """Wrap every match in an independent :class:`Document`.

        Blank serializations are replaced by a placeholder document so each
        nested document can be queried without special cases. The inner markup
        of an XML match is wrapped in a synthetic ``<root>`` element, since it
        may hold several top-level elements.
        """

        collection = DocumentCollection()
        for node in self._query(selector):
            markup = engine.serialize(node, self._kind, outer=outer)
            if markup.strip() == "":
                markup = EMPTY_DOCUMENT
            elif self._kind is DocumentKind.XML and not outer:
                markup = NESTED_XML_DOCUMENT.format(markup)
            collection.append(self._spawn(markup))
        return collection

    def _spawn(self, markup: str) -> "Document":
        return Document(
            markup,
            kind=self._kind,
            options=self._options,
            translator=self._translator,
            namespaces=self._namespaces,
        )

    def get_node_items(self, base: str, fields: Mapping[str, str]) -> Dict[int, Dict[str, Optional[str]]]:
        """Project repeated structures into records.

        ```
        fields = {
            "link": "//a/@href",
            "title": "//a",
            "img": "//img/@src",
        }
        news = page.get_node_items('//*[@class="news"]', fields)
        ```

        Every field keeps the first inner markup match of its selector inside
        the item, or ``None`` when nothing matches.
        """

        items: Dict[int, Dict[str, Optional[str]]] = {}
        for index, item in enumerate(self.object(base)):
            items[index] = {name: item.html(selector).first() for name, selector in fields.items()}
        return items

    # Pattern matching ------------------------------------------------------
    def match(
        self,
        pattern: Union[str, Pattern[str]],
        selector: Union[int, Callable[[re.Match], Any], Any] = 1,
    ) -> StringCollection:
        """Run ``pattern`` over the serialized document.

        ``selector`` is a capture group index or a callable receiving each
        :class:`re.Match`::

            phones = page.match(r"([0-9]{4,6})")
        """

        chooser = as_match_selector(selector)
        return StringCollection(iter_matches(pattern, chooser, [self._serialize_document()]))

    # Mutation --------------------------------------------------------------
    def remove(self, selector: str) -> "Document":
        """Detach every match, with its subtree, from the tree.

        ```
        page.remove("//script")
        ```
        """

        nodes = self._query(selector)
        for node in nodes:
            self._detach(node)
        logger.debug("Removed %d nodes matching %r", len(nodes), selector)
        return self

    def _detach(self, node: Any) -> None:
        if node is self._root:
            self._install(None)
            return
        engine.detach(node)

    def replace(
        self,
        pattern: Union[str, Pattern[str]],
        replacement: Union[str, Callable[[re.Match], str]] = "",
    ) -> "Document":
        """Rewrite the serialized document with ``re.sub`` and reparse it.

        ```
        page.replace(r"00", "11")
        ```

        The rewritten markup is parsed before the current tree is dropped. If
        it yields no tree at all, :class:`ReparseError` is raised and the
        document is left as it was.
        """

        compiled = compile_pattern(pattern)
        try:
            rewritten = compiled.sub(replacement, self._serialize_document())
        except re.error as exc:
            raise InvalidInput(f"Invalid replacement {replacement!r}: {exc}") from exc
        if rewritten.strip() == "":
            rewritten = EMPTY_DOCUMENT

        root = engine.parse(rewritten, self._kind, self._options)
        if root is None:
            raise ReparseError(f"Replacing {compiled.pattern!r} left markup that does not parse as {self._kind.name}")

        self._install(root)
        self._epoch += 1
        logger.debug("Reparsed document after replacing %r (epoch %d)", compiled.pattern, self._epoch)
        return self
