"""Parsing, querying and serialization helpers built on :mod:`lxml.etree`.

Everything in here is stateless: a fresh parser is created for every parse so
no option or diagnostic state can leak from one document to another.
"""
from __future__ import annotations

import html
import logging
from contextlib import contextmanager
from enum import IntEnum, IntFlag
from typing import Any, Iterator, Optional, Union

from bs4 import UnicodeDammit
from lxml import etree

from .errors import InvalidExpression, InvalidInput

logger = logging.getLogger(__name__)

# Substituted whenever serialized content is blank so the parser never sees a
# zero-byte document. Valid as both HTML and XML.
EMPTY_DOCUMENT = '<html data-document-is-empty=""></html>'

# Wraps the inner markup of an XML match so every top-level child survives
# the reparse, not only the first.
NESTED_XML_DOCUMENT = '<root data-document-is-nested="">{}</root>'

_RAW_TEXT_TAGS = {"script", "style"}


class DocumentKind(IntEnum):
    HTML = 0
    XML = 1

    @classmethod
    def coerce(cls, value: Any) -> "DocumentKind":
        """Accept a member, its integer value or its (case-insensitive) name."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidInput(f"Doc type not valid, use xml or html (got {value!r})")


class ParseOption(IntFlag):
    """Parser option bitmask stored on every document."""

    NOWARNING = 1
    NOERROR = 2
    NOCDATA = 4
    NOBLANKS = 8
    NOCOMMENTS = 16
    COMPACT = 32
    HUGE = 64


DEFAULT_OPTIONS = ParseOption.NOWARNING | ParseOption.NOERROR | ParseOption.NOCDATA

Parser = Union[etree.HTMLParser, etree.XMLParser]


def build_parser(kind: DocumentKind, options: int) -> Parser:
    """Create an error tolerant parser with entity and network access disabled."""

    flags = dict(
        recover=True,
        no_network=True,
        remove_blank_text=bool(options & ParseOption.NOBLANKS),
        remove_comments=bool(options & ParseOption.NOCOMMENTS),
        compact=bool(options & ParseOption.COMPACT),
        huge_tree=bool(options & ParseOption.HUGE),
        encoding="utf-8",
    )
    if kind is DocumentKind.HTML:
        return etree.HTMLParser(**flags)
    return etree.XMLParser(
        resolve_entities=False,
        load_dtd=False,
        strip_cdata=bool(options & ParseOption.NOCDATA),
        **flags,
    )


def decode(data: bytes, kind: DocumentKind) -> str:
    """Turn raw bytes into text, sniffing the encoding the way bs4 does."""

    dammit = UnicodeDammit(data, is_html=kind is DocumentKind.HTML)
    if dammit.unicode_markup is None:
        raise InvalidInput("Unable to detect the encoding of the given markup")
    return dammit.unicode_markup


def prepare(markup: str, kind: DocumentKind) -> bytes:
    """Encode markup for the parser.

    HTML is reduced to ASCII with numeric character references so the HTML
    parser never has to guess an encoding. XML is handed over as UTF-8 and the
    parser is told so, whatever the XML declaration claims.
    """

    if kind is DocumentKind.HTML:
        return markup.encode("ascii", "xmlcharrefreplace")
    return markup.encode("utf-8", "surrogatepass")


@contextmanager
def parse_guard(parser: Parser, options: int) -> Iterator[Parser]:
    """Scope diagnostics to a single parse.

    The parser's error log is drained into :mod:`logging` on every exit path,
    dropping the levels the option bitmask suppresses.
    """

    try:
        yield parser
    finally:
        for entry in parser.error_log:
            if entry.level >= etree.ErrorLevels.ERROR:
                if not options & ParseOption.NOERROR:
                    logger.error("line %s: %s", entry.line, entry.message)
            elif not options & ParseOption.NOWARNING:
                logger.warning("line %s: %s", entry.line, entry.message)


def parse(markup: str, kind: DocumentKind, options: int) -> Optional[etree._Element]:
    """Parse markup and return its root element, or ``None`` when no tree came out."""

    parser = build_parser(kind, options)
    data = prepare(markup, kind)
    with parse_guard(parser, options):
        try:
            root = etree.fromstring(data, parser)
        except (etree.XMLSyntaxError, etree.ParserError) as exc:
            logger.debug("Parser produced no tree: %s", exc)
            return None
    if root is None:
        logger.debug("Parser produced no tree for %d bytes of %s", len(data), kind.name)
    return root


# Querying ------------------------------------------------------------------
def evaluator(root: etree._Element, namespaces: Optional[dict] = None) -> etree.XPathElementEvaluator:
    return etree.XPathElementEvaluator(root, namespaces=namespaces or None)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def evaluate(context: etree.XPathElementEvaluator, query: str) -> list:
    """Run an XPath query; scalar results come back as a single string."""

    try:
        result = context(query)
    except etree.XPathError as exc:
        raise InvalidExpression(query, str(exc)) from exc
    if isinstance(result, list):
        return result
    return [_scalar(result)]


# Serialization -------------------------------------------------------------
def _method(kind: DocumentKind) -> str:
    return "html" if kind is DocumentKind.HTML else "xml"


def is_element(node: Any) -> bool:
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def serialize(node: Any, kind: DocumentKind, outer: bool = False) -> str:
    """Serialize a query result.

    String results (attributes, text nodes) serialize to themselves. Comments
    and processing instructions serialize to their content when ``outer`` is
    false.
    """

    if not isinstance(node, etree._Element):
        return str(node)
    method = _method(kind)
    if outer:
        return etree.tostring(node, method=method, encoding="unicode", with_tail=False)
    if not is_element(node):
        return node.text or ""

    parts: list[str] = []
    if node.text:
        raw = kind is DocumentKind.HTML and node.tag.lower() in _RAW_TEXT_TAGS
        parts.append(node.text if raw else html.escape(node.text, quote=False))
    for child in node:
        parts.append(etree.tostring(child, method=method, encoding="unicode", with_tail=True))
    return "".join(parts)


def text_of(node: Any) -> str:
    """Text content of a node, without markup."""

    if not isinstance(node, etree._Element):
        return str(node)
    if not is_element(node):
        return node.text or ""
    return etree.tostring(node, method="text", encoding="unicode", with_tail=False)


# Mutation ------------------------------------------------------------------
def detach(node: Any) -> None:
    """Detach a node from its parent.

    An element's tail text stays in the tree. Attribute results are deleted
    from their owner and text results are cleared. Nodes without a parent are
    left alone.
    """

    if not isinstance(node, etree._Element):
        _detach_string(node)
        return

    parent = node.getparent()
    if parent is None:
        return
    if node.tail:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + node.tail
        else:
            parent.text = (parent.text or "") + node.tail
        node.tail = None
    parent.remove(node)


def _detach_string(result: Any) -> None:
    getparent = getattr(result, "getparent", None)
    parent = getparent() if getparent is not None else None
    if parent is None:
        return
    if result.is_attribute:
        parent.attrib.pop(result.attrname, None)
    elif result.is_tail:
        parent.tail = None
    elif result.is_text:
        parent.text = None
