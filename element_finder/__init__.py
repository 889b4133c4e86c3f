"""Query, extract from and rewrite HTML or XML documents with XPath or CSS selectors."""

from .collection import Collection, DocumentCollection, NodeCollection, StringCollection
from .config import FinderConfig, load_config
from .document import Document
from .engine import DEFAULT_OPTIONS, EMPTY_DOCUMENT, DocumentKind, ParseOption
from .errors import (
    CardinalityMismatch,
    ElementFinderError,
    InvalidExpression,
    InvalidInput,
    ReparseError,
    StaleNodeError,
)
from .handles import NodeHandle
from .regex import GroupIndex, MatchSelector, Transform
from .translators import CssExpression, ExpressionTranslator, ShorthandExpression, XPathExpression

__all__ = [
    "CardinalityMismatch",
    "Collection",
    "CssExpression",
    "DEFAULT_OPTIONS",
    "Document",
    "DocumentCollection",
    "DocumentKind",
    "EMPTY_DOCUMENT",
    "ElementFinderError",
    "ExpressionTranslator",
    "FinderConfig",
    "GroupIndex",
    "InvalidExpression",
    "InvalidInput",
    "MatchSelector",
    "NodeCollection",
    "NodeHandle",
    "ParseOption",
    "ReparseError",
    "ShorthandExpression",
    "StaleNodeError",
    "StringCollection",
    "Transform",
    "XPathExpression",
    "load_config",
]
