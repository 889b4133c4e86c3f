"""Selector translators: turn a caller's selector into an XPath query."""
from __future__ import annotations

import re
from abc import ABC, abstractmethod

from cssselect import GenericTranslator, HTMLTranslator, SelectorError

from .engine import DocumentKind
from .errors import InvalidExpression, InvalidInput


class ExpressionTranslator(ABC):
    """Convert a selector into the XPath dialect understood by lxml."""

    @abstractmethod
    def convert(self, expression: str) -> str:
        raise NotImplementedError


class XPathExpression(ExpressionTranslator):
    """Selectors are already XPath."""

    def convert(self, expression: str) -> str:
        return expression

    def __repr__(self) -> str:
        return "XPathExpression()"


class CssExpression(ExpressionTranslator):
    """CSS selectors translated by :mod:`cssselect`.

    The generated XPath starts with ``descendant-or-self::`` so the query node
    itself can match, e.g. ``html`` on the root of an HTML document.
    """

    def __init__(self, html: bool = True, prefix: str = "descendant-or-self::"):
        self.html = html
        self.prefix = prefix
        self._translator = HTMLTranslator() if html else GenericTranslator()

    def convert(self, expression: str) -> str:
        try:
            return self._translator.css_to_xpath(expression, prefix=self.prefix)
        except SelectorError as exc:
            raise InvalidExpression(expression, str(exc)) from exc

    def __repr__(self) -> str:
        return f"CssExpression(html={self.html!r})"


# ``//a@href`` -> ``//a/@href``: an attribute glued onto the last step.
_GLUED_ATTRIBUTE = re.compile(r"(?<=[\w\])*])@([\w:.-]+)\s*$")


class ShorthandExpression(ExpressionTranslator):
    """XPath where the attribute step may be written without a slash."""

    def convert(self, expression: str) -> str:
        branches = expression.split("|")
        return "|".join(_GLUED_ATTRIBUTE.sub(r"/@\1", branch) for branch in branches)

    def __repr__(self) -> str:
        return "ShorthandExpression()"


def translator_for(name: str, kind: DocumentKind = DocumentKind.HTML) -> ExpressionTranslator:
    """Build a translator from its configuration name."""

    key = name.strip().lower()
    if key == "xpath":
        return XPathExpression()
    if key == "css":
        return CssExpression(html=kind is DocumentKind.HTML)
    if key == "shorthand":
        return ShorthandExpression()
    raise InvalidInput(f"Unknown translator {name!r}; expected xpath, css or shorthand")
