"""Exceptions raised by :mod:`element_finder`."""
from __future__ import annotations


class ElementFinderError(Exception):
    """Base class for every error raised by the package."""


class InvalidInput(ElementFinderError, ValueError):
    """An argument was rejected before any work was done."""


class InvalidExpression(InvalidInput):
    """The translated query could not be compiled by the engine."""

    def __init__(self, expression: str, reason: str):
        super().__init__(f"Invalid expression {expression!r}: {reason}")
        self.expression = expression


class CardinalityMismatch(ElementFinderError):
    """Two selections that must pair one-to-one returned different counts."""

    def __init__(self, keys: int, values: int):
        super().__init__(f"Keys and values must have equal numbers of elements ({keys} != {values})")
        self.keys = keys
        self.values = values


class StaleNodeError(ElementFinderError):
    """A node handle outlived the tree it was taken from."""


class ReparseError(ElementFinderError):
    """Rewritten markup did not produce a tree; the previous tree was kept."""
