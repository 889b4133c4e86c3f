"""Ordered result containers returned by :class:`~element_finder.document.Document`."""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Pattern, TypeVar, Union

from .regex import as_match_selector, compile_pattern, iter_matches

if TYPE_CHECKING:  # pragma: no cover
    from .document import Document
    from .handles import NodeHandle

T = TypeVar("T")


class Collection(List[T]):
    """A list in document order with forgiving accessors."""

    def item(self, index: int) -> Optional[T]:
        try:
            return self[index]
        except IndexError:
            return None

    def first(self) -> Optional[T]:
        return self.item(0)

    def last(self) -> Optional[T]:
        return self.item(-1)


class StringCollection(Collection[str]):
    def replace(self, pattern: Union[str, Pattern[str]], to: str = "") -> "StringCollection":
        """Return a copy with ``pattern`` substituted in every item."""

        compiled = compile_pattern(pattern)
        return StringCollection(compiled.sub(to, item) for item in self)

    def match(self, pattern: Union[str, Pattern[str]], group=1) -> "StringCollection":
        return StringCollection(iter_matches(pattern, as_match_selector(group), self))

    def split(self, pattern: Union[str, Pattern[str]]) -> "StringCollection":
        compiled = compile_pattern(pattern)
        parts = StringCollection()
        for item in self:
            parts.extend(compiled.split(item))
        return parts

    def unique(self) -> "StringCollection":
        return StringCollection(dict.fromkeys(self))

    def strip(self) -> "StringCollection":
        return StringCollection(item.strip() for item in self)


class NodeCollection(Collection["NodeHandle"]):
    pass


class DocumentCollection(Collection["Document"]):
    def html(self, selector: str, outer: bool = False) -> StringCollection:
        """Concatenate ``Document.html`` over every nested document."""

        merged = StringCollection()
        for document in self:
            merged.extend(document.html(selector, outer=outer))
        return merged

    def value(self, selector: str) -> StringCollection:
        merged = StringCollection()
        for document in self:
            merged.extend(document.value(selector))
        return merged
