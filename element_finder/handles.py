"""Epoch-tagged references to nodes owned by a :class:`Document`."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from . import engine
from .errors import StaleNodeError

if TYPE_CHECKING:  # pragma: no cover
    from .document import Document


class NodeHandle:
    """A node plus the tree epoch it was taken from.

    Once the owning document reparses (or is closed) the handle goes stale and
    every accessor raises :class:`StaleNodeError` instead of reaching into a
    tree that no longer backs the document.
    """

    __slots__ = ("_document", "_node", "_epoch")

    def __init__(self, document: "Document", node: Any, epoch: int):
        self._document = document
        self._node = node
        self._epoch = epoch

    @property
    def is_stale(self) -> bool:
        return self._document.epoch != self._epoch

    @property
    def node(self) -> Any:
        """The underlying lxml element or string result."""

        if self.is_stale:
            raise StaleNodeError(
                f"Node handle from epoch {self._epoch} used after the document moved to epoch {self._document.epoch}"
            )
        return self._node

    @property
    def tag(self) -> Optional[str]:
        node = self.node
        if engine.is_element(node):
            return node.tag
        return None

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        node = self.node
        if engine.is_element(node):
            return node.get(name, default)
        return default

    def text(self) -> str:
        return engine.text_of(self.node)

    def inner_html(self) -> str:
        return engine.serialize(self.node, self._document.kind, outer=False)

    def outer_html(self) -> str:
        return engine.serialize(self.node, self._document.kind, outer=True)

    def remove(self) -> None:
        """Detach the node from the owning document's tree."""

        self._document._detach(self.node)

    def __repr__(self) -> str:
        state = "stale" if self.is_stale else "live"
        return f"<NodeHandle {self._node!r} epoch={self._epoch} {state}>"
