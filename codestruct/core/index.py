"""Flat, parent-indexed view over element trees.

Elements do not point at their parents. ElementIndex flattens one or more
trees in pre-order into a list of entries, each recording the position of its
parent, so parent and ancestor lookups are index arithmetic instead of a tree
walk by object identity.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from codestruct.core.models import CALLABLE_KINDS, Element, ElementKind

_TYPE_KINDS = frozenset({ElementKind.CLASS, ElementKind.INTERFACE, ElementKind.ENUM})


@dataclass(frozen=True)
class IndexEntry:
    """One element in the flattened index."""

    element: Element
    parent: int | None
    depth: int


class ElementIndex:
    """Pre-order arena over a list of root elements."""

    def __init__(self, roots: Sequence[Element]) -> None:
        self._entries: list[IndexEntry] = []
        for root in roots:
            self._add(root, None, 0)

    def _add(self, element: Element, parent: int | None, depth: int) -> None:
        position = len(self._entries)
        self._entries.append(IndexEntry(element, parent, depth))
        for child in element.children:
            self._add(child, position, depth + 1)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, position: int) -> IndexEntry:
        return self._entries[position]

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self._entries)

    def parent_of(self, position: int) -> int | None:
        """Position of the parent entry, or None for a root."""
        return self._entries[position].parent

    def ancestors(self, position: int) -> list[int]:
        """Positions of all ancestors, nearest first."""
        chain: list[int] = []
        parent = self._entries[position].parent
        while parent is not None:
            chain.append(parent)
            parent = self._entries[parent].parent
        return chain

    def enclosing_class(self, position: int) -> Element | None:
        """The nearest enclosing class, interface or enum."""
        for ancestor in self.ancestors(position):
            element = self._entries[ancestor].element
            if element.kind in _TYPE_KINDS:
                return element
        return None

    def find(
        self,
        name: str,
        line: int | None = None,
        kind: ElementKind | None = None,
    ) -> int | None:
        """Position of the first declared element matching name (and line/kind if given)."""
        for position, entry in enumerate(self._entries):
            element = entry.element
            if element.is_pseudo or element.name != name:
                continue
            if line is not None and element.line != line:
                continue
            if kind is not None and element.kind != kind:
                continue
            return position
        return None

    def callables(self) -> list[int]:
        """Positions of every constructor, method and function."""
        return [
            position
            for position, entry in enumerate(self._entries)
            if entry.element.kind in CALLABLE_KINDS and not entry.element.is_pseudo
        ]
