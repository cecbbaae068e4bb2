"""Data models for Codestruct."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class ElementKind(Enum):
    """Kinds of structural elements a scanner can recover."""

    NAMESPACE = "namespace"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    FUNCTION = "function"
    PROPERTY = "property"
    FIELD = "field"
    VARIABLE = "variable"
    MODULE = "module"


class Accessibility(Enum):
    """Access modifier written on the declaration line."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    DEFAULT = "default"


CALLABLE_KINDS = frozenset({ElementKind.CONSTRUCTOR, ElementKind.METHOD, ElementKind.FUNCTION})


@dataclass
class ParamDescription:
    """A documented parameter: name and its description text."""

    name: str
    description: str


@dataclass
class Element:
    """A structural element recovered from source lines.

    Elements are value trees: a scanner creates each one once, attaches its
    children in discovery order and hands the whole tree to the caller.
    Nothing points back to a parent; see ElementIndex for parent lookup.
    """

    name: str
    kind: ElementKind
    line: int
    accessibility: Accessibility = Accessibility.DEFAULT
    children: list[Element] = field(default_factory=list)
    comment: str | None = None
    return_type: str | None = None
    parameters: str | None = None
    returns: str | None = None
    param_descriptions: list[ParamDescription] = field(default_factory=list)
    # Synthesized documentation node, not a declaration
    is_pseudo: bool = False

    @property
    def is_callable(self) -> bool:
        return self.kind in CALLABLE_KINDS

    @property
    def declared_children(self) -> list[Element]:
        """Children that are real declarations (pseudo-elements excluded)."""
        return [c for c in self.children if not c.is_pseudo]

    def __iter__(self) -> Iterator[Element]:
        """Pre-order traversal."""
        yield self
        for child in self.children:
            yield from child

    def __len__(self) -> int:
        """Total nodes in subtree."""
        return 1 + sum(len(c) for c in self.children)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        result: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "line": self.line,
            "accessibility": self.accessibility.value,
        }
        if self.comment is not None:
            result["comment"] = self.comment
        if self.return_type is not None:
            result["return_type"] = self.return_type
        if self.parameters is not None:
            result["parameters"] = self.parameters
        if self.returns is not None:
            result["returns"] = self.returns
        if self.param_descriptions:
            result["param_descriptions"] = [
                {"name": p.name, "description": p.description} for p in self.param_descriptions
            ]
        if self.is_pseudo:
            result["pseudo"] = True
        result["children"] = [c.to_dict() for c in self.children]
        return result


class OutlineReport:
    """Results from outlining a batch of files."""

    def __init__(self) -> None:
        self.results: dict[Path, list[Element]] = {}
        self.unsupported: list[Path] = []
        self.errors: list[str] = []

    @property
    def elements(self) -> int:
        """Total elements across every outlined file, pseudo-elements included."""
        return sum(len(e) for elements in self.results.values() for e in elements)

    def __repr__(self) -> str:
        return (
            f"OutlineReport(files={len(self.results)}, elements={self.elements}, "
            f"unsupported={len(self.unsupported)}, errors={len(self.errors)})"
        )
