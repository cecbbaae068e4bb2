"""Brace-depth scope scanners for class-based languages (C#, Java).

The scanner keeps a running brace depth for the whole file and at most three
open frames: namespace, class and method. Each frame remembers the depth
before its declaration line (its floor) and closes on the first later line
where the depth falls back to that floor. Lines inside a method body are
never mined for members; only another callable declaration is recognized
there, and it becomes a sibling method of the same class.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from codestruct.core.config import ScanSettings
from codestruct.core.models import Element, ElementKind
from codestruct.languages.builder import ElementBuilder

logger = structlog.get_logger()

# Type text in a member signature: generics, arrays, nullables, dotted names
_SIG_TYPE = r"[\w<>,\s.\[\]?]+?"
# Type of a property or field: one identifier with an optional generic argument
_MEMBER_TYPE = r"\w+(?:<[^>]+>)?(?:\[\])?\??"

_ACCESSOR_KEYWORD = re.compile(r"\b(?:get|set)\b")


@dataclass
class _Frame:
    """An open scope and the brace depth it closes at."""

    element: Element
    floor: int


@dataclass
class _ScopeState:
    """Mutable state for a single scan."""

    depth: int = 0
    namespace: _Frame | None = None
    cls: _Frame | None = None
    method: _Frame | None = None
    elements: list[Element] = field(default_factory=list)

    def close_frames(self) -> None:
        """Close every frame whose floor has been reached; outer closes imply inner."""
        if self.namespace is not None and self.depth <= self.namespace.floor:
            self.namespace = None
            self.cls = None
            self.method = None
        if self.cls is not None and self.depth <= self.cls.floor:
            self.cls = None
            self.method = None
        if self.method is not None and self.depth <= self.method.floor:
            self.method = None

    def attach(self, element: Element) -> None:
        """Attach a type-level element to the open namespace, or to the root."""
        if self.namespace is not None:
            self.namespace.element.children.append(element)
        else:
            self.elements.append(element)


def _is_skippable(stripped: str) -> bool:
    return not stripped or stripped.startswith(("//", "*", "/*"))


class BraceScopeScanner:
    """Shared scan loop; subclasses supply the language's patterns."""

    namespace_pattern: re.Pattern[str]
    # False: the namespace is a plain top-level element, not an enclosing scope
    namespace_opens_scope: bool = True
    # Kind emitted for a callable named like its class; None disables detection
    constructor_kind: ElementKind | None = ElementKind.CONSTRUCTOR

    class_pattern: re.Pattern[str] = re.compile(r"\bclass\s+(\w+)")
    interface_pattern: re.Pattern[str] = re.compile(r"\binterface\s+(\w+)")
    enum_pattern: re.Pattern[str] = re.compile(r"\benum\s+(\w+)")

    constructor_patterns: tuple[re.Pattern[str], ...] = ()
    method_patterns: tuple[re.Pattern[str], ...] = ()
    property_patterns: tuple[re.Pattern[str], ...] = ()
    field_patterns: tuple[re.Pattern[str], ...] = ()
    field_keywords: re.Pattern[str]

    def __init__(self, settings: ScanSettings | None = None) -> None:
        self._builder = ElementBuilder(settings)

    def scan(self, lines: Sequence[str], offset: int = 0) -> list[Element]:
        """Scan lines and return namespace/type elements with their members."""
        state = _ScopeState()
        logger.debug("scan_started", scanner=type(self).__name__, lines=len(lines))

        for index, raw in enumerate(lines):
            stripped = raw.strip()
            if _is_skippable(stripped):
                continue

            before = state.depth
            state.depth += raw.count("{") - raw.count("}")
            state.close_frames()

            line_no = index + 1 + offset

            if state.namespace is None and state.cls is None:
                namespace = self._declaration(
                    self.namespace_pattern, ElementKind.NAMESPACE, stripped, line_no, lines, index
                )
                if namespace is not None:
                    if self.namespace_opens_scope:
                        # a file-scoped namespace (`namespace Foo;`) encloses the rest of the file
                        floor = -1 if stripped.endswith(";") else before
                        state.namespace = _Frame(namespace, floor)
                    state.elements.append(namespace)
                    continue

            if state.cls is None:
                cls = self._declaration(
                    self.class_pattern, ElementKind.CLASS, stripped, line_no, lines, index
                )
                if cls is not None:
                    state.cls = _Frame(cls, before)
                    state.attach(cls)
                    continue

                other = self._declaration(
                    self.interface_pattern, ElementKind.INTERFACE, stripped, line_no, lines, index
                ) or self._declaration(
                    self.enum_pattern, ElementKind.ENUM, stripped, line_no, lines, index
                )
                if other is not None:
                    state.attach(other)
                continue

            members = state.cls.element.children

            callable_element = self._callable(stripped, line_no, lines, index, state.cls.element.name)
            if callable_element is not None:
                state.method = _Frame(callable_element, before)
                members.append(callable_element)
                continue

            if state.method is not None:
                continue

            member = self._property(stripped, line_no, lines, index) or self._field(
                stripped, line_no, lines, index
            )
            if member is not None:
                members.append(member)

        logger.debug("scan_finished", scanner=type(self).__name__, elements=len(state.elements))
        return state.elements

    def _declaration(
        self,
        pattern: re.Pattern[str],
        kind: ElementKind,
        line: str,
        line_no: int,
        lines: Sequence[str],
        index: int,
    ) -> Element | None:
        match = pattern.search(line)
        if not match:
            return None
        return self._builder.build(match.group(1), kind, line_no, line, lines, index)

    def _callable(
        self, line: str, line_no: int, lines: Sequence[str], index: int, class_name: str
    ) -> Element | None:
        """A constructor or method declared on this line; constructors win."""
        if "{" in line and _ACCESSOR_KEYWORD.search(line):
            return None
        if self.constructor_kind is not None:
            constructor = self._constructor(line, line_no, lines, index, class_name)
            if constructor is not None:
                return constructor
        return self._method(line, line_no, lines, index, class_name)

    def _constructor(
        self, line: str, line_no: int, lines: Sequence[str], index: int, class_name: str
    ) -> Element | None:
        match = _first_match(self.constructor_patterns, line)
        if match is None or match.group(1) != class_name:
            return None
        return self._builder.build(
            class_name,
            self.constructor_kind,
            line_no,
            line,
            lines,
            index,
            parameters=match.group(2) or "",
        )

    def _method(
        self, line: str, line_no: int, lines: Sequence[str], index: int, class_name: str
    ) -> Element | None:
        match = _first_match(self.method_patterns, line)
        if match is None:
            return None

        return_type = match.group(1).strip()
        name = match.group(2)
        parameters = match.group(3) or ""

        if self.constructor_kind is not None and return_type == name == class_name:
            return self._builder.build(
                name, self.constructor_kind, line_no, line, lines, index, parameters=parameters
            )
        return self._builder.build(
            name,
            ElementKind.METHOD,
            line_no,
            line,
            lines,
            index,
            return_type=return_type,
            parameters=parameters,
        )

    def _is_type_declaration(self, line: str) -> bool:
        return any(
            p.search(line) for p in (self.class_pattern, self.interface_pattern, self.enum_pattern)
        )

    def _property(
        self, line: str, line_no: int, lines: Sequence[str], index: int
    ) -> Element | None:
        if self._is_type_declaration(line):
            return None
        match = _first_match(self.property_patterns, line)
        if match is None:
            return None
        return self._builder.build(
            match.group(2), ElementKind.PROPERTY, line_no, line, lines, index, return_type=match.group(1)
        )

    def _field(self, line: str, line_no: int, lines: Sequence[str], index: int) -> Element | None:
        if "(" in line or "{" in line:
            return None
        if not self.field_keywords.match(line):
            return None
        match = _first_match(self.field_patterns, line)
        if match is None:
            return None
        return self._builder.build(
            match.group(2), ElementKind.FIELD, line_no, line, lines, index, return_type=match.group(1)
        )


def _first_match(patterns: Sequence[re.Pattern[str]], line: str) -> re.Match[str] | None:
    """Try patterns in order and return the first match."""
    for pattern in patterns:
        match = pattern.search(line)
        if match:
            return match
    return None


_CS_ACCESS = r"(?:public|private|protected|internal)"


class CSharpScanner(BraceScopeScanner):
    """C#: namespaces enclose types; constructors are recognized by name."""

    namespace_pattern = re.compile(r"\bnamespace\s+([\w.]+)")

    constructor_patterns = (
        re.compile(rf"\bstatic\s+{_CS_ACCESS}?\s*(\w+)\s*\(([^)]*)\)"),
        re.compile(rf"{_CS_ACCESS}\s*(\w+)\s*\(([^)]*)\)"),
        re.compile(r"^\s*(\w+)\s*\(([^)]*)\)"),
    )
    method_patterns = (
        re.compile(
            rf"\bstatic\s+{_CS_ACCESS}?\s*(?:async|virtual|override|abstract)?\s*"
            rf"({_SIG_TYPE})\s+(\w+)(?:<[^>]*>)?\s*\(([^)]*)\)"
        ),
        re.compile(
            rf"{_CS_ACCESS}\s*(?:static|async|virtual|override|abstract)?\s*"
            rf"({_SIG_TYPE})\s+(\w+)(?:<[^>]*>)?\s*\(([^)]*)\)"
        ),
        re.compile(rf"\bstatic\s+({_SIG_TYPE})\s+(\w+)(?:<[^>]*>)?\s*\(([^)]*)\)"),
    )
    property_patterns = (
        re.compile(
            rf"\bstatic\s+{_CS_ACCESS}?\s*(?:virtual|override)?\s*({_MEMBER_TYPE})\s+(\w+)\s*\{{"
        ),
        re.compile(
            rf"{_CS_ACCESS}\s*(?:static|virtual|override)?\s*({_MEMBER_TYPE})\s+(\w+)\s*\{{"
        ),
        re.compile(rf"\bstatic\s+({_MEMBER_TYPE})\s+(\w+)\s*\{{"),
    )
    field_patterns = (
        re.compile(
            rf"\b(?:static|readonly|const)\s+{_CS_ACCESS}?\s*({_MEMBER_TYPE})\s+(\w+)\s*[=;]"
        ),
        re.compile(
            rf"{_CS_ACCESS}\s*(?:static|readonly|const)?\s*({_MEMBER_TYPE})\s+(\w+)\s*[=;]"
        ),
        re.compile(rf"\b(?:static|readonly|const)\s+({_MEMBER_TYPE})\s+(\w+)\s*[=;]"),
    )
    field_keywords = re.compile(r"(?:public|private|protected|internal|static|readonly|const)\b")


_JAVA_ACCESS = r"(?:public|private|protected)"


class JavaScanner(BraceScopeScanner):
    """Java: the package is a top-level marker, not a scope.

    A callable named like its class still opens a method frame so the body is
    skipped, but it is reported as a plain method.
    """

    namespace_pattern = re.compile(r"^package\s+([\w.]+)")
    namespace_opens_scope = False
    constructor_kind = ElementKind.METHOD

    constructor_patterns = (
        re.compile(rf"{_JAVA_ACCESS}\s*(\w+)\s*\(([^)]*)\)"),
        re.compile(r"^\s*(\w+)\s*\(([^)]*)\)"),
    )

    method_patterns = (
        re.compile(
            rf"\bstatic\s+{_JAVA_ACCESS}?\s*(?:final|synchronized|native|abstract)?\s*"
            rf"({_SIG_TYPE})\s+(\w+)(?:<[^>]*>)?\s*\(([^)]*)\)"
        ),
        re.compile(
            rf"{_JAVA_ACCESS}\s*(?:static|final|abstract|synchronized|native|default)?\s*"
            rf"({_SIG_TYPE})\s+(\w+)(?:<[^>]*>)?\s*\(([^)]*)\)"
        ),
        re.compile(rf"\bstatic\s+({_SIG_TYPE})\s+(\w+)(?:<[^>]*>)?\s*\(([^)]*)\)"),
    )
    field_patterns = (
        re.compile(rf"\b(?:static|final)\s+{_JAVA_ACCESS}?\s*({_MEMBER_TYPE})\s+(\w+)\s*[=;]"),
        re.compile(rf"{_JAVA_ACCESS}\s*(?:static|final)?\s*({_MEMBER_TYPE})\s+(\w+)\s*[=;]"),
        re.compile(rf"\b(?:static|final)\s+({_MEMBER_TYPE})\s+(\w+)\s*[=;]"),
    )
    field_keywords = re.compile(r"(?:public|private|protected|static|final)\b")
