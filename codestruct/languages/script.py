"""Script scanner for JavaScript and TypeScript, with a component-options mode.

Ordinary mode recognizes top-level declarations line by line (functions,
classes and, for TypeScript, interfaces and enums) without tracking nested
scopes. When a default export of an object literal is found, the object is
mined as a component description instead: each recognized option key becomes
a child element and the bag-like keys (``methods``, ``computed``, ``data``,
``watch``, ``props``, ``components``) get a dedicated sub-scan of their own
block.

Every reported line number has ``offset`` added, so a ``<script>`` block cut
out of a larger file reports positions in that file.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

import structlog

from codestruct.core.config import ScanSettings
from codestruct.core.models import Element, ElementKind
from codestruct.languages.builder import ElementBuilder

logger = structlog.get_logger()

EXPORT_DEFAULT_NAME = "export default"

_EXPORT_OPTIONS = re.compile(r"\bexport\s+default\s+(?:[\w.]+\s*\(\s*)?\{")
_CLASS = re.compile(r"(?:export\s+)?(?:default\s+)?(?:abstract\s+)?\bclass\s+(\w+)")
_FUNCTIONS = (
    re.compile(r"(?:export\s+)?(?:async\s+)?\bfunction(?:\s*\*\s*|\s+)(\w+)\s*\("),
    re.compile(r"(?:export\s+)?\b(?:const|let|var)\s+(\w+)\s*[=:]\s*(?:async\s*)?\("),
    re.compile(r"(?:export\s+)?(\w+)\s*[:=]\s*(?:async\s*)?\("),
)
_INTERFACE = re.compile(r"\binterface\s+(\w+)")
_ENUM = re.compile(r"\benum\s+(\w+)")
_SIGNATURE = re.compile(r"\(([^)]*)\)(?:\s*:\s*([\w<>\[\].|]+))?")

_HOOK_NAMES = (
    "beforeCreate",
    "created",
    "beforeMount",
    "mounted",
    "beforeUpdate",
    "updated",
    "activated",
    "deactivated",
    "beforeDestroy",
    "destroyed",
    "beforeUnmount",
    "unmounted",
    "setup",
)

# Entry patterns, one family per bag
_METHOD_ENTRY = (
    re.compile(r"^([\w$]+)\s*[:=]\s*(?:async\s*)?(?:function\s*)?\("),
    re.compile(r"^(?:async\s+)?([\w$]+)\s*\("),
)
_COMPUTED_ENTRY = (
    re.compile(r"^([\w$]+)\s*[:=]\s*(?:async\s*)?(?:function\s*\(|\(|\{)"),
    re.compile(r"^(?:async\s+)?([\w$]+)\s*\("),
)
_WATCH_ENTRY = (
    re.compile(r"""^['"]?([\w$.]+)['"]?\s*[:=]\s*(?:async\s*)?(?:function\s*)?[({'"]"""),
    re.compile(r"""^(?:async\s+)?['"]?([\w$.]+)['"]?\s*\("""),
)
_PROP_ENTRY = (re.compile(r"""^['"]?([\w$]+)['"]?\s*[:=]"""),)
_DATA_ENTRY = (re.compile(r"""^['"]?([\w$]+)['"]?\s*(?:[:=]|,|$)"""),)
_COMPONENT_ENTRY = (re.compile(r"""^['"]?([\w$-]+)['"]?\s*(?::|,|$)"""),)

_DATA_OBJECT_HEADER = re.compile(r"(?:[:=]|=>)\s*\(?\s*\{$")
_RETURN_OBJECT = re.compile(r"\breturn\s*\(?\s*\{$")
_QUOTED_NAME = re.compile(r"""['"]([\w$-]+)['"]""")


@dataclass(frozen=True)
class _OptionKey:
    """A recognized key of a component-options object."""

    name: str
    pattern: re.Pattern[str]
    kind: ElementKind
    bag: str | None = None


def _hook_key(name: str) -> _OptionKey:
    pattern = re.compile(
        rf"^(?:async\s+)?{name}\s*"
        r"(?:\([^)]*\)|[:=]\s*(?:async\s+)?(?:function\s*)?\([^)]*\)(?:\s*=>)?)\s*\{"
    )
    return _OptionKey(name, pattern, ElementKind.METHOD)


OPTION_KEYS: tuple[_OptionKey, ...] = (
    _OptionKey("name", re.compile(r"""^name\s*[:=]\s*['"`]"""), ElementKind.PROPERTY),
    _OptionKey(
        "data",
        re.compile(
            r"^data\s*(?:\([^)]*\)\s*\{|[:=]\s*(?:function\s*\([^)]*\)\s*\{"
            r"|\([^)]*\)\s*=>\s*\(?\s*\{|\{))"
        ),
        ElementKind.PROPERTY,
        bag="data",
    ),
    _OptionKey("methods", re.compile(r"^methods\s*[:=]\s*\{"), ElementKind.PROPERTY, bag="methods"),
    _OptionKey("computed", re.compile(r"^computed\s*[:=]\s*\{"), ElementKind.PROPERTY, bag="computed"),
    _OptionKey("watch", re.compile(r"^watch\s*[:=]\s*\{"), ElementKind.PROPERTY, bag="watch"),
    _OptionKey("props", re.compile(r"^props\s*[:=]\s*[{\[]"), ElementKind.PROPERTY, bag="props"),
    _OptionKey(
        "components", re.compile(r"^components\s*[:=]\s*\{"), ElementKind.PROPERTY, bag="components"
    ),
    *(_hook_key(name) for name in _HOOK_NAMES),
)


@dataclass(frozen=True)
class _Segment:
    """A piece of a line in the options object, split at braces and commas."""

    text: str
    index: int


@dataclass
class _Bag:
    """An option whose block is being collected for a sub-scan."""

    key: _OptionKey
    element: Element
    depth: int
    segments: list[_Segment] = field(default_factory=list)
    # a props array collected until its `]`; depth counts brackets, not braces
    brackets: bool = False

    def delta(self, text: str) -> int:
        return _bracket_delta(text) if self.brackets else _brace_delta(text)


def _is_comment(stripped: str) -> bool:
    return not stripped or stripped.startswith(("//", "*", "/*"))


def _brace_delta(text: str) -> int:
    return text.count("{") - text.count("}")


def _bracket_delta(text: str) -> int:
    return text.count("[") - text.count("]")


def _split_segments(text: str, index: int) -> list[_Segment]:
    """Split a line after each ``{`` and top-level ``,`` and before each ``}``."""
    pieces: list[str] = []
    buf: list[str] = []
    parens = 0
    for ch in text:
        if ch == "}" and "".join(buf).strip():
            pieces.append("".join(buf))
            buf = []
        buf.append(ch)
        if ch in "([":
            parens += 1
        elif ch in ")]":
            parens = max(0, parens - 1)
        elif ch == "{" or (ch == "," and parens == 0):
            pieces.append("".join(buf))
            buf = []
    pieces.append("".join(buf))
    return [_Segment(p.strip(), index) for p in pieces if p.strip()]


def _iter_segments(lines: Sequence[str], start: int) -> Iterator[_Segment]:
    for index in range(start, len(lines)):
        stripped = lines[index].strip()
        if _is_comment(stripped):
            continue
        yield from _split_segments(stripped, index)


def _first_match(patterns: Sequence[re.Pattern[str]], text: str) -> re.Match[str] | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


class ScriptScanner:
    """Scanner for JavaScript; see TypedScriptScanner for TypeScript."""

    typed = False

    def __init__(self, settings: ScanSettings | None = None) -> None:
        self._builder = ElementBuilder(settings)

    def scan(self, lines: Sequence[str], offset: int = 0) -> list[Element]:
        """Scan lines and return top-level declarations and any options object."""
        elements: list[Element] = []
        export_depth = 0
        logger.debug("scan_started", scanner=type(self).__name__, lines=len(lines), offset=offset)

        for index, raw in enumerate(lines):
            stripped = raw.strip()
            if _is_comment(stripped):
                continue

            if export_depth > 0:
                export_depth += _brace_delta(stripped)
                continue

            if _EXPORT_OPTIONS.search(stripped):
                export = self._builder.placeholder(
                    EXPORT_DEFAULT_NAME, ElementKind.CLASS, index + 1 + offset
                )
                export.children = self._scan_options(lines, index, offset)
                elements.append(export)
                export_depth = _brace_delta(stripped)
                continue

            element = self._declaration(stripped, index, lines, offset)
            if element is not None:
                elements.append(element)

        logger.debug("scan_finished", scanner=type(self).__name__, elements=len(elements))
        return elements

    def _declaration(
        self, line: str, index: int, lines: Sequence[str], offset: int
    ) -> Element | None:
        """A class, function, interface or enum declared on this line."""
        line_no = index + 1 + offset

        match = _CLASS.search(line)
        if match:
            return self._builder.build(match.group(1), ElementKind.CLASS, line_no, line, lines, index)

        match = _first_match(_FUNCTIONS, line)
        if match:
            parameters, return_type = self._signature(line, match.end() - 1)
            return self._builder.build(
                match.group(1),
                ElementKind.FUNCTION,
                line_no,
                line,
                lines,
                index,
                return_type=return_type,
                parameters=parameters,
            )

        if not self.typed:
            return None

        match = _INTERFACE.search(line)
        if match:
            return self._builder.build(
                match.group(1), ElementKind.INTERFACE, line_no, line, lines, index
            )

        match = _ENUM.search(line)
        if match:
            return self._builder.build(match.group(1), ElementKind.ENUM, line_no, line, lines, index)

        return None

    def _signature(self, line: str, paren: int) -> tuple[str | None, str | None]:
        """Parameter text and (typed only) return annotation starting at ``paren``."""
        match = _SIGNATURE.match(line, paren)
        if not match:
            return None, None
        return_type = match.group(2) if self.typed else None
        return match.group(1).strip(), return_type

    def _scan_options(self, lines: Sequence[str], start: int, offset: int) -> list[Element]:
        """Mine the object literal exported on lines[start] for component options."""
        segments = _iter_segments(lines, start)
        head = next(segments, None)
        if head is None:
            return []

        depth = _brace_delta(head.text)
        options: list[Element] = []
        bag: _Bag | None = None

        for segment in segments:
            if depth <= 0:
                break
            delta = _brace_delta(segment.text)
            level = depth
            depth += delta

            if bag is not None:
                bag.segments.append(segment)
                bag.depth += bag.delta(segment.text)
                if bag.depth <= 0:
                    self._fill_bag(bag, lines, offset)
                    bag = None
                continue

            if level != 1:
                continue

            for key in OPTION_KEYS:
                if not key.pattern.search(segment.text):
                    continue
                element = self._entry(key.name, key.kind, segment, lines, offset)
                options.append(element)
                if key.bag is not None and delta > 0:
                    bag = _Bag(key, element, depth=delta, segments=[segment])
                elif key.bag == "props":
                    open_brackets = _bracket_delta(segment.text[segment.text.index("[") :])
                    if open_brackets > 0:
                        bag = _Bag(key, element, open_brackets, [segment], brackets=True)
                    else:
                        element.children = self._prop_names([segment], lines, offset)
                break

        # Unterminated block: keep whatever entries it already holds
        if bag is not None:
            self._fill_bag(bag, lines, offset)

        return options

    def _fill_bag(self, bag: _Bag, lines: Sequence[str], offset: int) -> None:
        segments = bag.segments
        if bag.brackets:
            entries = self._prop_names(segments, lines, offset)
        elif bag.key.bag == "methods":
            entries = self._block_entries(
                segments, _METHOD_ENTRY, ElementKind.METHOD, lines, offset, with_params=True
            )
        elif bag.key.bag == "computed":
            entries = self._block_entries(segments, _COMPUTED_ENTRY, ElementKind.PROPERTY, lines, offset)
        elif bag.key.bag == "watch":
            entries = self._block_entries(
                segments, _WATCH_ENTRY, ElementKind.METHOD, lines, offset, with_params=True
            )
        elif bag.key.bag == "props":
            entries = self._block_entries(segments, _PROP_ENTRY, ElementKind.PROPERTY, lines, offset)
        elif bag.key.bag == "components":
            entries = self._block_entries(
                segments, _COMPONENT_ENTRY, ElementKind.VARIABLE, lines, offset
            )
        else:
            entries = self._data_entries(segments, lines, offset)
        bag.element.children = entries

    def _block_entries(
        self,
        segments: Sequence[_Segment],
        patterns: Sequence[re.Pattern[str]],
        kind: ElementKind,
        lines: Sequence[str],
        offset: int,
        with_params: bool = False,
    ) -> list[Element]:
        """Entries written directly inside the block opened by segments[0].

        Anything nested deeper (method bodies, prop option objects) is skipped.
        """
        entries: list[Element] = []
        level = _brace_delta(segments[0].text)
        for segment in segments[1:]:
            if level <= 0:
                break
            if level == 1:
                match = _first_match(patterns, segment.text)
                if match:
                    parameters = None
                    if with_params:
                        params = _SIGNATURE.search(segment.text, match.end(1))
                        parameters = params.group(1).strip() if params else ""
                    entries.append(
                        self._entry(match.group(1), kind, segment, lines, offset, parameters)
                    )
            level += _brace_delta(segment.text)
        return entries

    def _data_entries(
        self, segments: Sequence[_Segment], lines: Sequence[str], offset: int
    ) -> list[Element]:
        """Keys of the state object, either written inline or returned by a function."""
        if _DATA_OBJECT_HEADER.search(segments[0].text):
            return self._block_entries(segments, _DATA_ENTRY, ElementKind.VARIABLE, lines, offset)

        for position, segment in enumerate(segments[1:], start=1):
            if _RETURN_OBJECT.search(segment.text):
                return self._block_entries(
                    segments[position:], _DATA_ENTRY, ElementKind.VARIABLE, lines, offset
                )
        return []

    def _prop_names(
        self, segments: Sequence[_Segment], lines: Sequence[str], offset: int
    ) -> list[Element]:
        """Props declared as an array of names: ``props: ['a', 'b']``, on one line or many."""
        head = segments[0].text
        texts = [head[head.index("[") :], *(s.text for s in segments[1:])]
        return [
            self._entry(name, ElementKind.PROPERTY, segment, lines, offset)
            for segment, text in zip(segments, texts)
            for name in _QUOTED_NAME.findall(text)
        ]

    def _entry(
        self,
        name: str,
        kind: ElementKind,
        segment: _Segment,
        lines: Sequence[str],
        offset: int,
        parameters: str | None = None,
    ) -> Element:
        return self._builder.build(
            name,
            kind,
            segment.index + 1 + offset,
            lines[segment.index],
            lines,
            segment.index,
            parameters=parameters,
        )


class TypedScriptScanner(ScriptScanner):
    """Scanner for TypeScript: adds interfaces, enums and return annotations."""

    typed = True
