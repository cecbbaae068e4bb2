"""Container scanner for single-file components (``.vue``).

The file is cut into regions by its outer ``<template>``, ``<script>`` and
``<style>`` tags. The template region is skipped, each script region is
handed to the script scanner with a line offset so reported lines point into
the whole file, and each style region becomes a placeholder element. A file
without any of these tags is scanned as one script.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

import structlog

from codestruct.core.config import ScanSettings
from codestruct.core.models import Element, ElementKind
from codestruct.languages.builder import ElementBuilder
from codestruct.languages.markup import attribute
from codestruct.languages.script import ScriptScanner, TypedScriptScanner

logger = structlog.get_logger()

_REGION_OPEN = re.compile(r"^<(template|script|style)\b([^>]*)>", re.IGNORECASE)
_TEMPLATE_OPEN = re.compile(r"<template\b", re.IGNORECASE)
_TEMPLATE_CLOSE = re.compile(r"</template\s*>", re.IGNORECASE)
_TYPED_LANGS = frozenset({"ts", "tsx"})

SCRIPT_REGION_NAME = "script"
STYLE_REGION_NAME = "style"


class ContainerScanner:
    """Scanner for files made of template, script and style regions."""

    def __init__(self, settings: ScanSettings | None = None) -> None:
        self.settings = settings
        self._builder = ElementBuilder(settings)

    def scan(self, lines: Sequence[str], offset: int = 0) -> list[Element]:
        """Scan lines and return one element per script or style region."""
        elements: list[Element] = []
        found_region = False
        index = 0
        logger.debug("scan_started", scanner=type(self).__name__, lines=len(lines), offset=offset)

        while index < len(lines):
            match = _REGION_OPEN.match(lines[index].strip())
            if not match:
                index += 1
                continue

            found_region = True
            region = match.group(1).lower()
            attrs = match.group(2)

            if region == "template":
                index = self._skip_template(lines, index)
            elif region == "script":
                element, index = self._script(lines, index, attrs, offset)
                elements.append(element)
            else:
                elements.append(self._style(attrs, index + 1 + offset))
                index = _find_close(lines, index, "style")
            index += 1

        if not found_region:
            return ScriptScanner(self.settings).scan(lines, offset)

        logger.debug("scan_finished", scanner=type(self).__name__, elements=len(elements))
        return elements

    def _script(
        self, lines: Sequence[str], start: int, attrs: str, offset: int
    ) -> tuple[Element, int]:
        """Delegate a script region; returns its element and the closing line index."""
        end = _find_close(lines, start, "script")
        content = list(lines[start : end + 1])

        # Keep code written on the tag lines themselves, drop the tags
        first = content[0]
        tag_end = first.find(">")
        content[0] = " " * (tag_end + 1) + first[tag_end + 1 :]
        last = content[-1]
        close = last.lower().find("</script")
        if close >= 0:
            content[-1] = last[:close]

        lang = (attribute(attrs, "lang") or "").lower()
        scanner = (
            TypedScriptScanner(self.settings) if lang in _TYPED_LANGS else ScriptScanner(self.settings)
        )
        element = self._builder.placeholder(SCRIPT_REGION_NAME, ElementKind.MODULE, start + 1 + offset)
        element.children = scanner.scan(content, offset + start)
        return element, end

    def _style(self, attrs: str, line: int) -> Element:
        name = STYLE_REGION_NAME
        if re.search(r"(?:^|\s)scoped\b", attrs):
            name = f"{STYLE_REGION_NAME} scoped"
        return self._builder.placeholder(name, ElementKind.MODULE, line)

    @staticmethod
    def _skip_template(lines: Sequence[str], start: int) -> int:
        """Index of the line closing the template region; nested templates are counted."""
        nesting = 0
        for index in range(start, len(lines)):
            line = lines[index]
            nesting += len(_TEMPLATE_OPEN.findall(line)) - len(_TEMPLATE_CLOSE.findall(line))
            if nesting <= 0:
                return index
        return len(lines) - 1


def _find_close(lines: Sequence[str], start: int, tag: str) -> int:
    """Index of the line holding ``</tag>``, or the last line when unterminated."""
    closer = f"</{tag}"
    for index in range(start, len(lines)):
        if closer in lines[index].lower():
            return index
    return len(lines) - 1
