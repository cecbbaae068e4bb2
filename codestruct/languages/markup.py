"""Tag-stack scanner for HTML markup.

Every element tag becomes a MODULE element named by its ``id``, else its
``class``, else the tag name. Open tags nest under the innermost open frame;
a closing tag closes the nearest frame with the same tag name, searching from
the top of the stack down, so stray or out-of-order closers are tolerated.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from codestruct.core.config import ScanSettings
from codestruct.core.models import Element, ElementKind
from codestruct.languages.builder import ElementBuilder

logger = structlog.get_logger()

_TAG = re.compile(r"<(/?)([a-zA-Z][\w:-]*)([^<>]*?)(/?)>")
_UNCLOSED_TAG = re.compile(r"<(?:/?[a-zA-Z])[^>]*$")

# Owned by the script and container scanners
EXCLUDED_TAGS = frozenset({"script", "style", "template"})
# Raw text: contents are never tokenized
RAW_TEXT_TAGS = frozenset({"script", "style"})
VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


def attribute(attrs: str, name: str) -> str | None:
    """Value of a quoted or bare attribute in a tag's attribute text."""
    match = re.search(
        rf"""(?:^|\s){name}\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""",
        attrs,
        re.IGNORECASE,
    )
    if not match:
        return None
    value = next((g for g in match.groups() if g is not None), "").strip()
    return value or None


@dataclass
class _TagFrame:
    element: Element
    tag: str
    count: int = 1


class MarkupScanner:
    """Scanner for standalone HTML documents.

    Args:
        settings: Scan settings (unused by markup, accepted for uniformity)
        emit_resources: Emit ``script``/``style`` blocks as placeholder
            elements instead of skipping them silently
    """

    def __init__(self, settings: ScanSettings | None = None, emit_resources: bool = True) -> None:
        self._builder = ElementBuilder(settings)
        self.emit_resources = emit_resources

    def scan(self, lines: Sequence[str], offset: int = 0) -> list[Element]:
        """Scan lines and return the element tree of the document."""
        elements: list[Element] = []
        stack: list[_TagFrame] = []
        raw_tag: str | None = None
        in_comment = False
        pending = ""
        pending_index = 0
        logger.debug("scan_started", scanner=type(self).__name__, lines=len(lines), offset=offset)

        for index, raw in enumerate(lines):
            text = raw

            if raw_tag is not None:
                close = text.lower().find(f"</{raw_tag}")
                if close < 0:
                    continue
                text = text[close:]

            text, in_comment = _strip_comments(text, in_comment)

            head = len(pending)
            if pending:
                text = f"{pending} {text}"
                head += 1
            start_index = pending_index
            pending = ""

            last_end = 0
            for match in _TAG.finditer(text):
                last_end = match.end()
                tag_index = start_index if match.start() < head else index
                closing, tag, attrs, slash = match.groups()
                tag = tag.lower()

                if raw_tag is not None:
                    if closing and tag == raw_tag:
                        raw_tag = None
                    continue

                if closing:
                    _close(stack, tag)
                    continue

                self_closing = bool(slash) or tag in VOID_TAGS
                element = self._open(tag, attrs, tag_index + 1 + offset)
                if tag in RAW_TEXT_TAGS and not self_closing:
                    raw_tag = tag
                if element is None:
                    continue

                if stack:
                    stack[-1].element.children.append(element)
                else:
                    elements.append(element)
                if not self_closing:
                    stack.append(_TagFrame(element, tag))

            if raw_tag is None and not in_comment:
                tail = _UNCLOSED_TAG.search(text, last_end)
                if tail:
                    pending = tail.group(0)
                    pending_index = start_index if tail.start() < head else index

        logger.debug("scan_finished", scanner=type(self).__name__, elements=len(elements))
        return elements

    def _open(self, tag: str, attrs: str, line: int) -> Element | None:
        """Element for an opening tag, or None when the tag is not reported."""
        if tag == "template":
            return None
        if tag in RAW_TEXT_TAGS:
            if not self.emit_resources:
                return None
            name = attribute(attrs, "id") or attribute(attrs, "src") or tag
            return self._builder.placeholder(name, ElementKind.MODULE, line)
        name = attribute(attrs, "id") or attribute(attrs, "class") or tag
        return self._builder.placeholder(name, ElementKind.MODULE, line)


def _close(stack: list[_TagFrame], tag: str) -> None:
    """Close the nearest open frame for ``tag``; unmatched closers are ignored."""
    if tag in EXCLUDED_TAGS:
        return
    for position in range(len(stack) - 1, -1, -1):
        frame = stack[position]
        if frame.tag == tag:
            frame.count -= 1
            if frame.count <= 0:
                del stack[position]
            return


def _strip_comments(text: str, in_comment: bool) -> tuple[str, bool]:
    """Remove ``<!-- -->`` spans; report whether a comment is still open at line end."""
    kept: list[str] = []
    position = 0
    while position < len(text):
        if in_comment:
            end = text.find("-->", position)
            if end < 0:
                return "".join(kept), True
            position = end + 3
            in_comment = False
            continue
        start = text.find("<!--", position)
        if start < 0:
            kept.append(text[position:])
            break
        kept.append(text[position:start])
        position = start + 4
        in_comment = True
    return "".join(kept), in_comment
