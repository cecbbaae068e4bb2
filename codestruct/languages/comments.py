"""Documentation and comment extraction above a declaration line.

Two independent passes look upward from the declaration:

1. Documentation blocks: consecutive ``///`` lines, mined for ``<summary>``,
   ``<param name="...">`` and ``<returns>`` tags.
2. Plain comments: the nearest ``//`` line or ``/* ... */`` block.

The documentation pass wins for the summary; parameter and return
descriptions only ever come from it. Both passes are bounded by a lookback
window so a declaration never costs more than a few dozen line reads.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from codestruct.core.models import ParamDescription

DOC_MARKER = "///"

_SUMMARY_TAG = re.compile(r"<summary>([\s\S]*?)</summary>", re.IGNORECASE)
_PARAM_TAG = re.compile(r"""<param\s+name=["']([^"']+)["']>([\s\S]*?)</param>""", re.IGNORECASE)
_RETURNS_TAG = re.compile(r"<returns>([\s\S]*?)</returns>", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

# Lines that may sit between a doc block and its declaration
_PASSABLE_PREFIXES = ("//", "*", "[")


@dataclass
class Documentation:
    """Documentation recovered for one declaration."""

    summary: str | None = None
    params: list[ParamDescription] = field(default_factory=list)
    returns: str | None = None

    def __bool__(self) -> bool:
        return bool(self.summary or self.params or self.returns)


def clean_comment(text: str) -> str:
    """Strip leading slashes, asterisks and whitespace; collapse inner runs of whitespace."""
    cleaned = text.strip()
    while cleaned.startswith("/"):
        cleaned = cleaned[1:].strip()
    while cleaned.startswith("*"):
        cleaned = cleaned[1:].strip()
    return _WHITESPACE.sub(" ", cleaned).strip()


def _clean_span(span: str) -> str:
    """Clean each line of a tag body and rejoin with single spaces."""
    parts = [clean_comment(part) for part in span.split("\n")]
    return _WHITESPACE.sub(" ", " ".join(p for p in parts if p)).strip()


def collect_doc_lines(lines: Sequence[str], index: int, window: int) -> list[str]:
    """Collect the ``///`` block directly above lines[index], top to bottom.

    Blank lines, other ``//`` comments, ``*`` continuation lines and
    ``[Attribute]`` lines may sit between the block and the declaration;
    any other line ends the search.
    """
    if index < 0 or index >= len(lines):
        return []

    collected: list[str] = []
    for i in range(index - 1, max(0, index - window) - 1, -1):
        raw = lines[i]
        line = raw.strip()
        if line.startswith(DOC_MARKER):
            collected.insert(0, raw[raw.index(DOC_MARKER) + len(DOC_MARKER) :].strip())
        elif line and not line.startswith(_PASSABLE_PREFIXES):
            break
    return collected


def parse_doc_block(doc_lines: Sequence[str]) -> Documentation:
    """Mine summary, param and returns tags out of a joined doc block."""
    doc = Documentation()
    if not doc_lines:
        return doc

    text = "\n".join(doc_lines)

    match = _SUMMARY_TAG.search(text)
    if match:
        doc.summary = _clean_span(match.group(1)) or None

    for match in _PARAM_TAG.finditer(text):
        description = _clean_span(match.group(2))
        if match.group(1) and description:
            doc.params.append(ParamDescription(name=match.group(1), description=description))

    match = _RETURNS_TAG.search(text)
    if match:
        doc.returns = _clean_span(match.group(1)) or None

    return doc


def extract_plain_comment(lines: Sequence[str], index: int, window: int) -> str | None:
    """Find the nearest ``//`` line or ``/* */`` block above lines[index]."""
    if index < 0 or index >= len(lines):
        return None

    for i in range(index - 1, max(0, index - window) - 1, -1):
        line = lines[i].strip()

        if line.startswith("//") and not line.startswith(DOC_MARKER):
            return clean_comment(line[2:]) or None

        if "/*" in line:
            parts: list[str] = []
            for j in range(i, min(index + 1, len(lines))):
                comment_line = lines[j].strip()
                if j == i:
                    comment_line = comment_line[comment_line.index("/*") + 2 :]
                if "*/" in comment_line:
                    parts.append(comment_line[: comment_line.index("*/")])
                    break
                parts.append(comment_line)
            return " ".join(c for c in (clean_comment(p) for p in parts) if c) or None

        if line and not line.startswith(("//", "*")):
            break

    return None


def extract_documentation(
    lines: Sequence[str],
    index: int,
    doc_window: int = 20,
    comment_window: int = 5,
) -> Documentation:
    """Recover documentation for the declaration at lines[index].

    The summary comes from the ``<summary>`` tag when present, otherwise from
    the whole cleaned doc block, otherwise from a plain comment.
    """
    doc_lines = collect_doc_lines(lines, index, doc_window)
    doc = parse_doc_block(doc_lines)

    if doc.summary is None and doc_lines:
        whole = " ".join(c for c in (clean_comment(line) for line in doc_lines) if c)
        doc.summary = whole or None

    if doc.summary is None:
        doc.summary = extract_plain_comment(lines, index, comment_window)

    return doc
