"""Element construction shared by every scanner."""

from __future__ import annotations

from collections.abc import Sequence

from codestruct.core.config import ScanSettings
from codestruct.core.models import CALLABLE_KINDS, Accessibility, Element, ElementKind
from codestruct.languages.comments import Documentation, clean_comment, extract_documentation

# Checked in order; the first keyword found anywhere on the line wins
_ACCESS_KEYWORDS = (
    ("public", Accessibility.PUBLIC),
    ("private", Accessibility.PRIVATE),
    ("protected", Accessibility.PROTECTED),
    ("internal", Accessibility.INTERNAL),
)


def detect_accessibility(line_text: str) -> Accessibility:
    """Return the access modifier textually present on a declaration line."""
    for keyword, accessibility in _ACCESS_KEYWORDS:
        if keyword in line_text:
            return accessibility
    return Accessibility.DEFAULT


class ElementBuilder:
    """Builds finished elements, including documentation pseudo-children."""

    def __init__(self, settings: ScanSettings | None = None) -> None:
        self.settings = settings or ScanSettings()

    def build(
        self,
        name: str,
        kind: ElementKind,
        line: int,
        line_text: str,
        lines: Sequence[str],
        index: int | None = None,
        return_type: str | None = None,
        parameters: str | None = None,
    ) -> Element:
        """Build an element for a declaration.

        Args:
            name: Declared name
            kind: Element kind
            line: 1-based line in the original document
            line_text: Text of the declaration line (for the access modifier)
            lines: The lines being scanned, used for comment lookback
            index: Position of the declaration within ``lines``; defaults to
                ``line - 1`` when the lines are the whole document
            return_type: Captured return/value type, if any
            parameters: Captured parameter list text, if any
        """
        doc_index = index if index is not None else line - 1
        doc = extract_documentation(
            lines,
            doc_index,
            doc_window=self.settings.doc_window,
            comment_window=self.settings.comment_window,
        )
        comment = clean_comment(doc.summary) if doc.summary else None

        element = Element(
            name=name,
            kind=kind,
            line=line,
            accessibility=detect_accessibility(line_text),
            comment=comment or None,
            return_type=return_type,
            parameters=parameters,
            returns=doc.returns,
            param_descriptions=list(doc.params),
        )

        if kind in CALLABLE_KINDS:
            element.children.extend(self._pseudo_children(element, doc))

        return element

    def placeholder(self, name: str, kind: ElementKind, line: int) -> Element:
        """Build a synthetic element that carries no documentation."""
        return Element(name=name, kind=kind, line=line)

    def _pseudo_children(self, element: Element, doc: Documentation) -> list[Element]:
        """Description, parameters and returns nodes, in that order, each only if non-empty."""
        labels = self.settings.labels
        nodes: list[Element] = []

        if element.comment:
            nodes.append(self._pseudo(labels.description, element.line, element.comment))

        if doc.params:
            params_node = self._pseudo(labels.parameters, element.line, None)
            params_node.children = [
                self._pseudo(p.name, element.line, p.description) for p in doc.params
            ]
            nodes.append(params_node)

        if doc.returns:
            nodes.append(self._pseudo(labels.returns, element.line, doc.returns))

        return nodes

    @staticmethod
    def _pseudo(name: str, line: int, comment: str | None) -> Element:
        return Element(
            name=name,
            kind=ElementKind.VARIABLE,
            line=line,
            comment=comment,
            is_pseudo=True,
        )
