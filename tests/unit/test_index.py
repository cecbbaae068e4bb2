"""Unit tests for the flattened element index."""

import pytest

from codestruct.core.index import ElementIndex
from codestruct.core.models import ElementKind
from codestruct.languages.braces import CSharpScanner

CODE = """\
namespace Foo
{
    public class Bar
    {
        /// <summary>Builds a bar</summary>
        public Bar()
        {
        }

        public void Baz(int x)
        {
        }
    }
}"""


@pytest.fixture
def index() -> ElementIndex:
    """Index over a scanned namespace -> class -> members tree."""
    return ElementIndex(CSharpScanner().scan(CODE.splitlines()))


class TestElementIndex:
    """Tests for parent lookup by position."""

    def test_preorder_entries(self, index: ElementIndex) -> None:
        assert [(e.element.name, e.parent, e.depth) for e in index] == [
            ("Foo", None, 0),
            ("Bar", 0, 1),
            ("Bar", 1, 2),
            ("Description:", 2, 3),
            ("Baz", 1, 2),
        ]
        assert len(index) == 5

    def test_parent_and_ancestors(self, index: ElementIndex) -> None:
        baz = index.find("Baz")

        assert baz == 4
        assert index.parent_of(baz) == 1
        assert index.ancestors(baz) == [1, 0]
        assert index.parent_of(0) is None
        assert index.ancestors(0) == []

    def test_enclosing_class(self, index: ElementIndex) -> None:
        baz = index.find("Baz")
        enclosing = index.enclosing_class(baz)

        assert enclosing is not None
        assert enclosing.name == "Bar"
        assert enclosing.kind == ElementKind.CLASS
        assert index.enclosing_class(0) is None

    def test_find_filters(self, index: ElementIndex) -> None:
        assert index.find("Bar") == 1
        assert index.find("Bar", kind=ElementKind.CONSTRUCTOR) == 2
        assert index.find("Bar", line=6) == 2
        assert index.find("Missing") is None
        assert index.find("Description:") is None

    def test_callables_skip_pseudo(self, index: ElementIndex) -> None:
        assert [index[p].element.name for p in index.callables()] == ["Bar", "Baz"]

    def test_multiple_roots(self) -> None:
        scanned = CSharpScanner().scan(["public class A", "{", "}", "public class B", "{", "}"])

        index = ElementIndex(scanned)

        assert [(e.element.name, e.parent) for e in index] == [("A", None), ("B", None)]
