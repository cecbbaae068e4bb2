"""Integration tests for the command line interface."""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from codestruct.cli import app

runner = CliRunner()

CSHARP = """\
namespace Foo
{
    public class Bar
    {
        // Creates a bar
        public Bar()
        {
        }

        public void Baz(int x)
        {
        }
    }
}
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def cs_file(temp_dir: Path) -> Path:
    path = temp_dir / "Bar.cs"
    path.write_text(CSHARP)
    return path


class TestOutlineCommand:
    """Tests for `codestruct outline`."""

    def test_tree_output(self, cs_file: Path) -> None:
        result = runner.invoke(app, ["outline", str(cs_file)])

        assert result.exit_code == 0
        assert "Foo" in result.stdout
        assert "Baz(int x)" in result.stdout
        assert "Description:" in result.stdout

    def test_no_docs(self, cs_file: Path) -> None:
        result = runner.invoke(app, ["outline", "--no-docs", str(cs_file)])

        assert result.exit_code == 0
        assert "Description:" not in result.stdout

    def test_json_output(self, cs_file: Path) -> None:
        result = runner.invoke(app, ["outline", "--json", "--offset", "10", str(cs_file)])

        assert result.exit_code == 0
        (entry,) = json.loads(result.stdout)
        assert entry["file"] == str(cs_file)
        (foo,) = entry["elements"]
        assert foo["name"] == "Foo"
        assert foo["line"] == 11
        bar = foo["children"][0]
        assert [c["name"] for c in bar["children"]] == ["Bar", "Baz"]
        assert bar["children"][0]["kind"] == "constructor"
        assert bar["children"][0]["children"][0]["pseudo"] is True

    def test_json_without_docs(self, cs_file: Path) -> None:
        result = runner.invoke(app, ["outline", "--json", "--no-docs", str(cs_file)])

        (entry,) = json.loads(result.stdout)
        constructor = entry["elements"][0]["children"][0]["children"][0]
        assert constructor["children"] == []
        assert constructor["comment"] == "Creates a bar"

    def test_kind_override(self, temp_dir: Path) -> None:
        path = temp_dir / "snippet.txt"
        path.write_text(CSHARP)

        result = runner.invoke(app, ["outline", "--json", "--kind", "cs", str(path)])

        (entry,) = json.loads(result.stdout)
        assert entry["elements"][0]["name"] == "Foo"

    def test_unsupported_is_not_fatal(self, temp_dir: Path) -> None:
        path = temp_dir / "notes.txt"
        path.write_text("hello")

        result = runner.invoke(app, ["outline", str(path)])

        assert result.exit_code == 0
        assert "Unsupported" in result.stdout

    def test_unreadable_file_fails(self, temp_dir: Path, cs_file: Path) -> None:
        result = runner.invoke(app, ["outline", "--json", str(temp_dir / "Gone.cs"), str(cs_file)])

        assert result.exit_code == 1
        missing, found = json.loads(result.stdout)
        assert "Cannot read" in missing["error"]
        assert found["elements"][0]["name"] == "Foo"


class TestKindsCommand:
    """Tests for `codestruct kinds`."""

    def test_json(self) -> None:
        result = runner.invoke(app, ["kinds", "--json"])

        assert result.exit_code == 0
        assert ".vue" in json.loads(result.stdout)

    def test_log_level_option(self) -> None:
        result = runner.invoke(app, ["--log-level", "ERROR", "kinds"])

        assert result.exit_code == 0
        assert ".cs" in result.stdout
