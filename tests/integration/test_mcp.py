"""Integration tests for the MCP tool handlers."""

import asyncio
import json
import tempfile
from pathlib import Path

import pytest

from codestruct.mcp import server


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


def call(name: str, arguments: dict) -> dict:
    """Invoke a tool and decode its JSON payload."""
    contents = asyncio.run(server.call_tool(name, arguments))
    return json.loads(contents[0].text)


class TestTools:
    """Tests for tool dispatch and payloads."""

    def test_list_tools(self) -> None:
        tools = asyncio.run(server.list_tools())

        assert [t.name for t in tools] == ["codestruct_outline", "codestruct_kinds"]

    def test_outline(self, temp_dir: Path) -> None:
        path = temp_dir / "app.js"
        path.write_text("function start(config) {}\n")

        result = call("codestruct_outline", {"path": str(path)})

        assert result["file"] == str(path)
        assert result["elements"][0]["name"] == "start"
        assert result["elements"][0]["parameters"] == "config"

    def test_outline_with_kind(self, temp_dir: Path) -> None:
        path = temp_dir / "snippet"
        path.write_text("<div id='root'></div>\n")

        result = call("codestruct_outline", {"path": str(path), "kind": "html"})

        assert result["elements"][0]["name"] == "root"

    def test_unsupported(self, temp_dir: Path) -> None:
        result = call("codestruct_outline", {"path": str(temp_dir / "a.rb")})

        assert "Unsupported" in result["error"]
        assert result["elements"] == []

    def test_read_error(self, temp_dir: Path) -> None:
        result = call("codestruct_outline", {"path": str(temp_dir / "missing.cs")})

        assert "Cannot read" in result["error"]

    def test_missing_argument(self) -> None:
        result = call("codestruct_outline", {})

        assert "path" in result["error"]

    def test_kinds(self) -> None:
        result = call("codestruct_kinds", {})

        assert ".ts" in result["kinds"]

    def test_unknown_tool(self) -> None:
        result = call("codestruct_nope", {})

        assert result["error"] == "Unknown tool: codestruct_nope"
