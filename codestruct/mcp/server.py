"""MCP server implementation for Codestruct."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from codestruct.core.config import load_config
from codestruct.core.exceptions import CodestructError
from codestruct.core.logging import configure_logging
from codestruct.core.outliner import Outliner

logger = structlog.get_logger()

server = Server("codestruct")

_outliner: Outliner | None = None


def _get_outliner() -> Outliner:
    """Outliner built from the environment configuration, created on first use."""
    global _outliner
    if _outliner is None:
        _outliner = Outliner(settings=load_config().scan)
    return _outliner


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="codestruct_outline",
            description=(
                "Outline the structure of a source file (C#, Java, JavaScript, TypeScript, "
                "Vue, HTML): namespaces, classes, methods, properties, fields and markup "
                "elements, nested, with line numbers and doc comments."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path of the file to outline",
                    },
                    "kind": {
                        "type": "string",
                        "description": "Kind key overriding the file extension, e.g. '.cs' (optional)",
                    },
                },
                "required": ["path"],
            },
        ),
        Tool(
            name="codestruct_kinds",
            description="List the file kinds that can be outlined.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "codestruct_outline":
            result = _handle_outline(arguments["path"], arguments.get("kind"))
        elif name == "codestruct_kinds":
            result = _handle_kinds()
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except KeyError as e:
        return [TextContent(type="text", text=json.dumps({"error": f"Missing argument: {e}"}))]
    except CodestructError as e:
        logger.debug("tool_failed", tool=name, error=str(e))
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


def _handle_outline(path: str, kind: str | None) -> dict[str, Any]:
    """Handle codestruct_outline tool."""
    file = Path(path)
    elements = _get_outliner().outline_file(file, kind=kind)

    if elements is None:
        return {"error": f"Unsupported file kind: {file}", "elements": []}

    return {
        "file": str(file),
        "elements": [e.to_dict() for e in elements],
    }


def _handle_kinds() -> dict[str, Any]:
    """Handle codestruct_kinds tool."""
    return {"kinds": sorted(_get_outliner().registry.list_keys())}


async def serve() -> None:
    """Run the MCP server."""
    configure_logging(config=load_config().logging)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
