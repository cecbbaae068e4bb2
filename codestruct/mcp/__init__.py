"""
MCP server for Codestruct.

Exposes structural outlines to LLMs via the Model Context Protocol.

Tools:
    - codestruct_outline: Outline the elements of one source file
    - codestruct_kinds: List the supported file kinds

Usage:
    Install: pip install codestruct
    Run: mcp-server-codestruct
"""

import asyncio

from codestruct.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
