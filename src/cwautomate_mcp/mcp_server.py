"""MCP stdio server exposing ConnectWise Automate tools.

Run as: python -m cwautomate_mcp.mcp_server
"""

import asyncio
import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from cwautomate_mcp.config import get_settings
from cwautomate_mcp.dispatcher import ToolDispatcher
from cwautomate_mcp.domains.base import text_result

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lazy-initialized dispatcher
# ---------------------------------------------------------------------------
_dispatcher: ToolDispatcher | None = None


def _get_dispatcher() -> ToolDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = ToolDispatcher()
    return _dispatcher


# ---------------------------------------------------------------------------
# MCP server setup
# ---------------------------------------------------------------------------
server = Server("cwautomate-mcp")


@server.list_tools()
async def list_tools() -> list[Tool]:
    return _get_dispatcher().list_tools()


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> CallToolResult:
    try:
        return await _get_dispatcher().call_tool(name, arguments)
    except Exception as e:
        logger.exception("Tool %s failed", name)
        return text_result(f"Tool {name} failed: {e}", is_error=True)


async def main() -> None:
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        if _dispatcher is not None:
            await _dispatcher.aclose()


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    asyncio.run(main())


if __name__ == "__main__":
    run()
