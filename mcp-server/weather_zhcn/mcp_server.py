import asyncio
import logging
import os
import sys
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from weather_zhcn import tools
from weather_zhcn.config import Settings, load_settings

SERVER_NAME = "weather-zhcn"
SERVER_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_server(settings: Settings) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tools.list_tools()

    # Input is checked by tools.validate_arguments so every violation is reported.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        return await tools.call_tool(name, arguments, settings)

    return server


async def serve(settings: Settings) -> None:
    server = create_server(settings)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Weather-zhcn MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main(argv: list[str] | None = None) -> None:
    # stdout carries the protocol; basicConfig logs to stderr.
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

    settings = load_settings(sys.argv[1:] if argv is None else argv)
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    main()
