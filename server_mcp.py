import asyncio
import json
import logging
import sys

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from src.config import config
from src.services.grok_api import GrokApiClient
from src.services.tools import build_tool_registry
from src.utils.redact import setup_logging

logger = logging.getLogger("grok.mcp")


class ToolCallError(Exception):
    """Raised with a JSON payload; the server reports it as an isError tool result."""


def create_server(client: GrokApiClient) -> Server:
    registry = build_tool_registry(client)
    server = Server("grok-mcp")

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        logger.debug("Received ListTools request")
        return [types.Tool(**definition) for definition in registry.get_definitions()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
        result = await registry.execute(name, arguments or {})
        text = json.dumps(result.payload, indent=2)
        if result.is_error:
            raise ToolCallError(text)
        return [types.TextContent(type="text", text=text)]

    return server


async def serve(client: GrokApiClient) -> None:
    server = create_server(client)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Grok MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main():
    setup_logging(config.LOG_LEVEL)

    try:
        config.validate()
        client = GrokApiClient()
    except ValueError as e:
        logger.error(f"Configuration Error: {e}")
        sys.exit(1)

    logger.info("Starting Grok MCP server...")
    logger.info(f"Using model: {client.default_model}")
    logger.info(f"Default search limit: {client.default_search_limit}")
    asyncio.run(serve(client))


if __name__ == "__main__":
    main()
