"""
Strava tools over MCP (stdio transport).

Tool failures never surface as protocol errors: they come back as a normal
result whose single text block reads "Error: <message>". Clients that need to
detect failure must inspect the text.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Mapping

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from strava_common.errors import MissingCredential
from strava_config.settings import SERVER_VERSION, init_runtime, load_settings
from strava_mcp.connectors.strava import StravaClient
from strava_mcp.registry import TOOLS, get_tool, invoke


logger = logging.getLogger(__name__)

SERVER_NAME = "strava-mcp-server"
STDIO_CLIENT_ID = "stdio"


def call_tool_text(client: StravaClient, name: str, arguments: Mapping[str, Any] | None) -> str:
    """Dispatch one tool call and render the text block the client will see."""
    try:
        tool = get_tool(name)
        result = invoke(tool, arguments, client, client_id=STDIO_CLIENT_ID)
    except Exception as e:
        logger.warning("Tool %s failed: %s", name, e)
        return f"Error: {e}"
    return json.dumps(result, indent=2, ensure_ascii=False)


def list_tool_definitions() -> list[types.Tool]:
    return [types.Tool(name=t.name, description=t.description, inputSchema=t.input_schema()) for t in TOOLS]


def build_server(client: StravaClient) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return list_tool_definitions()

    # Argument problems are reported as "Error: ..." text like every other failure,
    # so the protocol layer must not reject calls against the schema first.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        # requests is blocking; keep the event loop free to read further messages.
        text = await anyio.to_thread.run_sync(call_tool_text, client, name, arguments or {})
        return [types.TextContent(type="text", text=text)]

    return server


async def serve_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Strava MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    # Entry points (console_scripts) call main() directly, so we must perform
    # runtime initialization here (dotenv + logging).
    init_runtime()
    try:
        settings = load_settings()
    except MissingCredential as e:
        logger.error("%s", e)
        sys.exit(1)

    client = StravaClient(settings)
    try:
        anyio.run(serve_stdio, build_server(client))
    finally:
        client.http.close()


if __name__ == "__main__":
    main()
