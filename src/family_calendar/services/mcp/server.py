from __future__ import annotations

import logging
from typing import Optional

from fastmcp import FastMCP

from ...api import get_api_functions
from ...config import get_settings
from ...logging import configure_logging

INSTRUCTIONS = (
    "Family Calendar MCP server exposes the shared family calendar. "
    "Every tool that acts on a calendar takes the caller's actor_id; owner_id defaults to the caller."
)

logger = logging.getLogger(__name__)

server = FastMCP(name="family-calendar", instructions=INSTRUCTIONS)

for api_function in get_api_functions():
    logger.debug("Registering MCP tool: %s", api_function.name)
    server.tool(
        api_function.func,
        name=api_function.name,
        description=api_function.description,
        tags=set(api_function.tags) | {api_function.category},
    )


def run_mcp_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import asyncio

    settings = get_settings().server
    configure_logging(settings.log_level)
    logger.info("Serving Family Calendar MCP tools on %s:%s", host or settings.host, port or settings.mcp_port)
    asyncio.run(server.run_streamable_http_async(host=host or settings.host, port=port or settings.mcp_port))
