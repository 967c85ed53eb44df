"""Boomerang FastMCP server.

Thin wrapper exposing the fleet run as an MCP tool. All work is delegated to
boomerang.tools and boomerang.services.
"""

import logging

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from boomerang.config import Settings
from boomerang.tools import run_fleet
from boomerang.utils.console import configure_logging

logger = logging.getLogger(__name__)


def create_server() -> FastMCP:
    """Create the MCP server with the fleet tool and a health route.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP("boomerang")

    server.tool()(run_fleet)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


mcp = create_server()


def run_server() -> None:
    """Run the MCP server with the transport chosen by BOOMERANG_TRANSPORT."""
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_colors)

    if settings.transport == "stdio":
        logger.info("Starting Boomerang MCP server (transport=stdio)")
        mcp.run(transport="stdio")
    else:
        logger.info(
            "Starting Boomerang MCP server (transport=http, host=%s, port=%d)",
            settings.http_host,
            settings.http_port,
        )
        mcp.run(transport="http", host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    run_server()
