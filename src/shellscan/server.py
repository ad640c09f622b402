"""MCP Server implementation."""

from __future__ import annotations

import logging
from typing import Any

import uvicorn
from mcp.server import Server
from mcp.server.sse import SseServerTransport

from shellscan.config import Settings, get_settings, setup_logging
from shellscan.tools import register_tools

# Type aliases for ASGI
Scope = dict[str, Any]
Receive = Any
Send = Any

logger = logging.getLogger(__name__)


def create_server() -> Server:
    """Create and configure the MCP server.

    Returns:
        Configured MCP server instance.
    """
    server = Server("shellscan-server")
    register_tools(server)
    return server


async def _send_text(send: Send, status: int, body: bytes) -> None:
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": [(b"content-type", b"text/plain")],
        }
    )
    await send({"type": "http.response.body", "body": body})


def create_app(server: Server, sse: SseServerTransport) -> Any:
    """Create the ASGI application.

    Args:
        server: The MCP server instance.
        sse: The SSE transport.

    Returns:
        ASGI application callable.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        """Handle ASGI requests."""
        if scope["type"] != "http":
            return

        path: str = scope["path"]
        method: str = scope["method"]

        # GET /sse - SSE Handshake
        if path == "/sse" and method == "GET":
            logger.info(f"New connection from {scope.get('client')}")
            try:
                async with sse.connect_sse(scope, receive, send) as streams:
                    logger.info("Handshake success. Server running...")
                    await server.run(
                        streams[0],
                        streams[1],
                        server.create_initialization_options(),
                    )
                logger.info("Connection closed")
            except Exception as e:
                logger.error(f"Connection error: {e}")
            return

        # POST /messages - Message handling
        if path == "/messages" and method == "POST":
            logger.debug(f"Message received (POST {path})")
            await sse.handle_post_message(scope, receive, send)
            return

        # POST /sse - client probe
        if path == "/sse" and method == "POST":
            await _send_text(send, 200, b"OK")
            return

        await _send_text(send, 404, b"Not Found")

    return app


def run_server(settings: Settings | None = None) -> None:
    """Run the MCP server.

    Args:
        settings: Optional settings override.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    server = create_server()
    sse = SseServerTransport("/messages")
    app = create_app(server, sse)

    print("=" * 60)
    print("SHELLSCAN MCP SERVER")
    print(f"Listening on {settings.server_host}:{settings.server_port}")
    print("=" * 60)

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
