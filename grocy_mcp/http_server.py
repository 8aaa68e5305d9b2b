"""HTTP/SSE transport for the MCP server."""

import logging
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from mcp.server.sse import SseServerTransport

from . import __version__
from .config.settings import TransportSettings

if TYPE_CHECKING:
    from .server import GrocyMCPServer

logger = logging.getLogger(__name__)

SSE_PATH = "/sse"
MESSAGES_PATH = "/messages/"


def create_app(mcp_server: "GrocyMCPServer") -> FastAPI:
    """FastAPI app serving one MCP session per SSE connection."""
    app = FastAPI(title="Grocy MCP Server", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    sse = SseServerTransport(MESSAGES_PATH)

    @app.get("/")
    async def health():
        return {
            "status": "ok",
            "service": "grocy-mcp",
            "version": __version__,
            "tools": len(mcp_server.dispatcher.list_definitions()),
            "endpoints": {"sse": SSE_PATH, "messages": MESSAGES_PATH},
        }

    @app.get(SSE_PATH)
    async def handle_sse(request: Request):
        logger.info(f"SSE connection from {request.client.host if request.client else 'unknown'}")
        async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            await mcp_server.server.run(read_stream, write_stream, mcp_server.initialization_options())
        return Response()

    app.mount(MESSAGES_PATH, app=sse.handle_post_message)
    return app


async def run_http_server(mcp_server: "GrocyMCPServer", settings: TransportSettings):
    """Serve the HTTP/SSE transport until cancelled."""
    app = create_app(mcp_server)
    config = uvicorn.Config(app, host=settings.host, port=settings.port, log_level="info")
    server = uvicorn.Server(config)
    logger.info(f"HTTP transport listening on http://{settings.host}:{settings.port}{SSE_PATH}")
    await server.serve()
