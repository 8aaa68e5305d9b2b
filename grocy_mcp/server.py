"""MCP Server for the Grocy household management API."""

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from mcp import Tool
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import CallToolResult

from . import __version__
from .config import AppConfig, ConfigurationError, load_config
from .registry.module_loader import DEFAULT_OPERATIONS_PACKAGE
from .registry import (
    DuplicateOperationError,
    ModuleLoader,
    OperationDispatcher,
    OperationRegistry,
    SubConfigValidationError,
    UnknownOperationError,
)

SERVER_NAME = "grocy-mcp"

logger = logging.getLogger(__name__)


class GrocyMCPServer:
    """MCP server exposing the enabled Grocy operations as tools."""

    def __init__(self, dispatcher: OperationDispatcher):
        self.dispatcher = dispatcher
        self.server = Server(SERVER_NAME)
        self._register_handlers()

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[Tool]:
            """List enabled tools."""
            return [definition.to_tool() for definition in self.dispatcher.list_definitions()]

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> CallToolResult:
            """Route a tool call through the dispatcher.

            OperationNotEnabledError propagates; the MCP layer reports it
            as a tool error.
            """
            logger.info(f"Calling tool {name}")
            return await self.dispatcher.invoke(name, arguments)

    def initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=SERVER_NAME,
            server_version=__version__,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
        )

    async def run_stdio(self):
        """Serve MCP over stdin/stdout."""
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream, self.initialization_options())


# ============================================================================
# Startup
# ============================================================================

async def build_registry(config: AppConfig, package: Optional[str] = None) -> OperationRegistry:
    """
    Discover operation modules and aggregate them.

    Raises:
        DuplicateOperationError: On name collisions under the "error" policy
    """
    loader = ModuleLoader(package or DEFAULT_OPERATIONS_PACKAGE)
    bundles = await loader.load_all()
    stats = loader.cache_stats()
    logger.info(f"Loaded {stats['loaded']}/{stats['total']} operation modules")
    return OperationRegistry.from_modules(bundles, duplicate_policy=config.registry.duplicate_names)


async def build_dispatcher(
    config: AppConfig,
    strict_options: bool = False,
    package: Optional[str] = None,
) -> OperationDispatcher:
    """
    Build the dispatcher for ``config``.

    Raises:
        DuplicateOperationError: On operation name collisions
        UnknownOperationError: If an enabled operation does not exist
        SubConfigValidationError: Under ``strict_options``, for the first
            operation whose options are invalid
    """
    registry = await build_registry(config, package)
    dispatcher = OperationDispatcher.from_config(config, registry)

    enabled = dispatcher.list_definitions()
    logger.info(f"{len(enabled)} of {len(registry)} operations enabled")

    if strict_options and dispatcher.option_errors:
        name = sorted(dispatcher.option_errors)[0]
        raise dispatcher.option_errors[name]
    return dispatcher


async def serve(config: AppConfig, dispatcher: OperationDispatcher):
    """Run stdio and, when enabled, the HTTP/SSE transport."""
    mcp_server = GrocyMCPServer(dispatcher)
    tasks = [mcp_server.run_stdio()]

    if config.transport.enabled:
        from .http_server import run_http_server
        tasks.append(run_http_server(mcp_server, config.transport))

    try:
        await asyncio.gather(*tasks)
    finally:
        dispatcher.client.close()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description="MCP server for the Grocy household management API",
    )
    parser.add_argument(
        "--config",
        help="Path to the YAML configuration file (default: $GROCY_MCP_CONFIG or ./grocy-mcp.yaml)",
    )
    parser.add_argument(
        "--strict-options",
        action="store_true",
        help="Refuse to start when an enabled operation has invalid options",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO").upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: $LOG_LEVEL or INFO)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point for the MCP server."""
    args = parse_args(argv)
    # stdout carries the stdio transport
    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        dispatcher = asyncio.run(build_dispatcher(config, strict_options=args.strict_options))
    except ConfigurationError as e:
        logger.error(f"Invalid configuration ({e.source}):")
        for path, message in e.issues:
            logger.error(f"  {path}: {message}")
        sys.exit(1)
    except UnknownOperationError as e:
        logger.error(f"Unknown operations enabled in configuration: {', '.join(e.invalid)}")
        logger.error(f"Valid operations: {', '.join(e.valid)}")
        sys.exit(1)
    except DuplicateOperationError as e:
        for name, first, second in e.duplicates:
            logger.error(f"Operation {name} is defined by both {first} and {second}")
        sys.exit(1)
    except SubConfigValidationError as e:
        logger.error(f"Refusing to start, invalid options for {e.operation}: {e}")
        sys.exit(1)

    logger.info(f"Starting {SERVER_NAME} {__version__}")
    asyncio.run(serve(config, dispatcher))


if __name__ == "__main__":
    main()
