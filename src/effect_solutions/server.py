"""Effect Solutions MCP Server - best-practice guides exposed over MCP.

The stdio transport is served by the line-delimited front end in
``effect_solutions.protocol``; the http and sse transports are served by
FastMCP with the same tools and resources.
"""

import argparse
import asyncio
import logging
import sys

from fastmcp import FastMCP

from effect_solutions import __version__
from effect_solutions.config import Settings, configure_logging, get_settings
from effect_solutions.context import AppContext, build_context
from effect_solutions.docs.config import DOC_URI_TEMPLATE, MARKDOWN_MIME_TYPE, TOPICS_URI
from effect_solutions.errors import ManifestError
from effect_solutions.protocol import ProtocolSession, serve_stdio
from effect_solutions.protocol.session import SERVER_INSTRUCTIONS, SERVER_NAME
from effect_solutions.tools import get_help, open_issue, search_effect_solutions
from effect_solutions.tools.dispatcher import ToolDispatcher

logger = logging.getLogger("effect-solutions.server")

TRANSPORTS = ("stdio", "http", "sse")


def create_mcp(context: AppContext, dispatcher: ToolDispatcher | None = None) -> FastMCP:
    """Build a FastMCP server exposing the same tools and resources."""
    dispatcher = dispatcher or ToolDispatcher(context)
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    # Register tools
    search_effect_solutions.register(mcp, dispatcher)
    open_issue.register(mcp, dispatcher)
    get_help.register(mcp, dispatcher)

    @mcp.resource(
        TOPICS_URI,
        name="topics",
        description="Index of all Effect Solutions guides",
        mime_type=MARKDOWN_MIME_TYPE,
    )
    def topics() -> str:
        return context.renderer.render_topics()

    @mcp.resource(
        DOC_URI_TEMPLATE,
        name="doc",
        description="A single Effect Solutions guide by slug",
        mime_type=MARKDOWN_MIME_TYPE,
    )
    def doc(slug: str) -> str:
        return context.renderer.render_doc(slug)

    return mcp


def run_server(settings: Settings, transport: str = "stdio", host: str = "127.0.0.1", port: int = 8000) -> int:
    """Load the corpus and serve until the transport closes.

    Returns:
        Process exit code (non-zero when the corpus cannot be loaded)
    """
    try:
        context = build_context(settings)
    except ManifestError as exc:
        logger.error("Cannot start server: %s", exc)
        return 1

    dispatcher = ToolDispatcher(context)

    if transport == "stdio":
        try:
            asyncio.run(serve_stdio(ProtocolSession(context, dispatcher)))
        except KeyboardInterrupt:
            pass
        return 0

    # Suppress noisy uvicorn shutdown messages (e.g. "Cancel N running task(s)")
    logging.getLogger("uvicorn.error").setLevel(logging.CRITICAL)

    mcp = create_mcp(context, dispatcher)
    try:
        mcp.run(transport=transport, host=host, port=port, show_banner=False)
    except KeyboardInterrupt:
        pass
    return 0


def add_transport_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default="stdio",
        help="Transport protocol (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind when using http/sse transport (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind when using http/sse transport (default: 8000)",
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the Effect Solutions MCP server."""
    parser = argparse.ArgumentParser(
        prog="effect-solutions-mcp",
        description="Effect Solutions MCP Server - Effect best-practice guides exposed over MCP",
    )
    parser.add_argument("--version", "-v", action="version", version=f"effect-solutions-mcp {__version__}")
    add_transport_arguments(parser)
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    return run_server(settings, args.transport, args.host, args.port)


if __name__ == "__main__":
    sys.exit(main())
