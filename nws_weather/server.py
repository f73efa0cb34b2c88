import argparse
import logging
import signal
from typing import Optional

from pydantic import create_model

from .config import TRANSPORTS, Settings, configure_logging
from .tools import ToolDescriptor, ToolRouter, build_router

logger = logging.getLogger("nws_weather.server")

INSTRUCTIONS = "A simple weather forecaster"


def get_mcp(settings: Optional[Settings] = None):
    """Create a FastMCP server instance with no tools registered."""
    from mcp.server.fastmcp import FastMCP
    settings = settings or Settings.from_env()
    return FastMCP(
        "weather",
        instructions=INSTRUCTIONS,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.http_path,
    )


def _tool_function(router: ToolRouter, name: str):
    async def call(**arguments) -> str:
        return await router.dispatch(name, arguments)

    call.__name__ = name
    return call


def _arguments_model(descriptor: ToolDescriptor):
    from mcp.server.fastmcp.utilities.func_metadata import ArgModelBase
    return create_model(
        f"{descriptor.name}Arguments",
        __base__=(descriptor.params_model, ArgModelBase),
    )


def register_tools_with_mcp(m, router: ToolRouter) -> None:
    """Expose every router tool through the MCP server.

    Each tool advertises and validates against its descriptor's parameter
    model, so unknown or missing arguments are refused before the handler
    runs. The router then dispatches the call, the same way on both
    transports.
    """
    for descriptor in router.descriptors():
        m.add_tool(
            _tool_function(router, descriptor.name),
            name=descriptor.name,
            description=descriptor.description,
        )
        # FastMCP derives the schema from the function signature; replace it
        # with the descriptor's so extras are forbidden on the wire too.
        tool = m._tool_manager.get_tool(descriptor.name)
        tool.parameters = descriptor.parameter_schema
        tool.fn_metadata = tool.fn_metadata.model_copy(update={"arg_model": _arguments_model(descriptor)})


def build_mcp(settings: Settings, router: Optional[ToolRouter] = None):
    """Create a FastMCP server with the router's tools bound to it."""
    m = get_mcp(settings)
    register_tools_with_mcp(m, router or build_router(settings))
    return m


def _stop_on_sigterm(signum, frame):
    raise KeyboardInterrupt


def run_server(transport: str = "stdio", settings: Optional[Settings] = None) -> None:
    """Run the MCP server over the given transport until it is told to stop."""
    if transport not in TRANSPORTS:
        raise ValueError(f"Unsupported transport: {transport}")
    settings = settings or Settings.from_env()
    m = build_mcp(settings)

    if transport == "stdio":
        # uvicorn handles SIGTERM itself for streamable-http
        signal.signal(signal.SIGTERM, _stop_on_sigterm)
        logger.info("Starting weather server on stdio")
    else:
        logger.info(f"Starting weather server on http://{settings.host}:{settings.port}{settings.http_path}")

    try:
        m.run(transport=transport)
    except KeyboardInterrupt:
        pass
    logger.info("Weather server stopped")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="nws-weather", description="NWS weather alerts and forecasts over MCP")
    parser.add_argument("--transport", choices=TRANSPORTS, help="overrides MCP_TRANSPORT")
    parser.add_argument("--export-tools", metavar="PATH", help="write tool metadata as JSON and exit")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    if args.export_tools:
        build_router(settings).export_tools_json(args.export_tools)
        return

    log_file = configure_logging(settings)
    logger.info(f"Logging to {log_file}")
    run_server(args.transport or settings.transport, settings)


if __name__ == "__main__":
    main()
