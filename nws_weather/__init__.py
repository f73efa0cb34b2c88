"""NWS weather alerts and forecasts as MCP tools.

`nws_weather.server` is imported lazily so that `python -m nws_weather.server`
does not find the module already in `sys.modules` and emit a runpy
`RuntimeWarning`.
"""

from importlib import import_module

from .client import StdioToolClient, ToolClientError
from .config import Settings
from .formatting import format_alerts, format_forecast
from .nws import DecodeError, FetchError, NWSClient, StatusError, TransportError
from .tools import ToolDescriptor, ToolNotFoundError, ToolRouter, ToolValidationError, build_router

__all__ = [
    "StdioToolClient",
    "ToolClientError",
    "Settings",
    "format_alerts",
    "format_forecast",
    "FetchError",
    "TransportError",
    "StatusError",
    "DecodeError",
    "NWSClient",
    "ToolDescriptor",
    "ToolRouter",
    "ToolNotFoundError",
    "ToolValidationError",
    "build_router",
    "get_mcp",
    "register_tools_with_mcp",
    "build_mcp",
    "run_server",
]

# Attributes provided by the server module, imported on first access.
_server_attrs = {
    "get_mcp",
    "register_tools_with_mcp",
    "build_mcp",
    "run_server",
}


def _load_server():
    return import_module(".server", __package__)


def __getattr__(name: str):
    if name in _server_attrs:
        return getattr(_load_server(), name)
    raise AttributeError(f"module {__name__} has no attribute {name}")


def __dir__():
    return sorted(list(globals().keys()) + list(_server_attrs))
