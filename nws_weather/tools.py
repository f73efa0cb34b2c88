import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from .config import Settings
from .forecast import ForecastResolver
from .handlers import AlertsHandler, ForecastHandler
from .models import Coordinates, GetAlertsRequest
from .nws import NWSClient

logger = logging.getLogger("nws_weather.tools")


class ToolError(Exception):
    """A tool call the router refuses to run. Reported to the caller as a protocol error."""


class ToolNotFoundError(ToolError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolValidationError(ToolError):
    def __init__(self, name: str, error: ValidationError):
        super().__init__(f"Invalid arguments for tool {name}: {error}")
        self.name = name
        self.errors = error.errors()


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    params_model: Type[BaseModel]
    handler: Callable[[Any], Awaitable[str]]

    @property
    def parameter_schema(self) -> Dict[str, Any]:
        return self.params_model.model_json_schema()

    def spec(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameter_schema,
        }


class ToolRouter:
    """Holds the registered tools and dispatches calls to them by name.

    Arguments are validated against the tool's parameter model before the
    handler runs, so a malformed call never reaches the network.
    """

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}

    def register(self, descriptor: ToolDescriptor) -> None:
        if descriptor.name in self._tools:
            raise ValueError(f"Tool already registered: {descriptor.name}")
        self._tools[descriptor.name] = descriptor

    def get(self, name: str) -> ToolDescriptor:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def descriptors(self) -> List[ToolDescriptor]:
        return list(self._tools.values())

    def specs(self) -> List[Dict[str, Any]]:
        return [descriptor.spec() for descriptor in self._tools.values()]

    def export_tools_json(self, path: str = "tools.json") -> None:
        """Write the tool metadata to a JSON file."""
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(self.specs(), fh, indent=2)

    async def dispatch(self, name: str, raw_params: Optional[Dict[str, Any]]) -> str:
        descriptor = self.get(name)
        try:
            params = descriptor.params_model.model_validate(raw_params or {})
        except ValidationError as e:
            logger.warning(f"Rejected call to {name}: {e.error_count()} validation error(s)")
            raise ToolValidationError(name, e) from e
        return await descriptor.handler(params)


def build_router(settings: Settings, client: Optional[NWSClient] = None) -> ToolRouter:
    """Create the router with the alerts and forecast tools registered."""
    client = client or NWSClient(settings)
    alerts = AlertsHandler(client)
    forecast = ForecastHandler(ForecastResolver(client))

    async def get_alerts(params: GetAlertsRequest) -> str:
        return await alerts.handle(params.state)

    async def get_forecast(params: Coordinates) -> str:
        return await forecast.handle(params)

    router = ToolRouter()
    router.register(ToolDescriptor(
        name="get_alerts",
        description="Get weather alerts for a US state",
        params_model=GetAlertsRequest,
        handler=get_alerts,
    ))
    router.register(ToolDescriptor(
        name="get_forecast",
        description="Get forecast using latitude and longitude coordinates",
        params_model=Coordinates,
        handler=get_forecast,
    ))
    return router
