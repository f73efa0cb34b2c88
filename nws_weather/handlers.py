import logging

from .forecast import ForecastResolver
from .formatting import format_alerts, format_forecast
from .models import AlertsResponse, Coordinates
from .nws import FetchError, NWSClient

logger = logging.getLogger("nws_weather.handlers")

ALERTS_FALLBACK = "No alerts found or an error occurred."
FORECAST_FALLBACK = "No forecast found or an error occurred."


class AlertsHandler:
    """Answers `get_alerts`. Fetch failures become fallback text, never exceptions."""

    def __init__(self, client: NWSClient):
        self.client = client

    def alerts_url(self, state: str) -> str:
        return f"{self.client.api_base}/alerts/active?area={state}"

    async def handle(self, state: str) -> str:
        logger.info(f"Received request for weather alerts in state: {state}")
        try:
            response = await self.client.fetch(self.alerts_url(state), AlertsResponse)
        except FetchError as e:
            logger.error(f"Failed to fetch alerts: {e}")
            return ALERTS_FALLBACK
        return format_alerts(response.alerts)


class ForecastHandler:
    """Answers `get_forecast`.

    A failure in either lookup stage produces the same fallback text; only
    the log shows which request failed.
    """

    def __init__(self, resolver: ForecastResolver):
        self.resolver = resolver

    async def handle(self, coords: Coordinates) -> str:
        logger.info(f"Received coordinates: latitude = {coords.latitude}, longitude = {coords.longitude}")
        try:
            periods = await self.resolver.resolve(coords)
        except FetchError as e:
            logger.error(f"Failed to fetch forecast: {e}")
            return FORECAST_FALLBACK
        return format_forecast(periods)
