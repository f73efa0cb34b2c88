import logging

from .models import Coordinates, ForecastPeriod, ForecastResponse, PointsResponse
from .nws import NWSClient

logger = logging.getLogger("nws_weather.forecast")


class ForecastResolver:
    """Turns coordinates into forecast periods.

    The NWS API has no single-call forecast lookup: `/points/{lat},{lon}` names
    the grid endpoint serving that point, and only that endpoint returns
    periods. Either call failing raises its `FetchError` unchanged, and the
    grid call is never made if the points lookup fails.
    """

    def __init__(self, client: NWSClient):
        self.client = client

    def points_url(self, coords: Coordinates) -> str:
        return f"{self.client.api_base}/points/{coords.latitude},{coords.longitude}"

    async def resolve(self, coords: Coordinates) -> list[ForecastPeriod]:
        points = await self.client.fetch(self.points_url(coords), PointsResponse)
        logger.debug(f"Resolved grid endpoint {points.forecast_url} for {coords.latitude},{coords.longitude}")

        forecast = await self.client.fetch(points.forecast_url, ForecastResponse)
        logger.debug(f"Received {len(forecast.periods)} forecast periods from {points.forecast_url}")
        return forecast.periods
