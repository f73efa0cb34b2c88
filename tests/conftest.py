"""Pytest configuration and fixtures for nws_weather tests."""

from typing import Any, Callable, Dict, List, Union

import httpx
import pytest

from nws_weather.config import Settings
from nws_weather.nws import NWSClient

API_BASE = "https://api.weather.gov"
FORECAST_URL = "https://api.weather.gov/gridpoints/LOX/155,45/forecast"

Route = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


def alert_feature(event: str = "Heat Advisory", area: str = "Los Angeles County", **overrides) -> Dict[str, Any]:
    properties = {
        "event": event,
        "areaDesc": area,
        "severity": "Moderate",
        "status": "Actual",
        "headline": f"{event} issued for {area}",
        "description": "Hot temperatures expected.",
    }
    properties.update(overrides)
    return {"id": f"urn:oid:{event}", "type": "Feature", "properties": properties}


def alerts_payload(*features: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


def points_payload(forecast_url: str = FORECAST_URL) -> Dict[str, Any]:
    return {"properties": {"forecast": forecast_url, "gridId": "LOX", "gridX": 155, "gridY": 45}}


def forecast_period(name: str = "Tonight", temperature: int = 61, **overrides) -> Dict[str, Any]:
    period = {
        "number": 1,
        "name": name,
        "temperature": temperature,
        "temperatureUnit": "F",
        "windSpeed": "5 mph",
        "windDirection": "SW",
        "shortForecast": "Mostly Clear",
        "detailedForecast": "Mostly clear, with a low around 61.",
    }
    period.update(overrides)
    return period


def forecast_payload(*periods: Dict[str, Any]) -> Dict[str, Any]:
    return {"properties": {"periods": list(periods)}}


class FakeNWS:
    """Routes requests by full URL and records every request it sees."""

    def __init__(self):
        self.routes: Dict[str, Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, url: str, route: Route) -> None:
        self.routes[str(httpx.URL(url))] = route

    def add_json(self, url: str, payload: Any, status_code: int = 200) -> None:
        self.add(url, lambda request: httpx.Response(status_code, json=payload))

    def urls(self) -> List[str]:
        return [str(request.url) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, json={"title": "Not Found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base=API_BASE, user_agent="weather-app/test", timeout=5.0)


@pytest.fixture
def fake_nws() -> FakeNWS:
    return FakeNWS()


@pytest.fixture
def nws_client(settings: Settings, fake_nws: FakeNWS) -> NWSClient:
    return NWSClient(settings, transport=httpx.MockTransport(fake_nws))
