"""
Pydantic models for NWS payloads and tool parameters.

Provider payloads are decoded into these models once per request. Every field
the formatters use is required: a missing or null value fails decoding rather
than falling back to a default.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AlertFeature(_Payload):
    """A single active alert, taken from a feature's `properties` object."""

    event: str
    area_description: str = Field(alias="areaDesc")
    severity: str
    status: str
    headline: str


class _AlertEnvelope(_Payload):
    properties: AlertFeature


class AlertsResponse(_Payload):
    """Payload of `/alerts/active?area={state}`."""

    features: list[_AlertEnvelope]

    @property
    def alerts(self) -> list[AlertFeature]:
        return [feature.properties for feature in self.features]


class _PointProperties(_Payload):
    forecast: str


class PointsResponse(_Payload):
    """Payload of `/points/{latitude},{longitude}`."""

    properties: _PointProperties

    @property
    def forecast_url(self) -> str:
        return self.properties.forecast


class ForecastPeriod(_Payload):
    """One forecast time slot."""

    name: str
    temperature: int
    temperature_unit: str = Field(alias="temperatureUnit")
    wind_speed: str = Field(alias="windSpeed")
    wind_direction: str = Field(alias="windDirection")
    short_forecast: str = Field(alias="shortForecast")


class _ForecastProperties(_Payload):
    periods: list[ForecastPeriod]


class ForecastResponse(_Payload):
    """Payload of the grid forecast endpoint returned by a points lookup."""

    properties: _ForecastProperties

    @property
    def periods(self) -> list[ForecastPeriod]:
        return list(self.properties.periods)


class _Params(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class GetAlertsRequest(_Params):
    """Parameters of the `get_alerts` tool."""

    state: str = Field(description="the US state to get alerts for")


class Coordinates(_Params):
    """Parameters of the `get_forecast` tool.

    Both values are decimal-degree text and are sent to the provider verbatim.
    """

    latitude: str = Field(description="latitude of the location in decimal format")
    longitude: str = Field(description="longitude of the location in decimal format")
