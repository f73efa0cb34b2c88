"""Plain-text rendering of alerts and forecasts.

Clients may parse this text, so labels, field order and the `---` delimiter
are fixed.
"""

from typing import Sequence

from .models import AlertFeature, ForecastPeriod

DELIMITER = "---"
NO_ALERTS = "No active alerts found."
NO_FORECAST = "No forecast data available."


def format_alert(alert: AlertFeature) -> str:
    return (
        f"Event: {alert.event}\n"
        f"Area: {alert.area_description}\n"
        f"Severity: {alert.severity}\n"
        f"Status: {alert.status}\n"
        f"Headline: {alert.headline}\n"
        f"{DELIMITER}\n"
    )


def format_period(period: ForecastPeriod) -> str:
    return (
        f"Name: {period.name}\n"
        f"Temperature: {period.temperature}°{period.temperature_unit}\n"
        f"Wind: {period.wind_speed} {period.wind_direction}\n"
        f"Forecast: {period.short_forecast}\n"
        f"{DELIMITER}\n"
    )


def format_alerts(alerts: Sequence[AlertFeature]) -> str:
    if not alerts:
        return NO_ALERTS
    return "".join(format_alert(alert) for alert in alerts)


def format_forecast(periods: Sequence[ForecastPeriod]) -> str:
    if not periods:
        return NO_FORECAST
    return "".join(format_period(period) for period in periods)
