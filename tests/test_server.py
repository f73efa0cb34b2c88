"""Tests for binding the router to the MCP server."""

import logging
import signal

import pytest
from conftest import API_BASE, FORECAST_URL, alerts_payload, forecast_payload, forecast_period, points_payload
from mcp.server.fastmcp.exceptions import ToolError

from nws_weather import server
from nws_weather.tools import build_router


@pytest.fixture
def router(settings, nws_client):
    return build_router(settings, nws_client)


@pytest.fixture
def weather_mcp(settings, router):
    return server.build_mcp(settings, router)


class TestRegisterToolsWithMCP:
    @pytest.mark.asyncio
    async def test_advertises_descriptor_schemas(self, weather_mcp, router):
        tools = {tool.name: tool for tool in await weather_mcp.list_tools()}

        assert sorted(tools) == ["get_alerts", "get_forecast"]
        for descriptor in router.descriptors():
            assert tools[descriptor.name].description == descriptor.description
            assert tools[descriptor.name].inputSchema == descriptor.parameter_schema
        assert tools["get_alerts"].inputSchema["additionalProperties"] is False
        assert tools["get_forecast"].inputSchema["properties"]["latitude"]["description"] == (
            "latitude of the location in decimal format"
        )

    @pytest.mark.asyncio
    async def test_extra_argument_is_refused(self, weather_mcp, fake_nws):
        fake_nws.add_json(f"{API_BASE}/alerts/active?area=CA", alerts_payload())

        with pytest.raises(ToolError):
            await weather_mcp.call_tool("get_alerts", {"state": "CA", "bogus": 1})

        assert fake_nws.requests == []

    @pytest.mark.asyncio
    async def test_missing_argument_is_refused(self, weather_mcp, fake_nws):
        with pytest.raises(ToolError):
            await weather_mcp.call_tool("get_forecast", {"latitude": "34.05"})

        assert fake_nws.requests == []

    @pytest.mark.asyncio
    async def test_tool_calls_go_through_router(self, weather_mcp, fake_nws):
        fake_nws.add_json(f"{API_BASE}/points/34.05,-118.25", points_payload())
        fake_nws.add_json(FORECAST_URL, forecast_payload(forecast_period("Tonight")))
        tool = weather_mcp._tool_manager.get_tool("get_forecast")

        text = await tool.run({"latitude": "34.05", "longitude": "-118.25"})

        assert text.startswith("Name: Tonight\n")
        assert len(fake_nws.requests) == 2

    def test_each_build_is_a_fresh_server(self, settings, router):
        first = server.build_mcp(settings, router)
        second = server.build_mcp(settings, build_router(settings))

        assert first is not second
        assert len(second._tool_manager.list_tools()) == 2


class FakeMCP:
    def __init__(self, error=None):
        self.error = error
        self.transports = []

    def run(self, transport):
        self.transports.append(transport)
        if self.error:
            raise self.error


class TestRunServer:
    def test_rejects_unknown_transport(self, settings):
        with pytest.raises(ValueError):
            server.run_server("sse", settings)

    def test_sigterm_raises_keyboard_interrupt(self):
        with pytest.raises(KeyboardInterrupt):
            server._stop_on_sigterm(signal.SIGTERM, None)

    def test_stdio_stops_cleanly_on_interrupt(self, settings, monkeypatch, caplog):
        fake = FakeMCP(error=KeyboardInterrupt())
        installed = {}
        monkeypatch.setattr(server, "build_mcp", lambda s: fake)
        monkeypatch.setattr(server.signal, "signal", lambda signum, handler: installed.setdefault(signum, handler))

        with caplog.at_level(logging.INFO, logger="nws_weather.server"):
            server.run_server("stdio", settings)

        assert fake.transports == ["stdio"]
        assert installed[signal.SIGTERM] is server._stop_on_sigterm
        assert "Weather server stopped" in caplog.text

    def test_http_leaves_signals_to_uvicorn(self, settings, monkeypatch):
        fake = FakeMCP()
        installed = {}
        monkeypatch.setattr(server, "build_mcp", lambda s: fake)
        monkeypatch.setattr(server.signal, "signal", lambda signum, handler: installed.setdefault(signum, handler))

        server.run_server("streamable-http", settings)

        assert fake.transports == ["streamable-http"]
        assert installed == {}


def test_main_exports_tools(tmp_path, monkeypatch):
    monkeypatch.delenv("MCP_TRANSPORT", raising=False)
    path = tmp_path / "tools.json"

    server.main(["--export-tools", str(path)])

    assert '"get_alerts"' in path.read_text(encoding="utf-8")
