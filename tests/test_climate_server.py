import asyncio
import json

import pytest

from edacap_mcp_tools.climate_advisory_tool import climate_server, tool_implementation
from edacap_mcp_tools.climate_advisory_tool.config import Settings
from edacap_mcp_tools.climate_advisory_tool.edacap_client import UpstreamError, UpstreamTimeoutError
from edacap_mcp_tools.climate_advisory_tool.tool_implementation import ClimateAdvisoryService
from edacap_mcp_tools.climate_advisory_tool.tool_schema import TOOL_SCHEMA

from tests.fakes import FakeClient, FakeClock, station_record


@pytest.fixture
def client():
    client = FakeClient(stations=[station_record("s1", 1)])
    tool_implementation.set_service(ClimateAdvisoryService(settings=Settings(), client=client, clock=FakeClock()))
    yield client
    tool_implementation.set_service(None)


def call(name, arguments):
    contents = asyncio.run(climate_server.call_mcp_tool(name, arguments))
    assert len(contents) == 1
    return json.loads(contents[0].text)


def test_every_documented_tool_is_served():
    documented = {f["name"] for f in TOOL_SCHEMA["functions"]}
    assert set(climate_server.climate_tools) == documented


def test_unknown_tool():
    body = call("get_weather_alerts", {})

    assert body["error"] == "Tool 'get_weather_alerts' not found"
    assert "get_climate_forecast" in body["available_tools"]


def test_tool_result_is_returned_as_json(client):
    body = call("get_weather_stations", {})

    assert body["status"] == "success"
    assert body["stations"][0]["id"] == "s1"


def test_upstream_failure_is_reported_without_suggestion(client):
    client.stations = UpstreamError(503, "maintenance")

    body = call("get_weather_stations", {})

    assert body["error_type"] == "UpstreamError"
    assert body["status_code"] == 503
    assert "suggestion" not in body


def test_error_payload_for_timeouts():
    payload = climate_server.error_payload("get_crop_forecast", {"station_id": "x"}, UpstreamTimeoutError(10))

    assert payload["error_type"] == "UpstreamTimeoutError"
    assert "status_code" not in payload
    assert payload["arguments"] == {"station_id": "x"}
