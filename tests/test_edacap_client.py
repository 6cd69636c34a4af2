import asyncio

import pytest
from aiohttp import test_utils, web

from edacap_mcp_tools.climate_advisory_tool.edacap_client import (
    EDACaPClient,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamTimeoutError,
)


def run_against(routes, scenario, timeout_seconds=5.0):
    """Run scenario(client) against an in-process aiohttp server serving routes."""
    async def main():
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_get(path, handler)
        async with test_utils.TestServer(app) as server:
            client = EDACaPClient(f"http://{server.host}:{server.port}/", timeout_seconds=timeout_seconds)
            return await scenario(client)

    return asyncio.run(main())


def test_endpoints_return_decoded_json():
    seen_headers = {}

    async def countries(request):
        seen_headers["Accept"] = request.headers.get("Accept")
        seen_headers["User-Agent"] = request.headers.get("User-Agent", "")
        return web.json_response([{"id": "eth-001", "iso2": "ET", "name": "Ethiopia"}])

    async def stations(request):
        return web.json_response([{"id": "st-1", "country": request.match_info["country_id"]}])

    async def climate(request):
        return web.json_response({"climate": [], "ids": request.match_info["ids"]})

    async def scenario(client):
        return (
            await client.get_countries(),
            await client.get_weather_stations("eth-001"),
            await client.get_climate_forecast("st-1,st-2"),
        )

    result = run_against({
        "/api/Geographic/Country/json": countries,
        "/api/Geographic/{country_id}/WeatherStations/json": stations,
        "/api/Forecast/Climate/{ids}/true/json": climate,
    }, scenario)

    assert result[0] == [{"id": "eth-001", "iso2": "ET", "name": "Ethiopia"}]
    assert result[1] == [{"id": "st-1", "country": "eth-001"}]
    assert result[2] == {"climate": [], "ids": "st-1,st-2"}
    assert seen_headers["Accept"] == "application/json"
    assert seen_headers["User-Agent"].startswith("EDACaP-MCP-Server/")


def test_yield_and_historical_paths():
    async def yield_forecast(request):
        return web.json_response([{"kind": "yield"}])

    async def climatology(request):
        return web.json_response([{"kind": "historical"}])

    async def scenario(client):
        return await client.get_agronomic_forecast("st-1"), await client.get_historical_climate("st-1")

    agronomic, historical = run_against({
        "/api/Forecast/Yield/st-1/json": yield_forecast,
        "/api/Historical/Climatology/st-1/json": climatology,
    }, scenario)

    assert agronomic == [{"kind": "yield"}]
    assert historical == [{"kind": "historical"}]


def test_non_2xx_raises_upstream_error_with_status_and_body():
    async def failing(request):
        return web.Response(status=404, text="station not found")

    async def scenario(client):
        await client.get_climate_forecast("missing")

    with pytest.raises(UpstreamError) as excinfo:
        run_against({"/api/Forecast/Climate/missing/true/json": failing}, scenario)

    assert excinfo.value.status_code == 404
    assert excinfo.value.body == "station not found"
    assert "404" in str(excinfo.value)


def test_invalid_json_is_an_upstream_error():
    async def html(request):
        return web.Response(text="<html>oops</html>", content_type="text/html")

    async def scenario(client):
        await client.get_countries()

    with pytest.raises(UpstreamError) as excinfo:
        run_against({"/api/Geographic/Country/json": html}, scenario)
    assert excinfo.value.status_code == 200


def test_empty_body_returns_none():
    async def empty(request):
        return web.Response(status=200, text="")

    async def scenario(client):
        return await client.get_countries()

    assert run_against({"/api/Geographic/Country/json": empty}, scenario) is None


def test_slow_response_raises_timeout_error():
    async def slow(request):
        await asyncio.sleep(1.0)
        return web.json_response([])

    async def scenario(client):
        await client.get_countries()

    with pytest.raises(UpstreamTimeoutError) as excinfo:
        run_against({"/api/Geographic/Country/json": slow}, scenario, timeout_seconds=0.1)

    assert excinfo.value.timeout_seconds == 0.1
    assert isinstance(excinfo.value, asyncio.TimeoutError)
    assert not isinstance(excinfo.value, UpstreamError)


def test_unreachable_service_raises_connection_error():
    async def main():
        # Bind and release a port so nothing is listening on it
        server = test_utils.TestServer(web.Application())
        await server.start_server()
        port = server.port
        await server.close()
        return await EDACaPClient(f"http://127.0.0.1:{port}", timeout_seconds=2).get_countries()

    with pytest.raises(UpstreamConnectionError) as excinfo:
        asyncio.run(main())

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value, UpstreamError)
