"""
MCP Server for EDACaP Climate Advisory Tools

Exposes the Ethiopian climate and crop advisory tools via Model Context
Protocol (MCP) so ADK agents or other MCP clients can call them.

Logging goes to stderr; stdout carries the stdio MCP stream.
"""

import asyncio
import json
import logging
from typing import Any, Dict

from dotenv import load_dotenv

# MCP Server Imports
from mcp import types as mcp_types
from mcp.server.lowlevel import Server, NotificationOptions
from mcp.server.models import InitializationOptions
import mcp.server.stdio

# ADK Tool Imports
from google.adk.tools.function_tool import FunctionTool
from google.adk.tools.mcp_tool.conversion_utils import adk_to_mcp_tool_type

# Climate Advisory Tool Imports
from .edacap_client import UpstreamError
from .tool_implementation import (
    get_weather_stations,
    find_nearest_station,
    get_climate_forecast,
    get_crop_forecast,
    get_historical_climate,
)
from .tool_schema import TOOL_SCHEMA

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# --- Initialize ADK Tools ---
climate_tools = {
    "get_weather_stations": FunctionTool(get_weather_stations),
    "find_nearest_station": FunctionTool(find_nearest_station),
    "get_climate_forecast": FunctionTool(get_climate_forecast),
    "get_crop_forecast": FunctionTool(get_crop_forecast),
    "get_historical_climate": FunctionTool(get_historical_climate),
}

# --- MCP Server Setup ---
app = Server("edacap-climate-advisory")


def error_payload(name: str, arguments: Dict[str, Any], error: Exception) -> Dict[str, Any]:
    """
    JSON body reported when a tool raises.

    Carries no suggestion: a failure to reach EDACaP is reported as such,
    unlike the "no_data" results returned by the tools themselves.
    """
    payload = {
        "error": f"Failed to execute tool '{name}'",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "tool_name": name,
        "arguments": arguments,
    }
    if isinstance(error, UpstreamError):
        payload["status_code"] = error.status_code
    return payload


@app.list_tools()
async def list_mcp_tools() -> list[mcp_types.Tool]:
    """
    MCP handler to list all available climate advisory tools.

    Returns:
        List of MCP Tool schemas
    """
    logger.info("MCP Server: Received list_tools request.")

    mcp_tool_schemas = []
    for tool_name, adk_tool in climate_tools.items():
        mcp_schema = adk_to_mcp_tool_type(adk_tool)
        mcp_tool_schemas.append(mcp_schema)
        logger.info(f"MCP Server: Advertising tool: {mcp_schema.name}")

    return mcp_tool_schemas


@app.call_tool()
async def call_mcp_tool(
    name: str, arguments: dict
) -> list[mcp_types.Content]:
    """
    MCP handler to execute a climate advisory tool call.

    Args:
        name: Tool name to execute
        arguments: Dictionary of arguments for the tool

    Returns:
        List of MCP Content objects with tool results
    """
    logger.info(f"MCP Server: Received call_tool request for '{name}' with {json.dumps(arguments)}")

    if name not in climate_tools:
        error_msg = {
            "error": f"Tool '{name}' not found",
            "available_tools": list(climate_tools.keys())
        }
        logger.warning(f"MCP Server: Tool '{name}' not found")
        return [mcp_types.TextContent(type="text", text=json.dumps(error_msg, indent=2))]

    try:
        adk_tool = climate_tools[name]

        # tool_context is None because we're running outside a full ADK Runner
        adk_tool_response = await adk_tool.run_async(
            args=arguments,
            tool_context=None,
        )
        logger.info(f"MCP Server: Tool '{name}' executed successfully")

        response_text = json.dumps(adk_tool_response, indent=2, default=str)
        return [mcp_types.TextContent(type="text", text=response_text)]

    except Exception as e:
        logger.error(f"MCP Server: Error executing tool '{name}': {e}")
        error_msg = error_payload(name, arguments, e)
        return [mcp_types.TextContent(type="text", text=json.dumps(error_msg, indent=2))]


# --- MCP Server Runner ---
async def run_mcp_stdio_server():
    """
    Runs the MCP server, listening for connections over standard input/output.
    """
    logger.info(
        f"EDACaP Climate Advisory MCP Server: exposing {len(climate_tools)} tools "
        f"for {TOOL_SCHEMA['supported_region']} ({', '.join(climate_tools)})"
    )

    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        logger.info("MCP Stdio Server: Starting handshake with client...")
        await app.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=app.name,
                server_version="1.0.0",
                capabilities=app.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )
        logger.info("MCP Stdio Server: Run loop finished or client disconnected.")


def main():
    """
    Main entry point for the EDACaP Climate Advisory MCP Server.
    """
    logging.basicConfig(level=logging.INFO)
    logger.info("Launching EDACaP Climate Advisory MCP Server via stdio...")
    try:
        asyncio.run(run_mcp_stdio_server())
    except KeyboardInterrupt:
        logger.info("EDACaP Climate Advisory MCP Server stopped by user.")
    except Exception:
        logger.exception("EDACaP Climate Advisory MCP Server encountered an error")
        raise
    finally:
        logger.info("EDACaP Climate Advisory MCP Server process exiting.")


if __name__ == "__main__":
    main()
