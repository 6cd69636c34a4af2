import logging
import os
import sys

from google.adk.agents import LlmAgent
from google.adk.agents.callback_context import CallbackContext
from google.adk.models import LlmRequest, LlmResponse
from google.adk.tools.mcp_tool.mcp_toolset import MCPToolset, \
                    StdioServerParameters, StdioConnectionParams

logger = logging.getLogger(__name__)

MCP_SERVER_MODULE = "edacap_mcp_tools.climate_advisory_tool.climate_server"


def log_query_to_model(callback_context: CallbackContext, llm_request: LlmRequest):
    if llm_request.contents and llm_request.contents[-1].role == 'user':
        for part in llm_request.contents[-1].parts:
            if part.text:
                logger.info("[query to %s]: %s", callback_context.agent_name, part.text)


def log_model_response(callback_context: CallbackContext, llm_response: LlmResponse):
    if llm_response.content and llm_response.content.parts:
        for part in llm_response.content.parts:
            if part.text:
                logger.info("[response from %s]: %s", callback_context.agent_name, part.text)
            elif part.function_call:
                logger.info("[function call from %s]: %s", callback_context.agent_name, part.function_call.name)


# Forward the EDACaP settings to the server subprocess
server_env = {k: v for k, v in os.environ.items() if k.startswith("EDACAP_")}

root_agent = LlmAgent(
    model=os.getenv("MODEL", "gemini-2.0-flash"),
    name='edacap_climate_advisor',
    before_model_callback=log_query_to_model,
    after_model_callback=log_model_response,
    description='Seasonal climate and crop yield advisory for Ethiopian farmers from the EDACaP (Aclimate) service.',
    instruction="""You are an agro-climate advisor for farmers in Ethiopia.

## YOUR TASKS
1. Use get_climate_forecast with the farm's coordinates for the seasonal rainfall and temperature outlook
2. Use get_crop_forecast for expected yields per cultivar and soil
3. Use find_nearest_station or get_weather_stations when the user asks about stations
4. Use get_historical_climate to compare the forecast with normal conditions

## OUTPUT GUIDELINES
- Explain probabilities in plain language (e.g. "60% chance of above-normal rainfall in July")
- If a tool returns status "no_data", say that no seasonal forecast exists for that location and pass on the suggestion
- If a tool returns an error, say the climate service could not be reached; do not suggest alternatives
- Do NOT output raw JSON
""",
    tools=[
        MCPToolset(
            connection_params=StdioConnectionParams(
                server_params=StdioServerParameters(
                    command=sys.executable,
                    args=["-m", MCP_SERVER_MODULE],
                    env=server_env or None,
                ),
                timeout=15,
            ),
        )
    ],
)
