"""QWeather forecasts exposed as an MCP `get-weather` tool."""
