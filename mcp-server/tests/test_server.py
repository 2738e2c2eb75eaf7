import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import mcp.types as types
import pytest
import respx

from weather_zhcn import mcp_server
from weather_zhcn.config import QWEATHER_API_BASE, Settings

server = mcp_server.create_server(Settings(api_key="test_key"))


def _call_request(name: str, arguments: dict) -> types.CallToolRequest:
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )


async def test_list_tools_advertises_get_weather():
    handler = server.request_handlers[types.ListToolsRequest]

    result = await handler(types.ListToolsRequest(method="tools/list"))

    assert [tool.name for tool in result.root.tools] == ["get-weather"]


@respx.mock
async def test_call_tool_returns_single_text_block():
    respx.get(f"{QWEATHER_API_BASE}/weather/now").mock(
        return_value=httpx.Response(500)
    )
    handler = server.request_handlers[types.CallToolRequest]

    result = await handler(_call_request("get-weather", {"location": "Beijing"}))

    assert result.root.isError is False
    assert len(result.root.content) == 1
    assert result.root.content[0].text == "无法获取 Beijing 的天气数据"


async def test_unknown_tool_becomes_error_result():
    handler = server.request_handlers[types.CallToolRequest]

    result = await handler(_call_request("get-forecast", {"location": "Beijing"}))

    assert result.root.isError is True
    assert "Unknown tool: get-forecast" in result.root.content[0].text


async def test_invalid_arguments_become_error_result():
    handler = server.request_handlers[types.CallToolRequest]

    result = await handler(_call_request("get-weather", {"days": "2w"}))

    assert result.root.isError is True
    text = result.root.content[0].text
    assert "Invalid arguments" in text
    assert "location" in text
    assert "days" in text


def test_fatal_startup_error_exits_nonzero(monkeypatch, caplog):
    async def broken_serve(settings):
        raise OSError("stdio unavailable")

    monkeypatch.setattr(mcp_server, "serve", broken_serve)

    with caplog.at_level(logging.ERROR, logger="weather_zhcn.mcp_server"):
        with pytest.raises(SystemExit) as exc_info:
            mcp_server.main(["--apiKey=k"])

    assert exc_info.value.code == 1
    assert "Fatal error in main()" in caplog.text
    assert "stdio unavailable" in caplog.text
