import logging
from typing import Any

import mcp.types as types
from pydantic import ValidationError

from weather_zhcn.config import Settings
from weather_zhcn.models import (
    DailyResponse,
    Failed,
    HourlyResponse,
    NowResponse,
    Period,
    UpstreamResult,
    WeatherArguments,
)
from weather_zhcn.qweather import fetch_weather

logger = logging.getLogger(__name__)

TOOL_NAME = "get-weather"
SEPARATOR = "-" * 24

WEATHER_TOOL = types.Tool(
    name=TOOL_NAME,
    description="获取中国国内的天气预报",
    inputSchema={
        "type": "object",
        "properties": {
            "location": {
                "type": "string",
                "description": "逗号分隔的经纬度信息 (e.g., 116.40,39.90)",
            },
            "days": {
                "type": "string",
                "enum": [period.value for period in Period],
                "description": (
                    "预报天数，now为实时天气，24h为24小时预报，72h为72小时预报，"
                    "168h为168小时预报，3d为3天预报，以此类推"
                ),
                "default": Period.now.value,
            },
        },
        "required": ["location"],
    },
)

TOOL_LIST = [WEATHER_TOOL]


class ArgumentValidationError(ValueError):
    """Tool arguments failed validation; carries every (field, reason) pair."""

    def __init__(self, violations: list[tuple[str, str]]):
        self.violations = violations
        super().__init__(
            "Invalid arguments: "
            + ", ".join(f"{path}: {reason}" for path, reason in violations)
        )


class UnknownToolError(LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


def list_tools() -> list[types.Tool]:
    return list(TOOL_LIST)


def validate_arguments(arguments: dict[str, Any] | None) -> WeatherArguments:
    try:
        return WeatherArguments.model_validate(arguments or {})
    except ValidationError as exc:
        violations = [
            (".".join(str(part) for part in err["loc"]) or "arguments", err["msg"])
            for err in exc.errors()
        ]
        raise ArgumentValidationError(violations) from exc


# ── Formatting ───────────────────────────────────────────────────────────────

def _parse(model, result: UpstreamResult, location: str):
    """Decode an Ok payload into `model`, or None when there is nothing usable."""
    if isinstance(result, Failed):
        return None
    try:
        return model.model_validate(result.payload)
    except ValidationError as exc:
        logger.error("Unexpected QWeather payload for location=%r: %s", location, exc)
        return None


def format_now(location: str, result: UpstreamResult) -> str:
    data = _parse(NowResponse, result, location)
    if data is None or data.now is None:
        return f"无法获取 {location} 的天气数据"

    now = data.now
    return (
        f"地点: {location}\n"
        f"观测时间: {now.obsTime}\n"
        f"天气: {now.text}\n"
        f"温度: {now.temp}°C\n"
        f"体感温度: {now.feelsLike}°C\n"
        f"风向: {now.windDir}\n"
        f"风力: {now.windScale}级"
    )


def format_hourly(location: str, period: Period, result: UpstreamResult) -> str:
    data = _parse(HourlyResponse, result, location)
    if data is None or not data.hourly:
        return f"无法获取 {location} 的逐小时天气预报数据"

    hours_text = "\n".join(
        f"时间: {hour.fxTime}\n"
        f"天气: {hour.text}\n"
        f"温度: {hour.temp}°C\n"
        f"湿度: {hour.humidity}%\n"
        f"风向: {hour.windDir} {hour.windScale}级\n"
        f"{SEPARATOR}"
        for hour in data.hourly
    )
    return f"地点: {location}\n{period.value}小时预报:\n{hours_text}"


def format_daily(location: str, period: Period, result: UpstreamResult) -> str:
    data = _parse(DailyResponse, result, location)
    if data is None or not data.daily:
        return f"无法获取 {location} 的天气预报数据"

    # Header count follows the requested token, not len(data.daily).
    forecast_text = "\n".join(
        f"日期: {day.fxDate}\n"
        f"白天天气: {day.textDay}\n"
        f"夜间天气: {day.textNight}\n"
        f"最高温度: {day.tempMax}°C\n"
        f"最低温度: {day.tempMin}°C\n"
        f"白天风向: {day.windDirDay} {day.windScaleDay}级\n"
        f"夜间风向: {day.windDirNight} {day.windScaleNight}级\n"
        f"{SEPARATOR}"
        for day in data.daily
    )
    return f"地点: {location}\n{period.day_count}天预报:\n{forecast_text}"


# ── Dispatch ─────────────────────────────────────────────────────────────────

async def execute_get_weather(request: WeatherArguments, settings: Settings) -> str:
    location, period = request.location, request.period
    result = await fetch_weather(settings, period, location)

    kind = period.kind
    if kind == "now":
        return format_now(location, result)
    if kind == "hourly":
        return format_hourly(location, period, result)
    if kind == "daily":
        return format_daily(location, period, result)
    raise ValueError(f"Unhandled period kind: {kind!r}")


async def call_tool(
    name: str, arguments: dict[str, Any] | None, settings: Settings
) -> list[types.TextContent]:
    """Run one tool invocation.

    Raises UnknownToolError / ArgumentValidationError for caller mistakes.
    Upstream trouble never raises; it is reported inside the returned text.
    """
    if name != TOOL_NAME:
        logger.error("Unknown tool requested: %r", name)
        raise UnknownToolError(name)

    request = validate_arguments(arguments)
    logger.info(
        "Tool invocation: tool=%s location=%r days=%s",
        name,
        request.location,
        request.period.value,
    )

    text = await execute_get_weather(request, settings)
    return [types.TextContent(type="text", text=text)]
