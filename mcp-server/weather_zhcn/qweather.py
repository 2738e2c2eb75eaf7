import logging

import httpx

from weather_zhcn.config import Settings
from weather_zhcn.models import Failed, Ok, Period, UpstreamResult

logger = logging.getLogger(__name__)


async def fetch_weather(settings: Settings, period: Period, location: str) -> UpstreamResult:
    """GET {base}/weather/{period} from QWeather. Never raises; failures come back as Failed."""
    url = f"{settings.base_url}/weather/{period.value}"
    params = {"location": location, "key": settings.api_key}
    headers = {"Accept": "application/json"}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(url, params=params, headers=headers)
            response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as exc:
        logger.error(
            "QWeather HTTP error %s for location=%r period=%s",
            exc.response.status_code,
            location,
            period.value,
        )
        return Failed(cause=f"HTTP error! status: {exc.response.status_code}")
    except httpx.RequestError as exc:
        logger.error(
            "QWeather unreachable for location=%r period=%s: %s",
            location,
            period.value,
            exc,
        )
        return Failed(cause=f"request failed: {exc}")
    except ValueError as exc:
        logger.error(
            "QWeather returned invalid JSON for location=%r period=%s: %s",
            location,
            period.value,
            exc,
        )
        return Failed(cause=f"invalid JSON: {exc}")

    if not isinstance(data, dict):
        logger.error(
            "QWeather returned a non-object body for location=%r period=%s",
            location,
            period.value,
        )
        return Failed(cause="response body is not a JSON object")

    return Ok(payload=data)
