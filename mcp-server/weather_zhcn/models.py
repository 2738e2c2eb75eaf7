from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Period(str, Enum):
    now = "now"
    hours_24 = "24h"
    hours_72 = "72h"
    hours_168 = "168h"
    days_3 = "3d"
    days_7 = "7d"
    days_10 = "10d"
    days_15 = "15d"
    days_30 = "30d"

    @property
    def kind(self) -> Literal["now", "hourly", "daily"]:
        if self is Period.now:
            return "now"
        if self in _HOURLY:
            return "hourly"
        if self in _DAILY:
            return "daily"
        raise ValueError(f"Period {self.value!r} has no response shape")

    @property
    def day_count(self) -> int:
        """Numeric prefix of a daily token, e.g. 7 for "7d"."""
        return int(self.value.removesuffix("d"))


_HOURLY = frozenset({Period.hours_24, Period.hours_72, Period.hours_168})
_DAILY = frozenset(
    {Period.days_3, Period.days_7, Period.days_10, Period.days_15, Period.days_30}
)


# ── Tool arguments ───────────────────────────────────────────────────────────

class WeatherArguments(BaseModel):
    """Validated `get-weather` arguments; `days` on the wire."""

    model_config = ConfigDict(frozen=True)

    location: str
    period: Period = Field(Period.now, alias="days")


# ── QWeather v7 payloads ─────────────────────────────────────────────────────

class _Upstream(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)


class _Entry(_Upstream):
    @field_validator("*", mode="before")
    @classmethod
    def _null_as_blank(cls, value):
        # QWeather sends null for fields it has no reading for.
        return "" if value is None else value


class NowObservation(_Entry):
    obsTime: str = ""
    temp: str = ""
    feelsLike: str = ""
    text: str = ""
    windDir: str = ""
    windScale: str = ""


class HourlyEntry(_Entry):
    fxTime: str = ""
    temp: str = ""
    text: str = ""
    windDir: str = ""
    windScale: str = ""
    humidity: str = ""


class DailyEntry(_Entry):
    fxDate: str = ""
    tempMax: str = ""
    tempMin: str = ""
    textDay: str = ""
    textNight: str = ""
    windDirDay: str = ""
    windScaleDay: str = ""
    windDirNight: str = ""
    windScaleNight: str = ""


class NowResponse(_Upstream):
    now: NowObservation | None = None


class HourlyResponse(_Upstream):
    hourly: list[HourlyEntry] | None = None


class DailyResponse(_Upstream):
    daily: list[DailyEntry] | None = None


# ── Upstream fetch outcome ───────────────────────────────────────────────────

class Ok(BaseModel):
    model_config = ConfigDict(frozen=True)

    payload: dict


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    cause: str


UpstreamResult = Union[Ok, Failed]
