import argparse
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Load .env from project root (two levels above mcp-server/weather_zhcn/)
load_dotenv(dotenv_path=Path(__file__).parents[2] / ".env")

QWEATHER_API_BASE = "https://api.qweather.com/v7"
QWEATHER_DEV_API_BASE = "https://devapi.qweather.com/v7"

_TRUTHY = {"1", "true", "yes"}

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Process-wide configuration, built once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    dev_mode: bool = False

    @property
    def base_url(self) -> str:
        return QWEATHER_DEV_API_BASE if self.dev_mode else QWEATHER_API_BASE


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "*" * len(secret)
    return "*" * (len(secret) - 4) + secret[-4:]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather-zhcn",
        description="QWeather MCP server over stdio.",
        add_help=False,
    )
    parser.add_argument("--apiKey", dest="api_key", default="")
    parser.add_argument("--dev", dest="dev_mode", action="store_true")
    return parser


def load_settings(argv: list[str] | None = None) -> Settings:
    """Build Settings from argv, falling back to QWEATHER_* env vars.

    Unknown arguments are ignored; MCP hosts are free to append their own.
    """
    args, _ = _build_parser().parse_known_args(argv)

    api_key = os.getenv("QWEATHER_API_KEY", "")
    if args.api_key:
        logger.info("使用命令行参数中的API密钥: %s", _mask(args.api_key))
        api_key = args.api_key

    dev_mode = os.getenv("QWEATHER_DEV_MODE", "").strip().lower() in _TRUTHY
    if args.dev_mode:
        dev_mode = True
    if dev_mode:
        logger.info("启用免费订阅")

    if not api_key:
        logger.warning(
            "QWEATHER_API_KEY is not set. "
            "Upstream requests will be rejected until a key is configured."
        )

    return Settings(api_key=api_key, dev_mode=dev_mode)
