"""
Runtime configuration for the EDACaP climate advisory tools.

Values come from the environment, after loading a local .env file if present.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .edacap_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from .forecast_probe import DEFAULT_PROBE_BUDGET
from .station_directory import DEFAULT_STATION_TTL_SECONDS

DEFAULT_REGION_NAME = "Ethiopia"
DEFAULT_REGION_ISO2 = "ET"


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    station_ttl_seconds: float = DEFAULT_STATION_TTL_SECONDS
    probe_budget: int = DEFAULT_PROBE_BUDGET
    region_name: str = DEFAULT_REGION_NAME
    region_iso2: str = DEFAULT_REGION_ISO2
    # Farm location used when a tool call carries no coordinates
    default_latitude: Optional[float] = None
    default_longitude: Optional[float] = None


def _number(env: Mapping[str, str], name: str, default, cast=float):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env: Mapping to read instead of os.environ (no .env loading in that case)
    """
    if env is None:
        load_dotenv()
        env = os.environ

    settings = Settings(
        api_base_url=env.get("EDACAP_API_BASE_URL") or DEFAULT_BASE_URL,
        timeout_seconds=_number(env, "EDACAP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        station_ttl_seconds=_number(env, "EDACAP_STATION_TTL_SECONDS", DEFAULT_STATION_TTL_SECONDS),
        probe_budget=_number(env, "EDACAP_PROBE_BUDGET", DEFAULT_PROBE_BUDGET, cast=int),
        region_name=env.get("EDACAP_REGION_NAME") or DEFAULT_REGION_NAME,
        region_iso2=env.get("EDACAP_REGION_ISO2") or DEFAULT_REGION_ISO2,
        default_latitude=_number(env, "EDACAP_DEFAULT_LATITUDE", None),
        default_longitude=_number(env, "EDACAP_DEFAULT_LONGITUDE", None),
    )
    if settings.probe_budget < 1:
        raise ValueError(f"EDACAP_PROBE_BUDGET must be at least 1, got {settings.probe_budget}")
    return settings
