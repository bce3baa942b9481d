from __future__ import annotations

import math
import re
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .truenas import normalize_base_url

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: str) -> float:
    """Parse a Go-style duration such as ``30s``, ``1m`` or ``1h30m`` into seconds.

    A bare number is read as seconds.
    """
    text = value.strip()
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ValueError(f"invalid duration: {value!r}")
        return seconds

    sign = 1.0
    if text[:1] in ("+", "-"):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if not text:
        raise ValueError(f"invalid duration: {value!r}")

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART_RE.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration: {value!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    return sign * total


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # TrueNAS
    TRUENAS_HOST: str
    TRUENAS_API_KEY: str
    TRUENAS_TLS_TRUST_ALL: bool = False
    TRUENAS_TIMEOUT_MS: int = Field(default=10000, gt=0)

    # Polling, e.g. "1m" or "1h30m"
    TRUENAS_INTERVAL: float = Field(default=60, gt=0)
    TRUENAS_PROBE_ON_START: bool = False

    # Result store
    TRUENAS_RESULT_STORE: str = "/data/results.json"
    TRUENAS_RESULTS_TO_KEEP: int = Field(default=20, gt=0)

    # Service
    HTTP_PORT: int = 8989
    GATUS_ENDPOINT_NAME: str = "TrueNAS"
    GATUS_ENDPOINT_GROUP: str = "Storage"
    GATUS_ENDPOINT_KEY: str = "storage_truenas"

    @field_validator("TRUENAS_INTERVAL", mode="before")
    @classmethod
    def _parse_interval(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @property
    def truenas_base_url(self) -> str:
        return normalize_base_url(self.TRUENAS_HOST)
