from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import httpx

POOL_STATUS_ONLINE = "ONLINE"


class TrueNasError(Exception):
    def __init__(
        self,
        reason: BaseException | str | None = None,
        status_code: int = 0,
        message: str = "",
    ) -> None:
        self.reason = reason
        self.status_code = status_code
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.reason is not None:
            return str(self.reason)
        return f"[{self.status_code}] {self.message}"


@dataclass(frozen=True)
class Pool:
    name: str
    status: str
    healthy: bool
    warning: bool
    errors: int
    id: int | None = None
    guid: str | None = None
    path: str | None = None
    status_code: str | None = None
    status_detail: Any = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Pool:
        name = payload.get("name")
        if not isinstance(name, str):
            raise ValueError(f"pool without a name: {payload!r}")
        status = _field(payload, "status", str, "")
        healthy = _field(payload, "healthy", bool, False)
        warning = _field(payload, "warning", bool, False)
        errors = _field(payload, "errors", int, 0)
        if isinstance(errors, bool):
            raise ValueError(f"pool {name!r} has invalid errors: {errors!r}")
        return cls(
            name=name,
            status=status,
            healthy=healthy,
            warning=warning,
            errors=errors,
            id=payload.get("id"),
            guid=payload.get("guid"),
            path=payload.get("path"),
            status_code=payload.get("status_code"),
            status_detail=payload.get("status_detail"),
        )


def _field(payload: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    # A missing key falls back to the default, a present one must have the right type.
    if key not in payload:
        return default
    value = payload[key]
    if not isinstance(value, kind):
        raise ValueError(f"pool field {key!r} has invalid value: {value!r}")
    return value


def is_pool_healthy(pool: Pool) -> bool:
    if pool.status != POOL_STATUS_ONLINE:
        return False
    if not pool.healthy:
        return False
    if pool.warning:
        return False
    if pool.errors > 0:
        return False
    return True


def normalize_base_url(host: str) -> str:
    host = host.strip().rstrip("/")
    if "://" not in host:
        host = f"https://{host}"
    return host


class TrueNasClient:
    def __init__(
        self,
        host: str,
        api_key: str,
        timeout_ms: int = 10000,
        verify_tls: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = normalize_base_url(host)
        self._api_key = api_key
        self._timeout = timeout_ms / 1000.0
        self._verify = verify_tls
        self._transport = transport

    @property
    def hostname(self) -> str:
        return urlparse(self._base_url).netloc

    def _url(self, path: str) -> str:
        return f"{self._base_url}/api/v2.0{path}"

    async def request(self, method: str, path: str) -> Any:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, self._url(path), headers=headers)
        except httpx.HTTPError as exc:
            raise TrueNasError(exc) from exc
        if resp.status_code >= 400:
            raise TrueNasError(status_code=resp.status_code, message=resp.text)
        try:
            return resp.json()
        except ValueError as exc:
            raise TrueNasError(exc) from exc

    async def get_pools(self) -> list[Pool]:
        data = await self.request("GET", "/pool")
        if not isinstance(data, list):
            raise TrueNasError("Unexpected pool response shape")
        if not all(isinstance(item, dict) for item in data):
            raise TrueNasError("Unexpected pool entry in response")
        try:
            return [Pool.from_dict(item) for item in data]
        except ValueError as exc:
            raise TrueNasError(exc) from exc
