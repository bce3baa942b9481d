"""Result types compatible with Gatus' external endpoint status schema.

Field names and encodings follow the JSON Gatus serves and consumes:
durations are integer nanoseconds and timestamps are RFC 3339 strings.

Python's ``timedelta`` and ``datetime`` stop at microseconds, so decoding
truncates the sub-microsecond part of both durations and timestamps written
by Go tools. A file produced elsewhere therefore keeps its values only to
the microsecond when it is re-encoded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


@dataclass(frozen=True)
class ConditionResult:
    condition: str
    success: bool

    def as_dict(self) -> dict[str, Any]:
        return {"condition": self.condition, "success": self.success}

    @classmethod
    def from_dict(cls, payload: Any) -> ConditionResult:
        if not isinstance(payload, dict):
            raise ValueError("condition result must be an object")
        condition = payload.get("condition")
        success = payload.get("success")
        if not isinstance(condition, str) or not isinstance(success, bool):
            raise ValueError(f"invalid condition result: {payload!r}")
        return cls(condition=condition, success=success)


@dataclass
class Result:
    success: bool
    timestamp: datetime
    status: int = 0
    hostname: str = ""
    duration: timedelta = timedelta(0)
    errors: list[str] = field(default_factory=list)
    condition_results: list[ConditionResult] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.status}
        if self.hostname:
            payload["hostname"] = self.hostname
        payload["duration"] = duration_to_ns(self.duration)
        if self.errors:
            payload["errors"] = list(self.errors)
        payload["conditionResults"] = [c.as_dict() for c in self.condition_results]
        payload["success"] = self.success
        payload["timestamp"] = format_timestamp(self.timestamp)
        return payload

    @classmethod
    def from_dict(cls, payload: Any) -> Result:
        if not isinstance(payload, dict):
            raise ValueError("result must be an object")

        status = payload.get("status", 0)
        if not _is_int(status):
            raise ValueError(f"invalid status: {status!r}")
        hostname = payload.get("hostname") or ""
        if not isinstance(hostname, str):
            raise ValueError(f"invalid hostname: {hostname!r}")
        duration = payload.get("duration", 0)
        if not _is_int(duration):
            raise ValueError(f"invalid duration: {duration!r}")

        errors = payload.get("errors") or []
        if not isinstance(errors, list) or not all(isinstance(e, str) for e in errors):
            raise ValueError(f"invalid errors: {errors!r}")
        conditions = payload.get("conditionResults") or []
        if not isinstance(conditions, list):
            raise ValueError(f"invalid conditionResults: {conditions!r}")

        success = payload.get("success")
        if not isinstance(success, bool):
            raise ValueError(f"invalid success flag: {success!r}")
        timestamp = parse_timestamp(payload.get("timestamp"))
        if timestamp is None:
            raise ValueError(f"invalid timestamp: {payload.get('timestamp')!r}")

        return cls(
            success=success,
            timestamp=timestamp,
            status=status,
            hostname=hostname,
            duration=ns_to_duration(duration),
            errors=list(errors),
            condition_results=[ConditionResult.from_dict(c) for c in conditions],
        )


@dataclass
class EndpointStatus:
    key: str
    name: str = ""
    group: str = ""
    results: list[Result] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.name:
            payload["name"] = self.name
        if self.group:
            payload["group"] = self.group
        payload["key"] = self.key
        payload["results"] = [r.as_dict() for r in self.results]
        return payload


def duration_to_ns(value: timedelta) -> int:
    return (value.days * 86400 + value.seconds) * 1_000_000_000 + value.microseconds * 1000


def ns_to_duration(value: int) -> timedelta:
    return timedelta(microseconds=value // 1000)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    # Go emits up to nanosecond precision, datetime keeps microseconds.
    text = _FRACTION_RE.sub(r"\1", value.replace("Z", "+00:00"))
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
