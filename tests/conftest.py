from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from truenas2gatus.gatus import ConditionResult, Result
from truenas2gatus.truenas import Pool


def make_result(marker: str = "tank", success: bool = True, minute: int = 0) -> Result:
    return Result(
        success=success,
        timestamp=datetime(2024, 1, 1, 0, minute % 60, tzinfo=timezone.utc),
        status=0,
        hostname="nas.example.com",
        duration=timedelta(milliseconds=123),
        errors=[] if success else ["boom"],
        condition_results=[ConditionResult(condition=f"{marker} == Healthy", success=success)],
    )


def make_pool(name: str = "tank", **overrides) -> Pool:
    fields = {"status": "ONLINE", "healthy": True, "warning": False, "errors": 0}
    fields.update(overrides)
    return Pool(name=name, **fields)


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "results.json"
