from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

from .gatus import ConditionResult, Result
from .truenas import Pool, is_pool_healthy

NOT_CONNECTED_CONDITION = "Connected == false"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def healthy_condition(pool_name: str) -> str:
    return f"{pool_name} == Healthy"


def evaluate_pools(pools: Sequence[Pool], duration: timedelta, hostname: str) -> Result:
    conditions = [
        ConditionResult(condition=healthy_condition(pool.name), success=is_pool_healthy(pool))
        for pool in pools
    ]
    return Result(
        success=all(c.success for c in conditions),
        timestamp=_utcnow(),
        status=0,
        hostname=hostname,
        duration=duration,
        errors=[],
        condition_results=conditions,
    )


def evaluate_error(exc: BaseException, duration: timedelta, hostname: str) -> Result:
    status = getattr(exc, "status_code", 0)
    if not isinstance(status, int) or isinstance(status, bool):
        status = 0
    return Result(
        success=False,
        timestamp=_utcnow(),
        status=status,
        hostname=hostname,
        duration=duration,
        errors=[str(exc)],
        condition_results=[ConditionResult(condition=NOT_CONNECTED_CONDITION, success=False)],
    )


def evaluate(outcome: Sequence[Pool] | BaseException, duration: timedelta, hostname: str) -> Result:
    """Turn one probe attempt into a Result.

    ``outcome`` is either the pools returned by the appliance or the error
    raised while fetching them.
    """
    if isinstance(outcome, BaseException):
        return evaluate_error(outcome, duration, hostname)
    return evaluate_pools(outcome, duration, hostname)


def failing_conditions(result: Result) -> list[str]:
    return [c.condition for c in result.condition_results if not c.success]
