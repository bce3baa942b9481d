from __future__ import annotations

import asyncio
import time
from datetime import timedelta

from .evaluator import evaluate, failing_conditions
from .gatus import Result
from .logger import log
from .store import PersistenceError, ResultStore
from .truenas import TrueNasClient


async def probe_once(client: TrueNasClient, store: ResultStore, hostname: str) -> Result:
    log("probe.start", host=hostname)
    start = time.monotonic()
    try:
        outcome = await client.get_pools()
    except Exception as exc:  # noqa: BLE001
        outcome = exc
    duration = timedelta(seconds=time.monotonic() - start)

    result = evaluate(outcome, duration, hostname)
    if isinstance(outcome, BaseException):
        log("probe.error", level="error", host=hostname, status=result.status, error=str(outcome))
    elif not result.condition_results:
        log("probe.no_pools", level="warning", host=hostname)
    elif not result.success:
        log("probe.unhealthy", host=hostname, failing=failing_conditions(result))

    try:
        await asyncio.to_thread(store.save_result, result)
    except PersistenceError as exc:
        log("store.error", level="error", path=str(store.path), error=str(exc))
    log(
        "probe.saved",
        host=hostname,
        success=result.success,
        duration_ms=round(duration.total_seconds() * 1000, 1),
    )
    return result


async def _wait_or_stop(stop: asyncio.Event, seconds: float) -> bool:
    try:
        await asyncio.wait_for(stop.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True


async def poll_loop(
    client: TrueNasClient,
    store: ResultStore,
    hostname: str,
    interval_seconds: float,
    stop: asyncio.Event,
    probe_on_start: bool = False,
) -> None:
    log("poll.started", interval_seconds=interval_seconds, probe_on_start=probe_on_start)
    first = True
    while not stop.is_set():
        if not (first and probe_on_start):
            if await _wait_or_stop(stop, interval_seconds):
                break
        first = False
        try:
            await probe_once(client, store, hostname)
        except Exception as exc:  # noqa: BLE001
            log("poll.error", level="error", error=str(exc))
    log("poll.stopped")
