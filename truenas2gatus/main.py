from __future__ import annotations

import asyncio
import signal
import sys

from aiohttp import web
from pydantic import ValidationError

from .config import Settings
from .logger import log
from .poller import poll_loop
from .server import status_app
from .store import PersistenceError, ResultStore
from .truenas import TrueNasClient


async def run(settings: Settings) -> None:
    store = ResultStore.load_or_init(settings.TRUENAS_RESULT_STORE, settings.TRUENAS_RESULTS_TO_KEEP)

    client = TrueNasClient(
        settings.truenas_base_url,
        settings.TRUENAS_API_KEY,
        timeout_ms=settings.TRUENAS_TIMEOUT_MS,
        verify_tls=not settings.TRUENAS_TLS_TRUST_ALL,
    )
    if settings.TRUENAS_TLS_TRUST_ALL:
        log("truenas.tls_verification_disabled", level="warning", host=client.hostname)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (AttributeError, NotImplementedError):
            pass

    app = status_app(
        store,
        name=settings.GATUS_ENDPOINT_NAME,
        group=settings.GATUS_ENDPOINT_GROUP,
        key=settings.GATUS_ENDPOINT_KEY,
    )
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", settings.HTTP_PORT)
    await site.start()

    log("service.started", port=settings.HTTP_PORT, host=client.hostname, store=str(store.path))

    poller = asyncio.create_task(
        poll_loop(
            client,
            store,
            client.hostname,
            settings.TRUENAS_INTERVAL,
            stop,
            probe_on_start=settings.TRUENAS_PROBE_ON_START,
        )
    )

    await stop.wait()
    log("service.stopping")
    # The loop notices the stop event once the current probe has finished.
    await poller
    await runner.cleanup()


def main() -> int:
    try:
        settings = Settings()
    except ValidationError as exc:
        log("service.startup_failed", level="error", error=str(exc))
        return 1
    try:
        asyncio.run(run(settings))
    except (PersistenceError, OSError) as exc:
        log("service.startup_failed", level="error", error=str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
