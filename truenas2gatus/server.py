from __future__ import annotations

from aiohttp import web

from .gatus import EndpointStatus, format_timestamp
from .store import ResultStore


def endpoint_status(store: ResultStore, name: str, group: str, key: str) -> EndpointStatus:
    return EndpointStatus(key=key, name=name, group=group, results=store.get_results())


def status_app(
    store: ResultStore,
    name: str = "TrueNAS",
    group: str = "Storage",
    key: str = "storage_truenas",
) -> web.Application:
    app = web.Application()

    async def results(request: web.Request) -> web.Response:
        status = endpoint_status(store, name, group, key)
        return web.json_response([status.as_dict()])

    async def healthz(request: web.Request) -> web.Response:
        snapshot = store.get_results()
        last = snapshot[-1] if snapshot else None
        return web.json_response(
            {
                "status": "ok",
                "results": len(snapshot),
                "last_success": last.success if last else None,
                "last_timestamp": format_timestamp(last.timestamp) if last else None,
            }
        )

    app.router.add_get("/results", results)
    app.router.add_get("/healthz", healthz)
    return app
