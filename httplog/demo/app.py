"""FastAPI demo application factory.

Each route exercises one path through the request logger: plain success,
redirect, client error, server error with a body, an uncaught exception
and handler-side field enrichment.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from httplog import __version__
from httplog.config import Options, get_options
from httplog.context import RequestLoggerDep, set_field, set_fields
from httplog.logging import new_logger
from httplog.middleware import RequestLogger

ITEMS = {"1": "widget", "2": "gadget"}


def create_app(options: Options | None = None) -> FastAPI:
    """Create the demo application."""
    options = options or get_options()

    app = FastAPI(
        title="httplog demo",
        description="Structured request logging demo",
        version=__version__,
    )
    app.add_middleware(RequestLogger, logger=new_logger("httplog-demo", options), options=options)

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "version": __version__}

    @app.get("/api/items")
    async def list_items(request: Request):
        set_field(request, "item_count", len(ITEMS))
        return {"items": ITEMS}

    @app.get("/api/items/{item_id}")
    async def read_item(item_id: str, log: RequestLoggerDep):
        if item_id not in ITEMS:
            log.debug("item_missing", item_id=item_id)
            raise HTTPException(status_code=404, detail="item not found")
        return {"id": item_id, "name": ITEMS[item_id]}

    @app.post("/api/items")
    async def create_item(request: Request):
        set_fields(request, {"user": "demo", "action": "create"})
        return PlainTextResponse("boom", status_code=500)

    @app.get("/api/legacy")
    async def legacy():
        return RedirectResponse("/api/items", status_code=302)

    @app.get("/api/panic")
    async def panic():
        return {"result": 1 / 0}

    return app
