"""Ping ingestion API: POST /ping/{key} forwards to the engine; 503 when it cannot."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Dict

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

if TYPE_CHECKING:
    from dodemansknop.bootstrap import Service

logger = logging.getLogger("dodemansknop.api")

router = APIRouter(tags=["ping"])


def _service(request: Request) -> "Service":
    return request.app.state.service


# sync handlers run in the threadpool, so a full ping queue never blocks the event loop
@router.post("/ping/{key}")
def ping(key: str, request: Request):
    if _service(request).engine.register_ping(key):
        return {"ok": True, "key": key}
    return JSONResponse(status_code=503, content={"ok": False, "key": key, "error": "ping queue unavailable"})


@router.get("/health")
def health(request: Request) -> Dict[str, Any]:
    return {"ok": True, **_service(request).status()}


def create_app(service: "Service") -> FastAPI:
    """FastAPI app whose lifespan starts and stops the engine and dispatcher."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        service.start()
        logger.info("ping API ready")
        try:
            yield
        finally:
            service.stop()

    app = FastAPI(title="dodemansknop", version="0.1.0", lifespan=lifespan)
    app.state.service = service
    app.include_router(router)
    return app
