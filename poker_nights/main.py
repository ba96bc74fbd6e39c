# poker_nights/main.py
from __future__ import annotations

import json
import logging
import os
import time
import uuid

from fastapi import FastAPI, Request

from poker_nights import models  # noqa: F401  (import registers models with Base)

# --- DB bootstrapping: create tables at startup ---
from poker_nights.db import Base, engine

# Routers
from .routers import health, insights, nights, players, seasons, stats

# ---------- App ----------
app = FastAPI(title="Poker Nights Stats", version="0.1.0")


# Create tables once on app start
@app.on_event("startup")
def _create_tables() -> None:
    Base.metadata.create_all(bind=engine)


# ---------- Minimal structured logging ----------
logging.basicConfig(level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
logger = logging.getLogger("poker_nights")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    duration_ms = (time.perf_counter() - start) * 1000.0
    log_obj = {
        "msg": "request",
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "query": str(request.url.query) or None,
        "status": response.status_code,
        "duration_ms": round(duration_ms, 2),
    }
    logger.info(json.dumps(log_obj, separators=(",", ":")))
    return response


def _include_router_flex(app: FastAPI, module) -> None:
    for attr in ("router", "route"):
        if hasattr(module, attr):
            app.include_router(getattr(module, attr))
            return
    name = getattr(module, "__name__", str(module))
    raise RuntimeError(f"Module {name} does not define `router` or `route`")


# ---------- Include Routers ----------
_include_router_flex(app, health)  # /health
_include_router_flex(app, players)  # /players
_include_router_flex(app, stats)  # /stats
_include_router_flex(app, nights)  # /nights
_include_router_flex(app, seasons)  # /seasons
_include_router_flex(app, insights)  # /insights
