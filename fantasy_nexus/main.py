# fantasy_nexus/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import time
import os

# ------------ Router imports ------------
from fantasy_nexus.routers import (
    me_routes,
    nfl_routes,
    start_sit_routes,
)
from fantasy_nexus.core.cache import close_cache
from fantasy_nexus.core.db import close_engine, db_enabled, init_engine
from fantasy_nexus.services.nfl_weeks import configured_overrides, current_week_window

# ------------ Logging ------------
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger("app")


# ------------ Lifespan ------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # bad override file should stop startup, not surface per request
    configured_overrides()
    await init_engine()
    logger.info("Fantasy Nexus API startup complete (db=%s)", db_enabled())
    try:
        yield
    finally:
        await close_cache()
        await close_engine()


# ------------ App ------------
app = FastAPI(
    title="Fantasy Nexus API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# ------------ Access log middleware ------------
class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        t0 = time.perf_counter()
        try:
            response = await call_next(request)
            status = response.status_code
        except Exception:
            status = 500
            raise
        finally:
            dt = (time.perf_counter() - t0) * 1000
            logger.info(
                "ACCESS %s %s q=%s -> %s in %.1fms",
                request.method,
                request.url.path,
                request.url.query,
                status,
                dt,
            )
        return response


app.add_middleware(AccessLogMiddleware)

# ------------ CORS ------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------ Global error handler ------------
@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    logger.exception("UNHANDLED ERROR: %s %s", request.method, request.url)
    return JSONResponse(status_code=500, content={"error": "internal_error"})


# ------------ Health & status ------------
@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/status")
async def status():
    ww = current_week_window()
    return {
        "ok": True,
        "db": db_enabled(),
        "has_redis_url": bool(os.getenv("REDIS_URL")),
        "has_supabase": bool(os.getenv("SUPABASE_URL") and os.getenv("SUPABASE_SERVICE_ROLE_KEY")),
        "season": ww.season_year,
        "week": ww.week,
    }


# ------------ Mount routers ------------
app.include_router(nfl_routes.router, prefix="/api/nfl")
app.include_router(start_sit_routes.router, prefix="/api/start-sit")
app.include_router(me_routes.router, prefix="/api/me")


# For local runs: `uvicorn fantasy_nexus.main:app --reload`
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fantasy_nexus.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
