# -*- coding: utf-8 -*-
"""
Pet health API

Health records, vaccination schedules, recurring reminders and the derived
health score, served under /api/health.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .app_db import init_app_db
from .config import settings
from .errors import HealthError
from .records.api import router as records_router
from .reminders.api import router as reminders_router
from .stats.api import router as stats_router
from .vaccinations.api import router as vaccinations_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pet Health",
    description="Health records, vaccinations, reminders and health score",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.on_event("startup")
def _startup() -> None:
    configure_logging()
    init_app_db(settings.db_path)
    logger.info("Pet health DB ready at %s", settings.db_path)


# Ensure the DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.db_path)


@app.exception_handler(HealthError)
async def _health_error_handler(request: Request, exc: HealthError) -> JSONResponse:
    if exc.status_code != 404:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


app.include_router(records_router)
app.include_router(vaccinations_router)
app.include_router(reminders_router)
app.include_router(stats_router)


@app.get("/api/ping")
def ping() -> dict:
    return {"ok": True}
