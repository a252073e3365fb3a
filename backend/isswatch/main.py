"""FastAPI application — CORS, route registration, health check."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from isswatch.config import get_settings
from isswatch.models import HealthResponse
from isswatch.routes.relay import router as relay_router
from isswatch.routes.viewer import router as viewer_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

if not get_settings().n2yo_api_key:
    logger.warning("N2YO_API_KEY is not set. Set it in .env before starting the server.")

app = FastAPI(
    title="ISS Watch",
    description="N2YO relay and ISS position / visible-pass map",
    version="1.0.0",
)

# The relay is called from browser pages on other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(relay_router)
app.include_router(viewer_router)


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok")
