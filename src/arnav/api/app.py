# src/arnav/api/app.py
"""
FastAPI application wiring.

Creates the `FastAPI` instance and CORS policy; the AR front-end is served elsewhere and
only calls the JSON endpoints in `arnav.api.routes`.

Run locally with `arnav serve` (or `uvicorn arnav.api.app:app --port 8000`).
"""

from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from arnav.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title="ARNav API", version="0.1.0")

# AR pages must be served over HTTPS from a different origin, so CORS is on by default.
# Configure via env:
# - ARNAV_CORS_ORIGINS="https://ar.example.com,https://localhost:8443"
# - ARNAV_CORS_ALLOW_LOCAL=0 to disable the default localhost allowance
cors_origins = [s.strip() for s in os.getenv("ARNAV_CORS_ORIGINS", "").split(",") if s.strip()]
cors_allow_local = os.getenv("ARNAV_CORS_ALLOW_LOCAL", "1").strip().lower() in {"1", "true", "yes", "y"}
cors_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if cors_allow_local and not cors_origins else None
if cors_origins or cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=cors_origin_regex,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

app.include_router(router)
