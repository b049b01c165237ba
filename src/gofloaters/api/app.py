# src/gofloaters/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance and installs CORS for the browser client.
Route logic lives in `gofloaters.api.routes`; search logic in `gofloaters.search`.

Run locally with:

    uvicorn gofloaters.api.app:app --reload --port 5000
"""

from __future__ import annotations

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from gofloaters.config.settings import get_settings
from gofloaters.core.logging import configure_logging

from .routes import router

configure_logging()

app = FastAPI(title=f"{get_settings().app.name} API", version="0.1.0")

# CORS (dev-friendly): the web client usually runs on a separate dev server.
# Configure via env:
# - GOFLOATERS_CORS_ORIGINS="http://localhost:5173,http://127.0.0.1:5173"
# - GOFLOATERS_CORS_ALLOW_LOCAL=0 to disable the default localhost allowance
cors_origins = [s.strip() for s in os.getenv("GOFLOATERS_CORS_ORIGINS", "").split(",") if s.strip()]
cors_allow_local = os.getenv("GOFLOATERS_CORS_ALLOW_LOCAL", "1").strip().lower() in {"1", "true", "yes", "y"}
cors_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$" if cors_allow_local and not cors_origins else ""
if cors_origins or cors_origin_regex:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_origin_regex=cors_origin_regex or None,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

app.include_router(router)
