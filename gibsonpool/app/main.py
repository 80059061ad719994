# File: gibsonpool/app/main.py
# Version: v0.1.0
"""
FastAPI app entry.

- Keeps all route assembly in gibsonpool/app/api/v1/api.py.
- Mounts /api/* via `api_router`.
"""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gibsonpool.app.api.v1.api import api_router
from gibsonpool.app.core.config import settings


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    version=settings.APP_VERSION,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


# APIs under /api
app.include_router(api_router, prefix=settings.API_PREFIX)
