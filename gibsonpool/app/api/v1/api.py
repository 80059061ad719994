# File: gibsonpool/app/api/v1/api.py
# Version: v0.1.0
"""
v1 API aggregator.

Routers included under /api:
- health
- pool (design, parameters, enzymes)
"""
from __future__ import annotations

from fastapi import APIRouter

from . import health as health_router
from . import pool as pool_router

api_router = APIRouter()
api_router.include_router(health_router.router)
api_router.include_router(pool_router.router)
