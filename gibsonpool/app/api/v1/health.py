# File: gibsonpool/app/api/v1/health.py
# Version: v0.1.1
"""
Liveness probe for the pool design API.

v0.1.1
- Reports the application name and version next to the status.
"""
from __future__ import annotations

from typing import Dict

from fastapi import APIRouter

from ...core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "app": settings.APP_NAME, "version": settings.APP_VERSION}
