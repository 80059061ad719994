# File: gibsonpool/app/api/v1/pool.py
# Version: v0.1.1
"""
Pool design API (mounted under /api):

- POST /v1/pool/design      -> PoolDesignResponse
- GET  /v1/pool/parameters  -> current stored PoolDesignParameters (camelCase)
- GET  /v1/pool/enzymes     -> bundled enzyme catalog

Error mapping:
- invalid parameters (pydantic ValidationError)             -> 422
- bad sequences / enzymes / oligo layout (ValueError family) -> 400
- no primer pair found (search exhausted / primer3 failed)  -> 409
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from ...config.config_enzymes import load_enzyme_catalog
from ...config.config_pool import load_current_params
from ...core.config import settings
from ...core.pool.oligo_assembler import PrimerSearchExhaustedError
from ...core.primer.sources import PrimerDesignError
from ...schemas.pool import PoolDesignRequest, PoolDesignResponse
from ...services.pool_service import run_pool_design

router = APIRouter(prefix="/v1/pool", tags=["pool"])


@router.post("/design", response_model=PoolDesignResponse)
def design_pool(payload: PoolDesignRequest) -> PoolDesignResponse:
    """Design a pool synchronously; per-sequence rejections are listed in `errors`."""
    try:
        return run_pool_design(payload)
    except (PrimerSearchExhaustedError, PrimerDesignError) as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/parameters")
def get_parameters() -> Dict[str, Any]:
    return load_current_params().model_dump()


@router.get("/enzymes")
def list_enzymes() -> List[Dict[str, Any]]:
    catalog = load_enzyme_catalog(settings.ENZYME_CATALOG_PATH)
    return [
        {
            "name": e.name,
            "topMotifs": list(e.top_motifs),
            "bottomMotifs": list(e.bottom_motifs),
            "bottomStrandCleavageOffset": e.bottom_strand_cleavage_offset,
        }
        for e in catalog.values()
    ]
