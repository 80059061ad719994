# File: gibsonpool/app/services/pool_service.py
# Version: v0.1.0
"""
Pool design service behind the HTTP API.

`run_pool_design` resolves enzymes, merges parameters, runs the designer and
maps the result onto the response schema. It raises the core exceptions
unchanged; the router maps them onto HTTP status codes.
"""

from __future__ import annotations

import logging
from typing import Optional

from gibsonpool.app.config.config_enzymes import load_enzyme_catalog, resolve_enzymes
from gibsonpool.app.config.config_pool import load_current_params, merge_params
from gibsonpool.app.core.config import settings
from gibsonpool.app.core.models.oligo import PrimerPair
from gibsonpool.app.core.pool.pool_designer import OligoPoolDesigner, PoolDesignResult
from gibsonpool.app.core.primer.sources import PrimerRequest, primer_candidates
from gibsonpool.app.core.primer.thermodynamics import primer_tm
from gibsonpool.app.schemas.pool import (
    OligoOut,
    PoolDesignRequest,
    PoolDesignResponse,
    PrimerPairOut,
    SequenceErrorOut,
)

log = logging.getLogger(__name__)


def to_response(result: PoolDesignResult, set_name: Optional[str] = None) -> PoolDesignResponse:
    oligos = [
        OligoOut(
            oligo_id=r.oligo_id,
            oligo_set=r.oligo_set,
            parent_id=r.parent_id,
            enzyme=r.enzyme,
            top_motifs=list(r.top_motifs),
            bottom_motifs=list(r.bottom_motifs),
            left_primer=r.left_primer,
            right_primer=r.right_primer,
            fragment_id=r.fragment_id,
            start=r.fragment_start,
            end=r.fragment_end,
            fragment=r.fragment,
            full_oligo=r.full_oligo,
        )
        for r in result.records(set_name)
    ]
    errors = [SequenceErrorOut(code=e.code, sequence_id=e.sequence_id, detail=e.detail) for e in result.errors]
    pairs = [
        PrimerPairOut(
            enzyme=name,
            left=pair.left,
            right=pair.right,
            left_tm=round(primer_tm(pair.left), 2),
            right_tm=round(primer_tm(pair.right), 2),
            attempts=result.attempts_by_enzyme.get(name, 0),
        )
        for name, pair in result.primer_pairs.items()
    ]
    return PoolDesignResponse(oligos=oligos, errors=errors, primer_pairs=pairs)


def run_pool_design(req: PoolDesignRequest) -> PoolDesignResponse:
    params = merge_params(load_current_params(), req.params)
    enzymes = resolve_enzymes(req.enzymes, load_enzyme_catalog(settings.ENZYME_CATALOG_PATH))
    precomputed = [PrimerPair(p.left, p.right) for p in (req.primer_pairs or [])]
    candidates = primer_candidates(
        PrimerRequest(params.primerLength, params.optimalTm),
        precomputed=precomputed,
        synthetic=req.synthetic,
        seed=params.randomSeed,
    )
    log.info("Pool design request: %d sequence(s), enzymes %s", len(req.sequences), req.enzymes)
    designer = OligoPoolDesigner(
        [(s.id, s.sequence) for s in req.sequences],
        enzymes,
        params,
        primer_candidates=candidates,
    )
    return to_response(designer.design(), req.set_name)
