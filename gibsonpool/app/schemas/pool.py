# File: gibsonpool/app/schemas/pool.py
# Version: v0.1.1
"""
Pydantic schemas for oligo pool design.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, constr


class SequenceIn(BaseModel):
    """One named input sequence."""
    id: constr(strip_whitespace=True, min_length=1) = Field(..., description="Sequence id (unique in the request).")
    sequence: constr(strip_whitespace=True, min_length=1) = Field(
        ...,
        description="Nucleotide sequence (A/C/G/T/U; case-insensitive).",
        examples=["ACGTTGCA..."],
    )


class PrimerPairIn(BaseModel):
    left: constr(strip_whitespace=True, min_length=1)
    right: constr(strip_whitespace=True, min_length=1)


class PoolDesignRequest(BaseModel):
    """Request payload for a pool design run."""
    sequences: List[SequenceIn] = Field(..., min_length=1)
    enzymes: List[str] = Field(..., min_length=1, description="Candidate enzyme names in priority order.")
    params: Optional[Dict[str, Any]] = Field(
        None, description="camelCase overrides on top of the stored parameters (see PoolDesignParameters)."
    )
    primer_pairs: Optional[List[PrimerPairIn]] = Field(
        None, description="Precomputed primer pairs, tried in order before synthetic ones."
    )
    synthetic: bool = Field(True, description="Design new primer pairs with primer3 once the list runs out.")
    set_name: Optional[str] = Field(None, description="Oligo set description.")


class PrimerPairOut(BaseModel):
    enzyme: str
    left: str
    right: str
    left_tm: float
    right_tm: float
    attempts: int = Field(..., ge=0, description="Candidates tried before this pair was accepted.")


class OligoOut(BaseModel):
    oligo_id: str
    oligo_set: str
    parent_id: str
    enzyme: str
    top_motifs: List[str]
    bottom_motifs: List[str]
    left_primer: str
    right_primer: str
    fragment_id: str
    start: int = Field(..., ge=0, description="0-based inclusive index on the parent.")
    end: int = Field(..., ge=0, description="0-based exclusive index on the parent.")
    fragment: str
    full_oligo: str


class SequenceErrorOut(BaseModel):
    code: str
    sequence_id: str
    detail: str = ""


class PoolDesignResponse(BaseModel):
    oligos: List[OligoOut] = Field(default_factory=list)
    errors: List[SequenceErrorOut] = Field(default_factory=list)
    primer_pairs: List[PrimerPairOut] = Field(default_factory=list)
