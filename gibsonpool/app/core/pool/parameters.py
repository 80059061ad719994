# File: gibsonpool/app/core/pool/parameters.py
# Version: v0.2.1
"""
Pydantic model for oligo pool design parameters (camelCase keys, strict).

Usage:
    from gibsonpool.app.core.pool.parameters import PoolDesignParameters

JSON shape (see config/pool_param_default.json):

  {
    "oligoSize": 200,
    "overlapSize": 40,
    "primerLength": 15,
    "optimalTm": 60.0,
    "maxPrimerAttempts": 1000,
    "randomSeed": null,
    "workers": 0
  }

v0.2.0
- Size consistency (`overlapSize + 2*primerLength < oligoSize`) is checked on
  construction; an invalid combination is a fatal configuration error.

v0.2.1
- `primerLength` only has the 3'-anchor lower bound here; primer3's size cap
  applies to synthetic primers (see core/primer/sources.py).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, confloat, conint, model_validator

from gibsonpool.app.core.pool.compatibility import PRIMER_ANCHOR_LENGTH


class PoolDesignParameters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Sizes
    oligoSize: conint(gt=0) = Field(200, description="Full oligo length (bp)")
    overlapSize: conint(gt=0) = Field(40, description="Gibson overlap between consecutive fragments (bp)")
    primerLength: conint(ge=PRIMER_ANCHOR_LENGTH) = Field(15, description="Length of each amplification primer")

    # Primer thermodynamics (delegated to primer3)
    optimalTm: confloat(gt=0) = Field(60.0, description="Target primer melting temperature (°C)")

    # Primer search budget
    maxPrimerAttempts: conint(gt=0) = Field(1000, description="Primer pairs tried per enzyme before giving up")

    # Reproducibility
    randomSeed: Optional[int] = Field(None, description="Optional RNG seed for synthetic primers")

    # Fragment design fan-out (0/1 = serial)
    workers: conint(ge=0) = Field(0, description="Threads for per-sequence fragment design")

    @model_validator(mode="after")
    def _check_sizes(self) -> "PoolDesignParameters":
        if self.overlapSize + 2 * self.primerLength >= self.oligoSize:
            raise ValueError(
                f"Oligo size ({self.oligoSize}) must exceed overlap size plus both primers "
                f"({self.overlapSize} + 2*{self.primerLength})"
            )
        return self
