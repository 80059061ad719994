# File: gibsonpool/app/core/pool/oligo_assembler.py
# Version: v0.3.0
"""
Find one primer pair that works for every fragment of an enzyme partition and
build the full oligos with it.

Rejection sampling over a candidate supplier:
1) take the next primer pair from the supplier
2) build the full top-strand oligo for every fragment
3) every oligo must carry the forward site once, the RC site once, and be
   structurally compatible with the primer pair; the first violation rejects
   the whole candidate
4) accept the first candidate that passes; otherwise discard and repeat

v0.3.0
- Bounded search: `max_attempts` caps the number of candidates tried, and a
  dry supplier also ends the search. Both raise PrimerSearchExhaustedError.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from gibsonpool.app.core.models.enzyme import RestrictionEnzyme
from gibsonpool.app.core.models.oligo import FullOligo, PrimerPair
from gibsonpool.app.core.models.sequences import Subsequence
from gibsonpool.app.core.pool.compatibility import check_recognition_sites, pair_compatible_with_full_oligo

log = logging.getLogger(__name__)


class PrimerSearchExhaustedError(RuntimeError):
    def __init__(self, enzyme_name: str, attempts: int, reason: str) -> None:
        self.enzyme_name = enzyme_name
        self.attempts = attempts
        self.reason = reason
        super().__init__(
            f"No primer pair compatible with all {enzyme_name} oligos after {attempts} candidate(s): {reason}"
        )


def build_full_oligos(
    fragments: Iterable[Subsequence],
    enzyme: RestrictionEnzyme,
    pair: PrimerPair,
) -> List[FullOligo]:
    return sorted((FullOligo(f, pair, enzyme) for f in fragments), key=lambda o: o.fragment.sort_key)


def validate_oligos(oligos: Sequence[FullOligo], enzyme: RestrictionEnzyme) -> Tuple[bool, str]:
    """Check every oligo; returns (ok, reason of the first violation)."""
    for oligo in oligos:
        seq = oligo.sequence
        ok, reason = check_recognition_sites(seq, enzyme)
        if not ok:
            return False, f"oligo {oligo.oligo_id} {reason}"
        if not pair_compatible_with_full_oligo(oligo.primer_pair, seq):
            return False, f"oligo {oligo.oligo_id} not compatible with primer pair"
    return True, ""


class OligoAssembler:
    def __init__(
        self,
        max_attempts: Optional[int] = 1000,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if max_attempts is not None and max_attempts <= 0:
            raise ValueError("max_attempts must be positive (or None for no ceiling)")
        self.max_attempts = max_attempts
        self.log = logger or log
        self.attempts = 0

    def assemble(
        self,
        fragments: Sequence[Subsequence],
        enzyme: RestrictionEnzyme,
        candidates: Iterable[PrimerPair],
    ) -> List[FullOligo]:
        """
        Return the oligos for the first acceptable primer pair. `candidates` may be
        infinite; the same iterator can be shared between partitions.
        """
        self.attempts = 0
        if not fragments:
            self.log.warning("No fragments for enzyme %s; nothing to assemble.", enzyme.name)
            return []

        self.log.info("Looking for compatible primer pair for %d %s oligos...", len(fragments), enzyme.name)
        supply = iter(candidates)
        last_reason = "no candidates supplied"
        while self.max_attempts is None or self.attempts < self.max_attempts:
            try:
                pair = next(supply)
            except StopIteration:
                raise PrimerSearchExhaustedError(
                    enzyme.name, self.attempts, f"primer supply exhausted ({last_reason})"
                ) from None
            self.attempts += 1
            oligos = build_full_oligos(fragments, enzyme, pair)
            ok, reason = validate_oligos(oligos, enzyme)
            if ok:
                self.log.info(
                    "Found primer pair %s %s after %d candidate(s). Assigning to %d oligos.",
                    pair.left, pair.right, self.attempts, len(oligos),
                )
                return oligos
            last_reason = reason
            self.log.warning("Rejecting primer pair %s %s: %s", pair.left, pair.right, reason)

        raise PrimerSearchExhaustedError(enzyme.name, self.attempts, f"retry ceiling reached ({last_reason})")
