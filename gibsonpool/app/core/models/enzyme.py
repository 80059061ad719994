# File: gibsonpool/app/core/models/enzyme.py
# Version: v0.1.1
"""
Type IIS restriction enzyme descriptor.

An enzyme carries its top-strand recognition motifs, its bottom-strand motifs and
the bottom-strand cleavage offset (bases past the 3' end of the top-strand site).
A negative offset means the bottom strand is cut upstream of the site end, so the
Gibson recession step would chew into payload; |offset| throwaway bases are then
inserted between the site and the payload.

v0.1.1
- Motifs are de-duplicated but keep catalog order (first top motif is the one
  written into oligos).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from gibsonpool.app.core.models.sequences import reverse_complement

THROWAWAY_BASE = "T"

_MOTIF_BASES = frozenset("ACGT")


class EnzymeDefinitionError(ValueError):
    """Enzyme descriptor is inconsistent or cannot be used for oligo design."""


def _normalize_motifs(name: str, strand: str, motifs: Iterable[str]) -> Tuple[str, ...]:
    out = tuple(dict.fromkeys(m.strip().upper() for m in motifs if m and m.strip()))
    if not out:
        raise EnzymeDefinitionError(f"Enzyme {name} has no {strand}-strand recognition sequence")
    for m in out:
        if set(m) - _MOTIF_BASES:
            raise EnzymeDefinitionError(f"Enzyme {name}: {strand}-strand motif {m} is not plain A/C/G/T")
    size = len(out[0])
    if any(len(m) != size for m in out):
        raise EnzymeDefinitionError(
            f"All {strand} strand recognition sequences of enzyme {name} must have same length."
        )
    return out


@dataclass(frozen=True)
class RestrictionEnzyme:
    name: str
    top_motifs: Tuple[str, ...]
    bottom_motifs: Tuple[str, ...]
    bottom_strand_cleavage_offset: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "top_motifs", _normalize_motifs(self.name, "top", self.top_motifs))
        object.__setattr__(self, "bottom_motifs", _normalize_motifs(self.name, "bottom", self.bottom_motifs))
        object.__setattr__(self, "bottom_strand_cleavage_offset", int(self.bottom_strand_cleavage_offset))

    @classmethod
    def from_top_motifs(
        cls,
        name: str,
        top_motifs: Iterable[str],
        bottom_strand_cleavage_offset: int,
        bottom_motifs: Optional[Iterable[str]] = None,
    ) -> "RestrictionEnzyme":
        """Build an enzyme; bottom motifs default to the reverse complements of the top ones."""
        top = tuple(top_motifs)
        bottom = tuple(bottom_motifs) if bottom_motifs else tuple(reverse_complement(m.upper()) for m in top)
        return cls(name, top, bottom, bottom_strand_cleavage_offset)

    @property
    def primary_motif(self) -> str:
        return self.top_motifs[0]

    @property
    def top_motif_length(self) -> int:
        return len(self.top_motifs[0])

    @property
    def bottom_motif_length(self) -> int:
        return len(self.bottom_motifs[0])

    @property
    def throwaway_bases(self) -> int:
        return max(0, -self.bottom_strand_cleavage_offset)

    @property
    def reverse_complement_motifs(self) -> Tuple[str, ...]:
        return tuple(reverse_complement(m) for m in self.top_motifs)

    def site_in(self, bases: str) -> bool:
        """True iff any top-strand motif or its reverse complement occurs in `bases`."""
        s = bases.upper()
        return any(m in s or reverse_complement(m) in s for m in self.top_motifs)

    def __str__(self) -> str:
        return self.name
