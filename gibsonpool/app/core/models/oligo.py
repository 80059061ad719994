# File: gibsonpool/app/core/models/oligo.py
# Version: v0.3.0
"""
Primer pairs, full oligos and flat oligo records.

Full oligo layout (top strand, 5'->3'):

    left primer | top motif | throwaway | fragment | throwaway | RC(top motif) | RC(right primer)

The oligo sequence is always derived from its parts; it is never stored.

v0.3.0
- `OligoRecord` is the flat, writer-facing view (FASTA/table/API).
- `core_fragment_length()` derives the payload size an enzyme leaves in an oligo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from gibsonpool.app.core.models.enzyme import THROWAWAY_BASE, RestrictionEnzyme
from gibsonpool.app.core.models.sequences import NucleotideSequence, Subsequence, reverse_complement


class OligoLayoutError(ValueError):
    """Primers + sites + throwaway bases leave no room for a usable fragment."""


@dataclass(frozen=True)
class PrimerPair:
    left: str
    right: str

    def __post_init__(self) -> None:
        left = (self.left or "").strip().upper()
        right = (self.right or "").strip().upper()
        if not left or not right:
            raise ValueError("Primer pair needs both a left and a right primer")
        object.__setattr__(self, "left", left)
        object.__setattr__(self, "right", right)


def core_fragment_length(
    enzyme: RestrictionEnzyme,
    oligo_size: int,
    primer_length: int,
    overlap_size: int,
) -> int:
    """
    Fragment length that brings a full oligo to `oligo_size`:
    oligo_size - 2*primer - top motif - bottom motif - 2*throwaway.
    Must exceed the overlap size so consecutive fragments can share a junction.
    """
    length = (
        oligo_size
        - 2 * primer_length
        - enzyme.top_motif_length
        - enzyme.bottom_motif_length
        - 2 * enzyme.throwaway_bases
    )
    if length <= overlap_size:
        raise OligoLayoutError(
            f"Enzyme {enzyme.name}: pieces other than the fragment leave {length} bp in a "
            f"{oligo_size} bp oligo; need more than the overlap size ({overlap_size})."
        )
    return length


@dataclass(frozen=True)
class OligoRecord:
    oligo_id: str
    oligo_set: str
    parent_id: str
    enzyme: str
    top_motifs: Tuple[str, ...]
    bottom_motifs: Tuple[str, ...]
    left_primer: str
    right_primer: str
    fragment_id: str
    fragment_start: int
    fragment_end: int
    fragment: str
    full_oligo: str


@dataclass(frozen=True)
class FullOligo:
    fragment: Subsequence
    primer_pair: PrimerPair
    enzyme: RestrictionEnzyme

    @property
    def parent(self) -> NucleotideSequence:
        return self.fragment.parent

    @property
    def oligo_id(self) -> str:
        return f"oligo_{self.fragment.fragment_id}"

    @property
    def sequence(self) -> str:
        throwaway = THROWAWAY_BASE * self.enzyme.throwaway_bases
        motif = self.enzyme.primary_motif
        return (
            self.primer_pair.left
            + motif
            + throwaway
            + self.fragment.bases
            + throwaway
            + reverse_complement(motif)
            + reverse_complement(self.primer_pair.right)
        )

    def to_record(self, oligo_set: Optional[str] = None) -> OligoRecord:
        frag = self.fragment
        return OligoRecord(
            oligo_id=self.oligo_id,
            oligo_set=oligo_set or "-",
            parent_id=self.parent.id,
            enzyme=self.enzyme.name,
            top_motifs=self.enzyme.top_motifs,
            bottom_motifs=self.enzyme.bottom_motifs,
            left_primer=self.primer_pair.left,
            right_primer=self.primer_pair.right,
            fragment_id=frag.fragment_id,
            fragment_start=frag.start,
            fragment_end=frag.end,
            fragment=frag.bases,
            full_oligo=self.sequence,
        )

    def __lt__(self, other: "FullOligo") -> bool:
        return self.fragment.sort_key < other.fragment.sort_key
