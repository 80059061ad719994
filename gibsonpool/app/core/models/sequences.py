# File: gibsonpool/app/core/models/sequences.py
# Version: v0.2.0
"""
Sequence value objects shared by the pool designer.

- `NucleotideSequence`: a named parent sequence, upper-cased and alphabet-checked
  on construction (A/C/G/T/U only).
- `Subsequence`: a read-only window [start, start + size) on a parent, 0-based.

v0.2.0
- Window moves (`move_start`, `move_end`, `shift`) return *new* windows; the
  fragment designer keeps its working chain as an immutable tuple.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Tuple, Union

VALID_BASES = frozenset("ACGTU")

_RC_MAP = str.maketrans("ACGTUacgtu", "TGCAAtgcaa")


def reverse_complement(seq: str) -> str:
    """Reverse complement (A<->T, C<->G; U pairs with A)."""
    return seq.translate(_RC_MAP)[::-1]


class InvalidSequenceError(ValueError):
    """Input sequence is unusable (bad nucleotide, duplicate id)."""


@dataclass(frozen=True)
class NucleotideSequence:
    id: str
    bases: str

    def __post_init__(self) -> None:
        bases = (self.bases or "").upper()
        for base in bases:
            if base not in VALID_BASES:
                raise InvalidSequenceError(f"Base {base} not allowed in sequence {self.id}")
        object.__setattr__(self, "bases", bases)

    def __len__(self) -> int:
        return len(self.bases)

    def contains(self, motif: str) -> bool:
        return motif.upper() in self.bases


SequenceLike = Union[NucleotideSequence, Tuple[str, str]]


def coerce_sequences(items: Iterable[SequenceLike]) -> List[NucleotideSequence]:
    """
    Accept `NucleotideSequence` objects or plain (id, bases) pairs and return
    validated sequences in input order. Duplicate ids are rejected because
    fragments and oligos are ordered and named by parent id.
    """
    out: List[NucleotideSequence] = []
    seen = set()
    for item in items:
        seq = item if isinstance(item, NucleotideSequence) else NucleotideSequence(*item)
        if seq.id in seen:
            raise InvalidSequenceError(f"Duplicate sequence id {seq.id}")
        seen.add(seq.id)
        out.append(seq)
    return out


@dataclass(frozen=True)
class Subsequence:
    """
    Window on a parent sequence. Ordered by (parent id, start).
    """
    parent: NucleotideSequence
    start: int
    size: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Start position on parent must be >= 0 (got {self.start})")
        if self.size < 0:
            raise ValueError(f"Size must be >= 0 (got {self.size})")
        if self.start + self.size > len(self.parent):
            raise ValueError(
                f"Sequence {self.parent.id} is too short ({len(self.parent)}) to get a subsequence "
                f"of length {self.size} starting at position {self.start}"
            )

    @property
    def end(self) -> int:
        return self.start + self.size

    @property
    def bases(self) -> str:
        return self.parent.bases[self.start:self.end]

    @property
    def fragment_id(self) -> str:
        return f"{self.parent.id}_{self.start}_{self.end}"

    @property
    def sort_key(self) -> Tuple[str, int]:
        return (self.parent.id, self.start)

    def left_end(self, k: int) -> str:
        return self.bases[:k]

    def right_end(self, k: int) -> str:
        return self.bases[self.size - k:]

    # --- window moves (copies) ---

    def move_start(self, delta: int) -> "Subsequence":
        """Move the start by `delta`, keeping the end fixed."""
        return replace(self, start=self.start + delta, size=self.size - delta)

    def move_end(self, delta: int) -> "Subsequence":
        """Move the end by `delta`, keeping the start fixed."""
        return replace(self, size=self.size + delta)

    def shift(self, delta: int) -> "Subsequence":
        """Move both ends by `delta`, keeping the size."""
        return replace(self, start=self.start + delta)

    def __lt__(self, other: "Subsequence") -> bool:
        return self.sort_key < other.sort_key
