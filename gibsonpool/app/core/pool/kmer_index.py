# File: gibsonpool/app/core/pool/kmer_index.py
# Version: v0.1.0
"""
K-mer uniqueness index over the whole input corpus.

Every sequence is scanned with a sliding window of width k (k = assembly overlap
size); windows never wrap across sequence boundaries. A k-mer is *unique* iff it
occurs exactly once in the corpus, counting intra- and inter-sequence repeats
alike. Built once, then query-only.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, Optional

from gibsonpool.app.core.models.sequences import NucleotideSequence

log = logging.getLogger(__name__)


class KmerIndex:
    def __init__(self, k: int, counts: Dict[str, int]) -> None:
        if k <= 0:
            raise ValueError(f"k must be positive (got {k})")
        self._k = k
        self._counts = dict(counts)

    @classmethod
    def build(
        cls,
        sequences: Iterable[NucleotideSequence],
        k: int,
        logger: Optional[logging.Logger] = None,
    ) -> "KmerIndex":
        lg = logger or log
        if k <= 0:
            raise ValueError(f"k must be positive (got {k})")
        lg.info("Building %d-mer map for overlaps...", k)
        counts: Counter = Counter()
        for seq in sequences:
            bases = seq.bases
            counts.update(bases[i:i + k] for i in range(len(bases) - k + 1))
        index = cls(k, counts)
        lg.info(
            "Done building k-mer map: %d different %d-mers with a total of %d occurrences.",
            len(index), k, index.total_occurrences,
        )
        return index

    @property
    def k(self) -> int:
        return self._k

    @property
    def total_occurrences(self) -> int:
        return sum(self._counts.values())

    def count(self, kmer: str) -> int:
        """
        Occurrence count of an indexed k-mer. Querying a k-mer that was never
        inserted is a caller bug and raises KeyError.
        """
        key = kmer.upper()
        if len(key) != self._k:
            raise ValueError(f"Expected a {self._k}-mer, got length {len(key)}")
        try:
            return self._counts[key]
        except KeyError:
            raise KeyError(f"{self._k}-mer {key} is not in the index") from None

    def is_unique(self, kmer: str) -> bool:
        return self.count(kmer) == 1

    def as_dict(self) -> Dict[str, int]:
        return dict(self._counts)

    def __contains__(self, kmer: object) -> bool:
        return isinstance(kmer, str) and kmer.upper() in self._counts

    def __len__(self) -> int:
        return len(self._counts)
