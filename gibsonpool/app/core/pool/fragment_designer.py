# File: gibsonpool/app/core/pool/fragment_designer.py
# Version: v0.4.1
"""
Overlapping fragment designer: cut one parent sequence into a chain of fragments
whose shared junctions (overlap-size k-mers used as Gibson homology) are unique
in the whole corpus.

Algorithm (left-to-right greedy chain with local backtracking)
--------------------------------------------------------------
1) Seed fragment 0 at position 0 with the target length.
2) Shrink it from the left until its leading k-mer is unique.
3) Shrink it from the right until its trailing k-mer is unique.
4) Each next fragment starts at `previous.end - k`. While its leading k-mer (the
   junction) is not unique, shift it one base left and pull the previous
   fragment's end one base left with it, so the junction stays shared. If the
   new start collapses onto the previous start the region has no unique k-mer:
   the parent is dropped (REGION_WITH_NO_UNIQUE_KMERS).
5) When the remaining tail fits in one fragment, place it the same way (if the
   junction shift leaves bases uncovered, keep placing), then shrink the last
   fragment from the right until its trailing k-mer is unique.

A parent no longer than the target length becomes a single fragment iff both of
its terminal k-mers are unique; otherwise it is dropped.

The working chain is an immutable `FragmentChain`; every step function returns a
new chain, so each move can be inspected and tested on its own.

v0.4.0
- The tail fragment's junction is placed like any other junction, so every
  junction of an accepted chain is unique.
- `design_all()` optionally fans out per parent on a thread pool.

v0.4.1
- Worker threads no longer report to the error sink; `design_all()` reports
  dropped parents in input order once all chains are back.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from gibsonpool.app.core.models.sequences import NucleotideSequence, Subsequence
from gibsonpool.app.core.pool.errors import REGION_WITH_NO_UNIQUE_KMERS, ErrorSink
from gibsonpool.app.core.pool.kmer_index import KmerIndex

log = logging.getLogger(__name__)


class NoUniqueRegionError(Exception):
    """No unique k-mer is available where a fragment end must go."""


@dataclass(frozen=True)
class FragmentChain:
    fragments: Tuple[Subsequence, ...] = ()

    @property
    def last(self) -> Subsequence:
        return self.fragments[-1]

    def append(self, fragment: Subsequence) -> "FragmentChain":
        return FragmentChain(self.fragments + (fragment,))

    def replace_last(self, fragment: Subsequence) -> "FragmentChain":
        return FragmentChain(self.fragments[:-1] + (fragment,))

    def __len__(self) -> int:
        return len(self.fragments)


# --------------------- Step functions ---------------------

def shrink_left_until_unique(frag: Subsequence, index: KmerIndex) -> Subsequence:
    """Advance the start (end fixed) until the leading k-mer is unique."""
    k = index.k
    while not index.is_unique(frag.left_end(k)):
        if frag.size - 1 < k:
            raise NoUniqueRegionError(
                f"no unique {k}-mer in {frag.parent.id} before position {frag.end}"
            )
        frag = frag.move_start(1)
        log.debug("Left end is not unique. Trying %s:%d-%d.", frag.parent.id, frag.start, frag.end)
    return frag


def shrink_right_until_unique(frag: Subsequence, index: KmerIndex) -> Subsequence:
    """Pull the end back (start fixed) until the trailing k-mer is unique."""
    k = index.k
    while not index.is_unique(frag.right_end(k)):
        if frag.size - 1 < k:
            raise NoUniqueRegionError(
                f"no unique {k}-mer in {frag.parent.id} after position {frag.start}"
            )
        frag = frag.move_end(-1)
        log.debug("Right end is not unique. Trying %s:%d-%d.", frag.parent.id, frag.start, frag.end)
    return frag


def shift_junction_left(
    chain: FragmentChain,
    candidate: Subsequence,
) -> Tuple[FragmentChain, Subsequence]:
    """Move the junction between chain.last and candidate one base to the left."""
    return chain.replace_last(chain.last.move_end(-1)), candidate.shift(-1)


def place_fragment(chain: FragmentChain, candidate: Subsequence, index: KmerIndex) -> FragmentChain:
    """Append `candidate`, backing the shared junction up until it is unique."""
    k = index.k
    while not index.is_unique(candidate.left_end(k)):
        chain, candidate = shift_junction_left(chain, candidate)
        if candidate.start == chain.last.start:
            raise NoUniqueRegionError(
                f"no unique {k}-mer in {candidate.parent.id} between positions "
                f"{chain.last.start} and {chain.last.end}"
            )
        log.debug(
            "%s\tLeft end is not unique. Changing to %d-%d and previous fragment to %d-%d.",
            candidate.parent.id, candidate.start, candidate.end, chain.last.start, chain.last.end,
        )
    return chain.append(candidate)


# --------------------- Designer ---------------------

class FragmentDesigner:
    def __init__(
        self,
        index: KmerIndex,
        overlap_size: int,
        errors: Optional[ErrorSink] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if index.k != overlap_size:
            raise ValueError(f"Index k ({index.k}) must equal the overlap size ({overlap_size})")
        self.index = index
        self.overlap_size = overlap_size
        self.log = logger or log
        self.errors = errors if errors is not None else ErrorSink(self.log)

    # --------------------- Public API ---------------------

    def design(self, parent: NucleotideSequence, target_length: int) -> List[Subsequence]:
        """
        Fragment one parent. Returns the chain in parent order, or an empty list
        (after reporting REGION_WITH_NO_UNIQUE_KMERS) if no valid chain exists.
        """
        chain, failure = self._design_one(parent, target_length)
        if failure is not None:
            self.errors.report(REGION_WITH_NO_UNIQUE_KMERS, parent.id, failure)
        return chain

    def design_all(
        self,
        parents: Sequence[NucleotideSequence],
        target_length: int,
        workers: int = 0,
    ) -> List[Subsequence]:
        """
        Fragment every parent and pool the results, ordered by (parent id, start).
        Failures are reported from the calling thread in input order, whatever
        the number of workers.
        """
        if workers and workers > 1 and len(parents) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes: List[Tuple[List[Subsequence], Optional[str]]] = list(
                    pool.map(lambda p: self._design_one(p, target_length), parents)
                )
        else:
            outcomes = [self._design_one(p, target_length) for p in parents]

        pooled: List[Subsequence] = []
        for parent, (chain, failure) in zip(parents, outcomes):
            if failure is not None:
                self.errors.report(REGION_WITH_NO_UNIQUE_KMERS, parent.id, failure)
            pooled.extend(chain)
        return sorted(pooled, key=lambda f: f.sort_key)

    def _design_one(
        self,
        parent: NucleotideSequence,
        target_length: int,
    ) -> Tuple[List[Subsequence], Optional[str]]:
        """(chain, None) on success, ([], reason) when the parent must be dropped."""
        if target_length <= self.overlap_size:
            raise ValueError(
                f"Subsequence length ({target_length}) must be larger than overlap size ({self.overlap_size})"
            )
        self.log.info(
            "Designing overlapping subsequences of length %d for %s...", target_length, parent.id
        )
        try:
            chain = self._build_chain(parent, target_length)
        except NoUniqueRegionError as err:
            return [], str(err)
        self.log.info("%s: %d fragment(s)", parent.id, len(chain))
        return list(chain.fragments), None

    # --------------------- Chain building ---------------------

    def _build_chain(self, parent: NucleotideSequence, length: int) -> FragmentChain:
        k = self.overlap_size
        n = len(parent)

        if n <= length:
            if n < k:
                raise NoUniqueRegionError(f"sequence is shorter than the overlap size ({n} < {k})")
            whole = Subsequence(parent, 0, n)
            if not (self.index.is_unique(whole.left_end(k)) and self.index.is_unique(whole.right_end(k))):
                raise NoUniqueRegionError("sequence is shorter than fragment length and ends are not unique")
            return FragmentChain((whole,))

        first = Subsequence(parent, 0, length)
        first = shrink_left_until_unique(first, self.index)
        first = shrink_right_until_unique(first, self.index)
        self.log.debug("Adding initial subsequence %s:%d-%d.", parent.id, first.start, first.end)
        chain = FragmentChain((first,))

        # Every placed fragment ends past the previous one, so this terminates.
        while chain.last.end < n:
            start = chain.last.end - k
            candidate = Subsequence(parent, start, min(length, n - start))
            chain = place_fragment(chain, candidate, self.index)

        chain = chain.replace_last(shrink_right_until_unique(chain.last, self.index))
        return chain
