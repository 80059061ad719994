# File: gibsonpool/app/core/pool/pool_designer.py
# Version: v0.3.0
"""
Gibson assembly oligo pool designer (orchestration).

Pipeline
--------
1) validate the corpus (alphabet, unique ids)
2) build the k-mer uniqueness index once over the whole corpus (k = overlap)
3) partition sequences by compatible enzyme (single enzyme preferred)
4) per enzyme: derive the core fragment length and fragment every sequence
5) per enzyme: search one primer pair valid for all of its oligos

Per-sequence problems are collected in the error sink and the sequence is left
out; configuration problems and primer search exhaustion raise.

Usage:
    designer = OligoPoolDesigner(seqs, enzymes, PoolDesignParameters(), primer_candidates=cands)
    result = designer.design()
    for rec in result.records("my pool"):
        ...

v0.3.0
- Partitions run sequentially and draw from one shared candidate stream.
- `PoolDesignResult.records()` produces the flat rows the writers consume.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from gibsonpool.app.core.models.enzyme import RestrictionEnzyme
from gibsonpool.app.core.models.oligo import FullOligo, OligoRecord, PrimerPair, core_fragment_length
from gibsonpool.app.core.models.sequences import SequenceLike, Subsequence, coerce_sequences
from gibsonpool.app.core.pool.enzyme_partition import EnzymePartition, partition_by_enzyme
from gibsonpool.app.core.pool.errors import ErrorSink, SequenceError
from gibsonpool.app.core.pool.fragment_designer import FragmentDesigner
from gibsonpool.app.core.pool.kmer_index import KmerIndex
from gibsonpool.app.core.pool.oligo_assembler import OligoAssembler
from gibsonpool.app.core.pool.parameters import PoolDesignParameters
from gibsonpool.app.core.primer.sources import PrimerRequest, primer_candidates as default_candidates

log = logging.getLogger(__name__)


@dataclass
class PoolDesignResult:
    oligos: List[FullOligo] = field(default_factory=list)
    errors: List[SequenceError] = field(default_factory=list)
    primer_pairs: Dict[str, PrimerPair] = field(default_factory=dict)
    fragments_by_enzyme: Dict[str, List[Subsequence]] = field(default_factory=dict)
    attempts_by_enzyme: Dict[str, int] = field(default_factory=dict)

    def records(self, oligo_set: Optional[str] = None) -> List[OligoRecord]:
        return [o.to_record(oligo_set) for o in self.oligos]

    @property
    def enzymes(self) -> List[str]:
        return list(self.primer_pairs)


class OligoPoolDesigner:
    def __init__(
        self,
        sequences: Iterable[SequenceLike],
        enzymes: Sequence[RestrictionEnzyme],
        params: Optional[PoolDesignParameters] = None,
        *,
        primer_candidates: Optional[Iterable[PrimerPair]] = None,
        error_sink: Optional[ErrorSink] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.log = logger or log
        self.params = params or PoolDesignParameters()
        self.sequences = coerce_sequences(sequences)
        if not enzymes:
            raise ValueError("At least one candidate restriction enzyme is required")
        self.enzymes = list(enzymes)
        # Fail fast on enzymes that leave no room for a fragment.
        self.fragment_lengths: Dict[RestrictionEnzyme, int] = {
            e: core_fragment_length(
                e, self.params.oligoSize, self.params.primerLength, self.params.overlapSize
            )
            for e in self.enzymes
        }
        self.errors = error_sink if error_sink is not None else ErrorSink(self.log)
        self._candidates = primer_candidates
        self.index = KmerIndex.build(self.sequences, self.params.overlapSize, logger=self.log)

    # --------------------- Steps ---------------------

    def partition(self) -> EnzymePartition:
        return partition_by_enzyme(self.sequences, self.enzymes, errors=self.errors, logger=self.log)

    def design_fragments(self, partition: EnzymePartition) -> Dict[RestrictionEnzyme, List[Subsequence]]:
        designer = FragmentDesigner(self.index, self.params.overlapSize, errors=self.errors, logger=self.log)
        out: Dict[RestrictionEnzyme, List[Subsequence]] = {}
        for enzyme, seqs in partition.assignments.items():
            length = self.fragment_lengths[enzyme]
            self.log.info("Enzyme %s: core fragment length %d", enzyme.name, length)
            out[enzyme] = designer.design_all(seqs, length, workers=self.params.workers)
        return out

    def candidate_stream(self) -> Iterator[PrimerPair]:
        if self._candidates is not None:
            return iter(self._candidates)
        request = PrimerRequest(self.params.primerLength, self.params.optimalTm)
        return default_candidates(request, seed=self.params.randomSeed)

    # --------------------- Run ---------------------

    def design(self) -> PoolDesignResult:
        result = PoolDesignResult()
        partition = self.partition()
        fragments = self.design_fragments(partition)
        candidates = self.candidate_stream()
        assembler = OligoAssembler(max_attempts=self.params.maxPrimerAttempts, logger=self.log)

        for enzyme, frags in fragments.items():
            result.fragments_by_enzyme[enzyme.name] = list(frags)
            if not frags:
                self.log.warning("Enzyme %s: no fragments survived; skipping primer search.", enzyme.name)
                continue
            oligos = assembler.assemble(frags, enzyme, candidates)
            result.attempts_by_enzyme[enzyme.name] = assembler.attempts
            result.primer_pairs[enzyme.name] = oligos[0].primer_pair
            result.oligos.extend(oligos)

        result.oligos.sort(key=lambda o: o.fragment.sort_key)
        result.errors = self.errors.errors
        self.log.info(
            "Designed %d oligos for %d sequence(s); %d sequence(s) rejected.",
            len(result.oligos), len({o.parent.id for o in result.oligos}), len(result.errors),
        )
        return result
