# File: gibsonpool/app/core/pool/enzyme_partition.py
# Version: v0.2.0
"""
Assign every sequence to a restriction enzyme whose site it does not contain.

Strategy:
1) If one candidate enzyme is compatible with the *whole* corpus, use it alone
   (single oligo format for the pool). Candidates are tried in priority order.
2) Otherwise walk the sequences in input order and give each the first
   compatible enzyme in priority order.
Sequences with no compatible enzyme are reported as NO_COMPATIBLE_ENZYME and
left out of the rest of the run.

v0.2.0
- Returns an `EnzymePartition` (assignments + unassigned) instead of a bare dict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from gibsonpool.app.core.models.enzyme import RestrictionEnzyme
from gibsonpool.app.core.models.sequences import NucleotideSequence
from gibsonpool.app.core.pool.errors import NO_COMPATIBLE_ENZYME, ErrorSink

log = logging.getLogger(__name__)


@dataclass
class EnzymePartition:
    assignments: Dict[RestrictionEnzyme, List[NucleotideSequence]] = field(default_factory=dict)
    unassigned: List[NucleotideSequence] = field(default_factory=list)

    @property
    def enzymes(self) -> List[RestrictionEnzyme]:
        return list(self.assignments)

    @property
    def is_single_enzyme(self) -> bool:
        return len(self.assignments) == 1 and not self.unassigned


def sequence_contains_site(seq: NucleotideSequence, enzyme: RestrictionEnzyme) -> bool:
    """True iff a top-strand motif of `enzyme` or its reverse complement occurs in `seq`."""
    found = enzyme.site_in(seq.bases)
    if found:
        log.debug("Sequence %s contains %s recognition sequence.", seq.id, enzyme.name)
    return found


def compatible_with_all(seqs: Iterable[NucleotideSequence], enzyme: RestrictionEnzyme) -> bool:
    return not any(sequence_contains_site(s, enzyme) for s in seqs)


def partition_by_enzyme(
    sequences: Sequence[NucleotideSequence],
    enzymes: Sequence[RestrictionEnzyme],
    errors: Optional[ErrorSink] = None,
    logger: Optional[logging.Logger] = None,
) -> EnzymePartition:
    lg = logger or log
    if not enzymes:
        raise ValueError("At least one candidate restriction enzyme is required")
    sink = errors if errors is not None else ErrorSink(lg)
    part = EnzymePartition()
    if not sequences:
        return part

    lg.info("Dividing set of %d sequences into subsets sharing common compatible enzymes...", len(sequences))

    for enzyme in enzymes:
        if compatible_with_all(sequences, enzyme):
            lg.info("Enzyme %s is compatible with all %d sequences.", enzyme.name, len(sequences))
            part.assignments[enzyme] = list(sequences)
            return part

    for seq in sequences:
        for enzyme in enzymes:
            if sequence_contains_site(seq, enzyme):
                continue
            lg.debug("Enzyme %s is compatible with sequence %s", enzyme.name, seq.id)
            part.assignments.setdefault(enzyme, []).append(seq)
            break
        else:
            sink.report(NO_COMPATIBLE_ENZYME, seq.id)
            part.unassigned.append(seq)

    lg.info("Divided into %d subsets.", len(part.assignments))
    for enzyme, seqs in part.assignments.items():
        lg.info("%s\t%d sequences", enzyme.name, len(seqs))
    return part
