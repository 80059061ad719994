# File: gibsonpool/app/core/dna/fasta_reader.py
# Version: v0.1.0
"""
FASTA input for the pool designer.

Records keep file order; ids come from the FASTA header (first word) and
sequences are upper-cased and alphabet-checked by `NucleotideSequence`.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, TextIO, Union

from Bio import SeqIO

from gibsonpool.app.core.models.sequences import NucleotideSequence, coerce_sequences


def parse_fasta(handle: Union[str, Path, TextIO]) -> List[NucleotideSequence]:
    """Read every record of a FASTA file/handle into validated sequences."""
    source = str(handle) if isinstance(handle, Path) else handle
    return coerce_sequences((rec.id, str(rec.seq)) for rec in SeqIO.parse(source, "fasta"))
