# File: gibsonpool/app/core/export/fasta_exporter.py
# Version: v0.1.1

"""
FASTA export of full oligos.

ID: oligo_<parent>_<start>_<end>   (fragment coordinates on the parent, 0-based, end exclusive)

v0.1.1
- `append=True` adds records to an existing file (several pools into one file).
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from gibsonpool.app.core.models.oligo import OligoRecord


def oligo_seq_records(records: Iterable[OligoRecord]) -> List[SeqRecord]:
    return [SeqRecord(Seq(r.full_oligo), id=r.oligo_id, description="") for r in records]


def export_oligos_to_fasta(records: Iterable[OligoRecord], fasta_path: Path, append: bool = False) -> int:
    """Write one FASTA record per oligo. Returns the number of records written."""
    seq_records = oligo_seq_records(records)
    fasta_path = Path(fasta_path)
    fasta_path.parent.mkdir(parents=True, exist_ok=True)
    with fasta_path.open("a" if append else "w", encoding="utf-8") as fh:
        return SeqIO.write(seq_records, fh, "fasta")
