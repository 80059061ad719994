# File: gibsonpool/app/core/export/table_exporter.py
# Version: v0.2.0
"""
Tab-separated oligo table and per-sequence error list.

Table columns (header row written unless appending to a non-empty file):
  Oligo_set, Parent_sequence, Enzyme, Top_strand_recognition_sequence,
  Bottom_strand_recognition_sequence, Left_primer, Right_primer,
  Subsequence_name, Subsequence, Full_oligo

Degenerate enzymes list all of their motifs comma-separated.

Error file: one `CODE<TAB>sequence_id` line per rejected sequence.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, Iterable, List

from gibsonpool.app.core.models.oligo import OligoRecord
from gibsonpool.app.core.pool.errors import SequenceError

TABLE_HEADER: List[str] = [
    "Oligo_set",
    "Parent_sequence",
    "Enzyme",
    "Top_strand_recognition_sequence",
    "Bottom_strand_recognition_sequence",
    "Left_primer",
    "Right_primer",
    "Subsequence_name",
    "Subsequence",
    "Full_oligo",
]


def _row(r: OligoRecord) -> Dict[str, str]:
    return {
        "Oligo_set": r.oligo_set,
        "Parent_sequence": r.parent_id,
        "Enzyme": r.enzyme,
        "Top_strand_recognition_sequence": ",".join(r.top_motifs),
        "Bottom_strand_recognition_sequence": ",".join(r.bottom_motifs),
        "Left_primer": r.left_primer,
        "Right_primer": r.right_primer,
        "Subsequence_name": r.fragment_id,
        "Subsequence": r.fragment,
        "Full_oligo": r.full_oligo,
    }


def export_oligo_table(records: Iterable[OligoRecord], table_path: Path, append: bool = False) -> int:
    table_path = Path(table_path)
    table_path.parent.mkdir(parents=True, exist_ok=True)
    write_header = not (append and table_path.exists() and table_path.stat().st_size > 0)
    n = 0
    with table_path.open("a" if append else "w", encoding="utf-8", newline="") as fh:
        w = csv.DictWriter(fh, fieldnames=TABLE_HEADER, delimiter="\t", lineterminator="\n")
        if write_header:
            w.writeheader()
        for r in records:
            w.writerow(_row(r))
            n += 1
    return n


def export_errors(errors: Iterable[SequenceError], error_path: Path, append: bool = False) -> int:
    error_path = Path(error_path)
    error_path.parent.mkdir(parents=True, exist_ok=True)
    n = 0
    with error_path.open("a" if append else "w", encoding="utf-8") as fh:
        for e in errors:
            fh.write(e.as_line() + "\n")
            n += 1
    return n
