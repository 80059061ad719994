# File: gibsonpool/app/core/export/pool_output.py
# Version: v0.1.0
"""
Write a designed pool under one output prefix:

  <prefix>.fa      full oligos (FASTA)
  <prefix>.out     oligo table (TSV)
  <prefix>_ERROR   rejected sequences (`CODE<TAB>id`)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from gibsonpool.app.core.export.fasta_exporter import export_oligos_to_fasta
from gibsonpool.app.core.export.table_exporter import export_errors, export_oligo_table
from gibsonpool.app.core.pool.pool_designer import PoolDesignResult

log = logging.getLogger(__name__)


def output_paths(prefix: str | Path) -> Dict[str, Path]:
    p = str(prefix)
    return {
        "fasta": Path(p + ".fa"),
        "table": Path(p + ".out"),
        "errors": Path(p + "_ERROR"),
    }


def write_pool_output(
    result: PoolDesignResult,
    prefix: str | Path,
    oligo_set: Optional[str] = None,
    append: bool = False,
) -> Dict[str, Path]:
    paths = output_paths(prefix)
    records = result.records(oligo_set)
    n_fa = export_oligos_to_fasta(records, paths["fasta"], append=append)
    export_oligo_table(records, paths["table"], append=append)
    n_err = export_errors(result.errors, paths["errors"], append=append)
    log.info("Wrote %d oligos to %s and %s; %d error(s) to %s",
             n_fa, paths["fasta"], paths["table"], n_err, paths["errors"])
    return paths
