# File: gibsonpool/app/cli/design_pool_cli.py
# Version: v0.2.1
"""
CLI for Gibson assembly oligo pool design.

- Sequences from a FASTA file; candidate enzymes from a text file (one name per
  line, priority order).
- Parameters come from --params-json (camelCase PoolDesignParameters) or the
  stored defaults; explicit flags override them.
- Writes <prefix>.fa, <prefix>.out and <prefix>_ERROR. Without --out-prefix the
  prefix is <settings.OUTPUT_DIR>/<FASTA file stem>.

Usage:
    python -m gibsonpool.app.cli.design_pool_cli \
        --fasta data/input/genes.fasta \
        --enzymes data/input/enzymes.txt \
        [--out-prefix data/out/pool1] \
        [--oligo-size 200] [--overlap-size 40] [--primer-length 15] [--tm 60] \
        [--primers primers.tsv] [--no-synthetic] [--max-primer-attempts 1000] \
        [--seed 1] [--workers 4] [--params-json params.json] \
        [--set-name "pool 1"] [--append] [--log-level INFO]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gibsonpool.app.config.config_enzymes import load_enzyme_catalog, read_enzyme_names, resolve_enzymes
from gibsonpool.app.config.config_pool import load_current_params, load_params_file, merge_params
from gibsonpool.app.core.config import settings
from gibsonpool.app.core.dna.fasta_reader import parse_fasta
from gibsonpool.app.core.export.pool_output import write_pool_output
from gibsonpool.app.core.pool.pool_designer import OligoPoolDesigner
from gibsonpool.app.core.primer.sources import PrimerRequest, primer_candidates, read_primer_pairs


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Design a Gibson assembly oligo pool")
    p.add_argument("--fasta", required=True, type=Path, help="FASTA file of sequences")
    p.add_argument("--enzymes", required=True, type=Path,
                   help="File of candidate restriction enzymes, one per line, in priority order")
    p.add_argument("--out-prefix", default=None,
                   help="Output file prefix (default: GIBSONPOOL_OUTPUT_DIR/<fasta stem>)")
    p.add_argument("--oligo-size", type=int, default=None, help="Oligo size including primers, etc.")
    p.add_argument("--overlap-size", type=int, default=None, help="Overlap size for Gibson assembly")
    p.add_argument("--primer-length", type=int, default=None, help="Primer length")
    p.add_argument("--tm", type=float, default=None, help="Optimal Tm for primers")
    p.add_argument("--primers", type=Path, default=None,
                   help="File of existing primer pairs to try first (left<TAB>right per line)")
    p.add_argument("--no-synthetic", action="store_true",
                   help="Only use pairs from --primers; never design new ones")
    p.add_argument("--max-primer-attempts", type=int, default=None,
                   help="Primer pairs tried per enzyme before giving up")
    p.add_argument("--seed", type=int, default=None, help="RNG seed for synthetic primers")
    p.add_argument("--workers", type=int, default=None, help="Threads for fragment design (0/1 = serial)")
    p.add_argument("--params-json", type=Path, default=None,
                   help="JSON with PoolDesignParameters (camelCase); defaults to stored parameters")
    p.add_argument("--enzyme-catalog", type=Path, default=None, help="Alternative enzymes.json catalog")
    p.add_argument("--set-name", default=None, help="Oligo set description for the first table column")
    p.add_argument("--append", action="store_true", help="Append to existing output files")
    p.add_argument("--log-level", dest="log_level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Logging level")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("design_pool_cli")

    try:
        base = load_params_file(args.params_json) if args.params_json else load_current_params()
        params = merge_params(base, {
            "oligoSize": args.oligo_size,
            "overlapSize": args.overlap_size,
            "primerLength": args.primer_length,
            "optimalTm": args.tm,
            "maxPrimerAttempts": args.max_primer_attempts,
            "randomSeed": args.seed,
            "workers": args.workers,
        })
        log.info("Parameters: %s", params.model_dump())

        seqs = parse_fasta(args.fasta)
        log.info("Read %d sequence(s) from %s", len(seqs), args.fasta)

        catalog = load_enzyme_catalog(args.enzyme_catalog or settings.ENZYME_CATALOG_PATH)
        enzymes = resolve_enzymes(read_enzyme_names(args.enzymes), catalog)
        log.info("Candidate enzymes: %s", ", ".join(e.name for e in enzymes))

        if args.no_synthetic and not args.primers:
            raise ValueError("--no-synthetic requires --primers")
        precomputed = read_primer_pairs(args.primers) if args.primers else None
        request = PrimerRequest(params.primerLength, params.optimalTm)
        candidates = primer_candidates(
            request,
            precomputed=precomputed,
            synthetic=not args.no_synthetic,
            seed=params.randomSeed,
        )

        designer = OligoPoolDesigner(seqs, enzymes, params, primer_candidates=candidates)
        result = designer.design()
        out_prefix = args.out_prefix or settings.OUTPUT_DIR / args.fasta.stem
        paths = write_pool_output(result, out_prefix, oligo_set=args.set_name, append=args.append)

        print(
            f"[OK] {len(result.oligos)} oligos -> {paths['fasta']}, {paths['table']}; "
            f"{len(result.errors)} rejected sequence(s) -> {paths['errors']}"
        )

    except Exception as ex:
        print(f"[ERROR] {ex}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
