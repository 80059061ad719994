# File: gibsonpool/tests/test_cli.py
# Version: v0.1.1
"""
Command line entry point.
"""

from __future__ import annotations

import pytest

from gibsonpool.app.cli.design_pool_cli import main
from gibsonpool.app.core.config import settings


def _inputs(tmp_path, dna, primer_pairs):
    fasta = tmp_path / "seqs.fasta"
    fasta.write_text(
        f">gene1 first\n{dna(500, seed=301)}\n>gene2\n{dna(100, seed=302)}GGTCTC{dna(100, seed=303)}\n",
        encoding="utf-8",
    )
    enzymes = tmp_path / "enzymes.txt"
    enzymes.write_text("BsaI\n", encoding="utf-8")
    primers = tmp_path / "primers.tsv"
    primers.write_text(
        "# left\tright\n" + "".join(f"{p.left}\t{p.right}\n" for p in primer_pairs(50)),
        encoding="utf-8",
    )
    return fasta, enzymes, primers


def test_cli_writes_pool(tmp_path, dna, primer_pairs, capsys):
    fasta, enzymes, primers = _inputs(tmp_path, dna, primer_pairs)
    prefix = tmp_path / "out" / "pool"
    main([
        "--fasta", str(fasta),
        "--enzymes", str(enzymes),
        "--out-prefix", str(prefix),
        "--primers", str(primers),
        "--no-synthetic",
        "--set-name", "cli pool",
        "--log-level", "WARNING",
    ])
    assert "[OK] 4 oligos" in capsys.readouterr().out

    table = (tmp_path / "out" / "pool.out").read_text(encoding="utf-8").splitlines()
    assert len(table) == 5
    assert all(line.startswith("cli pool\tgene1\tBsaI\t") for line in table[1:])
    assert (tmp_path / "out" / "pool.fa").read_text(encoding="utf-8").count(">") == 4
    assert (tmp_path / "out" / "pool_ERROR").read_text(encoding="utf-8") == "NO_COMPATIBLE_ENZYME\tgene2\n"


def test_cli_size_flags_override_parameters(tmp_path, dna, primer_pairs):
    fasta, enzymes, primers = _inputs(tmp_path, dna, primer_pairs)
    prefix = tmp_path / "pool"
    main([
        "--fasta", str(fasta), "--enzymes", str(enzymes), "--out-prefix", str(prefix),
        "--primers", str(primers), "--no-synthetic", "--oligo-size", "180",
    ])
    seqs = [ln for ln in (tmp_path / "pool.fa").read_text(encoding="utf-8").splitlines() if not ln.startswith(">")]
    assert "".join(seqs)
    table = (tmp_path / "pool.out").read_text(encoding="utf-8").splitlines()[1:]
    assert all(len(row.split("\t")[9]) <= 180 for row in table)
    assert len(table[0].split("\t")[9]) == 180


def test_cli_defaults_to_output_dir(tmp_path, dna, primer_pairs, monkeypatch):
    fasta, enzymes, primers = _inputs(tmp_path, dna, primer_pairs)
    monkeypatch.setattr(settings, "OUTPUT_DIR", tmp_path / "runs")
    main([
        "--fasta", str(fasta), "--enzymes", str(enzymes),
        "--primers", str(primers), "--no-synthetic",
    ])
    assert (tmp_path / "runs" / "seqs.fa").read_text(encoding="utf-8").count(">") == 4
    assert (tmp_path / "runs" / "seqs.out").exists()
    assert (tmp_path / "runs" / "seqs_ERROR").exists()


def test_cli_errors_exit_with_status_2(tmp_path, dna, primer_pairs, capsys):
    fasta, enzymes, _ = _inputs(tmp_path, dna, primer_pairs)
    with pytest.raises(SystemExit) as exc:
        main(["--fasta", str(fasta), "--enzymes", str(enzymes), "--out-prefix", str(tmp_path / "p"),
              "--no-synthetic"])
    assert exc.value.code == 2
    assert "[ERROR]" in capsys.readouterr().err

    with pytest.raises(SystemExit) as exc:
        main(["--fasta", str(fasta), "--enzymes", str(enzymes), "--out-prefix", str(tmp_path / "p"),
              "--overlap-size", "200"])
    assert exc.value.code == 2
