# File: gibsonpool/tests/test_primer_sources.py
# Version: v0.1.1
"""
Primer candidate sources (precomputed file, synthetic primer3 stream) and Tm.
"""

from __future__ import annotations

import itertools
import warnings

import pytest

from gibsonpool.app.core.models.oligo import PrimerPair
from gibsonpool.app.core.primer.sources import (
    PrimerDesignError,
    PRIMER3_MAX_PRIMER_SIZE,
    PrimerRequest,
    SyntheticPrimerSource,
    parse_primer_pairs,
    precomputed_candidates,
    primer_candidates,
    read_primer_pairs,
)
from gibsonpool.app.core.primer.thermodynamics import gc_percent, primer_tm

warnings.filterwarnings("ignore", category=DeprecationWarning)


def test_parse_primer_pairs_skips_comments_and_extra_columns():
    lines = [
        "# left\tright",
        "",
        "acgtacgtacgtacg\tTTTTCCCCGGGGAAA\tTm=55",
        "GGGGCCCCAAAATTT\tCCCCGGGGTTTTAAA",
    ]
    pairs = parse_primer_pairs(lines)
    assert pairs == [
        PrimerPair("ACGTACGTACGTACG", "TTTTCCCCGGGGAAA"),
        PrimerPair("GGGGCCCCAAAATTT", "CCCCGGGGTTTTAAA"),
    ]
    with pytest.raises(ValueError):
        parse_primer_pairs(["ACGTACGT"])


def test_read_primer_pairs(tmp_path):
    p = tmp_path / "primers.tsv"
    p.write_text("ACGTACGTACGTACG\tTTTTCCCCGGGGAAA\n", encoding="utf-8")
    assert read_primer_pairs(p) == [PrimerPair("ACGTACGTACGTACG", "TTTTCCCCGGGGAAA")]


def test_precomputed_candidates_skip_wrong_length(caplog):
    good = PrimerPair("A" * 15, "C" * 15)
    short = PrimerPair("A" * 12, "C" * 15)
    with caplog.at_level("WARNING"):
        out = list(precomputed_candidates([short, good], PrimerRequest(15, 60.0)))
    assert out == [good]
    assert "Skipping precomputed primer pair" in caplog.text


def _fake_design(results):
    calls = []
    it = iter(results)

    def design(seq_args, global_args):
        calls.append((seq_args, global_args))
        return next(it)

    return design, calls


def test_synthetic_source_retries_empty_templates():
    design, calls = _fake_design([
        {"PRIMER_PAIR_NUM_RETURNED": 0},
        {
            "PRIMER_PAIR_NUM_RETURNED": 1,
            "PRIMER_LEFT_0_SEQUENCE": "acgtacgtacgtacg",
            "PRIMER_RIGHT_0_SEQUENCE": "ttttccccggggaaa",
        },
    ])
    src = SyntheticPrimerSource(PrimerRequest(15, 58.0, tm_tolerance=2.0), seed=1, design_fn=design)
    assert src.next_pair() == PrimerPair("ACGTACGTACGTACG", "TTTTCCCCGGGGAAA")
    assert len(calls) == 2
    seq_args, global_args = calls[0]
    assert len(seq_args["SEQUENCE_TEMPLATE"]) == 300
    assert set(seq_args["SEQUENCE_TEMPLATE"]) <= set("ACGT")
    assert global_args["PRIMER_MIN_SIZE"] == global_args["PRIMER_MAX_SIZE"] == 15
    assert (global_args["PRIMER_MIN_TM"], global_args["PRIMER_OPT_TM"], global_args["PRIMER_MAX_TM"]) == (56.0, 58.0, 60.0)


def test_synthetic_source_gives_up():
    design, _ = _fake_design(itertools.repeat({"PRIMER_PAIR_NUM_RETURNED": 0}))
    src = SyntheticPrimerSource(PrimerRequest(15, 60.0), seed=1, max_template_tries=3, design_fn=design)
    with pytest.raises(PrimerDesignError):
        src.next_pair()


def test_synthetic_templates_follow_the_seed():
    def templates(seed):
        design, calls = _fake_design(itertools.repeat({"PRIMER_PAIR_NUM_RETURNED": 0}))
        src = SyntheticPrimerSource(PrimerRequest(15, 60.0), seed=seed, max_template_tries=2, design_fn=design)
        with pytest.raises(PrimerDesignError):
            src.next_pair()
        return [c[0]["SEQUENCE_TEMPLATE"] for c in calls]

    assert templates(5) == templates(5)
    assert templates(5) != templates(6)


def test_candidates_precomputed_first_then_synthetic():
    design, _ = _fake_design(itertools.repeat({
        "PRIMER_PAIR_NUM_RETURNED": 1,
        "PRIMER_LEFT_0_SEQUENCE": "G" * 15,
        "PRIMER_RIGHT_0_SEQUENCE": "T" * 15,
    }))
    listed = [PrimerPair("A" * 15, "C" * 15)]
    req = PrimerRequest(15, 60.0)
    stream = primer_candidates(req, precomputed=listed, synthetic=True, seed=1, design_fn=design)
    first_three = list(itertools.islice(stream, 3))
    assert first_three[0] == listed[0]
    assert first_three[1:] == [PrimerPair("G" * 15, "T" * 15)] * 2

    assert list(primer_candidates(req, precomputed=listed, synthetic=False)) == listed
    assert list(primer_candidates(req, synthetic=False)) == []


def test_template_must_fit_two_primers():
    with pytest.raises(ValueError):
        SyntheticPrimerSource(PrimerRequest(30, 60.0), template_length=60)


def test_synthetic_primers_are_capped_at_primer3_size():
    with pytest.raises(ValueError):
        SyntheticPrimerSource(PrimerRequest(PRIMER3_MAX_PRIMER_SIZE + 1, 60.0))
    with pytest.raises(ValueError):
        primer_candidates(PrimerRequest(40, 60.0), synthetic=True)

    long_pairs = [PrimerPair("A" * 40, "C" * 40)]
    req = PrimerRequest(40, 60.0)
    assert list(primer_candidates(req, precomputed=long_pairs, synthetic=False)) == long_pairs


def test_primer3_smoke():
    """Real primer3 call: a 20 bp pair near the requested Tm."""
    req = PrimerRequest(20, 58.0, tm_tolerance=5.0)
    pair = SyntheticPrimerSource(req, seed=11).next_pair()
    assert len(pair.left) == 20 and len(pair.right) == 20
    for p in (pair.left, pair.right):
        assert 52.0 <= primer_tm(p) <= 64.0


def test_primer_tm_and_gc():
    gc_rich = "GCGCGGCCGCGCGGCCGCGC"
    at_rich = "ATATTAATATATTAATATAT"
    assert primer_tm(gc_rich) > primer_tm(at_rich)
    assert primer_tm(gc_rich, method="NN") > primer_tm(at_rich, method="NN")
    assert gc_percent("ATGC") == 50.0
    assert primer_tm("") == 0.0
    with pytest.raises(ValueError):
        primer_tm("ACGT", method="nope")
