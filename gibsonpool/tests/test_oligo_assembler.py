# File: gibsonpool/tests/test_oligo_assembler.py
# Version: v0.1.0
"""
Shared primer pair search over all oligos of an enzyme partition.
"""

from __future__ import annotations

import itertools

import pytest

from gibsonpool.app.core.models.oligo import PrimerPair
from gibsonpool.app.core.models.sequences import NucleotideSequence
from gibsonpool.app.core.pool.compatibility import check_recognition_sites, pair_compatible_with_full_oligo
from gibsonpool.app.core.pool.fragment_designer import FragmentDesigner
from gibsonpool.app.core.pool.kmer_index import KmerIndex
from gibsonpool.app.core.pool.oligo_assembler import (
    OligoAssembler,
    PrimerSearchExhaustedError,
    build_full_oligos,
)

# left primer carries a BsaI site: every oligo would hold the site twice
BAD_PAIR = PrimerPair("AGGTCTCAACGTTGC", "TTGCAACGTAGCTAC")


@pytest.fixture
def fragments(dna):
    seqs = [NucleotideSequence("s1", dna(500, seed=41)), NucleotideSequence("s2", dna(380, seed=42))]
    designer = FragmentDesigner(KmerIndex.build(seqs, 40), 40)
    return designer.design_all(seqs, 158)


def test_first_valid_pair_is_used_for_every_oligo(fragments, bsai, primer_pairs):
    candidates = [BAD_PAIR] + primer_pairs(50)
    assembler = OligoAssembler(max_attempts=100)
    oligos = assembler.assemble(fragments, bsai, candidates)

    assert len(oligos) == len(fragments)
    assert assembler.attempts >= 2
    pairs = {o.primer_pair for o in oligos}
    assert len(pairs) == 1
    pair = pairs.pop()
    assert pair != BAD_PAIR
    assert pair == candidates[assembler.attempts - 1]
    for o in oligos:
        seq = o.sequence
        assert check_recognition_sites(seq, bsai) == (True, "")
        assert seq.count("GGTCTC") == 1 and seq.count("GAGACC") == 1
        assert pair_compatible_with_full_oligo(pair, seq)
        assert o.enzyme == bsai
    assert [o.fragment.sort_key for o in oligos] == sorted(f.sort_key for f in fragments)


def test_oligos_carry_throwaway_bases(dna, bsmi, primer_pairs):
    avoid = ("GAATGC", "GCATTC")
    seq = NucleotideSequence("s", dna(400, seed=43, avoid=avoid))
    frags = FragmentDesigner(KmerIndex.build([seq], 40), 40).design(seq, 156)
    oligos = OligoAssembler().assemble(frags, bsmi, primer_pairs(50))
    for o in oligos:
        assert o.sequence[15:22] == "GAATGCT"
        assert o.sequence[-22:-15] == "TGCATTC"
    assert all(len(o.sequence) <= 200 for o in oligos)


def test_finite_supply_runs_dry(fragments, bsai):
    with pytest.raises(PrimerSearchExhaustedError) as exc:
        OligoAssembler(max_attempts=10).assemble(fragments, bsai, [BAD_PAIR] * 3)
    assert exc.value.attempts == 3
    assert exc.value.enzyme_name == "BsaI"


def test_retry_ceiling_stops_an_endless_supply(fragments, bsai):
    assembler = OligoAssembler(max_attempts=5)
    with pytest.raises(PrimerSearchExhaustedError) as exc:
        assembler.assemble(fragments, bsai, itertools.repeat(BAD_PAIR))
    assert exc.value.attempts == 5
    assert isinstance(exc.value, RuntimeError)


def test_no_fragments_draws_no_candidate(bsai, primer_pairs):
    supply = iter(primer_pairs(3))
    assert OligoAssembler().assemble([], bsai, supply) == []
    assert len(list(supply)) == 3


def test_shared_supply_continues_where_it_stopped(fragments, bsai, primer_pairs):
    candidates = primer_pairs(50)
    supply = iter(candidates)
    assembler = OligoAssembler()
    assembler.assemble(fragments, bsai, supply)
    used = assembler.attempts
    second = assembler.assemble(fragments, bsai, supply)[0].primer_pair
    assert candidates.index(second) >= used


def test_build_full_oligos_orders_by_parent_and_start(fragments, bsai):
    oligos = build_full_oligos(reversed(fragments), bsai, BAD_PAIR)
    assert [o.fragment for o in oligos] == sorted(fragments, key=lambda f: f.sort_key)


def test_max_attempts_must_be_positive():
    with pytest.raises(ValueError):
        OligoAssembler(max_attempts=0)
