# File: gibsonpool/tests/conftest.py
# Version: v0.1.0
"""
Test bootstrap: ensure project root is on sys.path so 'gibsonpool.*' imports work,
plus small shared fixtures (seeded random DNA, enzymes, primer pair lists).

Random corpora are seeded, so every run sees the same sequences; at these sizes
every 40-mer of a random sequence is unique in practice.
"""
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]  # repo root (../.. from this file)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gibsonpool.app.core.models.enzyme import RestrictionEnzyme  # noqa: E402
from gibsonpool.app.core.models.oligo import PrimerPair  # noqa: E402

# Forward and reverse-complement sites of the enzymes used in tests.
SITES = ("GGTCTC", "GAGACC", "CGTCTC", "GAGACG")


def random_dna(n: int, seed: int, avoid=SITES) -> str:
    """Seeded random A/C/G/T string of length n containing none of `avoid`."""
    rng = random.Random(seed)
    while True:
        s = "".join(rng.choice("ACGT") for _ in range(n))
        if not any(m in s for m in avoid):
            return s


def random_primer_pairs(count: int, length: int = 15, seed: int = 7):
    rng = random.Random(seed)
    return [
        PrimerPair(
            "".join(rng.choice("ACGT") for _ in range(length)),
            "".join(rng.choice("ACGT") for _ in range(length)),
        )
        for _ in range(count)
    ]


@pytest.fixture
def dna():
    return random_dna


@pytest.fixture
def primer_pairs():
    return random_primer_pairs


@pytest.fixture
def bsai():
    return RestrictionEnzyme.from_top_motifs("BsaI", ["GGTCTC"], 5)


@pytest.fixture
def bsmbi():
    return RestrictionEnzyme.from_top_motifs("BsmBI", ["CGTCTC"], 5)


@pytest.fixture
def bsmi():
    # negative bottom-strand offset: one throwaway base on each side
    return RestrictionEnzyme.from_top_motifs("BsmI", ["GAATGC"], -1)


@pytest.fixture
def flanked():
    """random(left) + core + random(right), reseeding the flanks until no test site appears."""
    def _make(core: str, seed: int, left: int = 100, right: int = 100) -> str:
        attempt = 0
        while True:
            s = random_dna(left, seed + attempt) + core + random_dna(right, seed + attempt + 5000)
            if not any(m in s for m in SITES):
                return s
            attempt += 1
    return _make
