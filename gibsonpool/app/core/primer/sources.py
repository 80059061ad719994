# File: gibsonpool/app/core/primer/sources.py
# Version: v0.3.1
"""
Primer pair candidate sources for the oligo assembler.

The assembler consumes a lazy (possibly infinite) iterator of `PrimerPair`:
- precomputed pairs first, in file order (only those of the requested length)
- then synthetic pairs designed by primer3 on random templates

Primer file format
------------------
One pair per line, tab-separated: `left<TAB>right[<TAB>anything else]`.
Blank lines and lines starting with `#` are skipped.

Synthetic pairs
---------------
A random A/C/G/T template is drawn from a seeded RNG and handed to
`primer3.bindings.design_primers` with the primer size pinned to the requested
length and the Tm window centred on the target Tm. A template that yields no
pair is replaced; after `max_template_tries` empty templates in a row the
source raises PrimerDesignError.

v0.3.0
- `design_fn` is injectable so callers can wrap/replace the primer3 call.

v0.3.1
- Synthetic pairs are capped at primer3's maximum primer size
  (PRIMER3_MAX_PRIMER_SIZE); precomputed pairs may be longer.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

import primer3

from gibsonpool.app.core.models.oligo import PrimerPair

log = logging.getLogger(__name__)

DesignFn = Callable[[Dict, Dict], Dict]

PRIMER3_MAX_PRIMER_SIZE = 36


class PrimerDesignError(RuntimeError):
    """The primer-design collaborator could not produce a candidate."""


@dataclass(frozen=True)
class PrimerRequest:
    length: int
    optimal_tm: float
    tm_tolerance: float = 3.0

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("Primer length must be positive")
        if self.tm_tolerance < 0:
            raise ValueError("Tm tolerance must be >= 0")


# --------------------- Precomputed pairs ---------------------

def parse_primer_pairs(lines: Iterable[str]) -> List[PrimerPair]:
    pairs: List[PrimerPair] = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        fields = line.split("\t")
        if len(fields) < 2:
            raise ValueError(f"Line {lineno}: expected 'left<TAB>right', got {line!r}")
        pairs.append(PrimerPair(fields[0], fields[1]))
    return pairs


def read_primer_pairs(path: str | Path) -> List[PrimerPair]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as fh:
        pairs = parse_primer_pairs(fh)
    log.info("Read %d primer pair(s) from %s", len(pairs), p)
    return pairs


def precomputed_candidates(pairs: Iterable[PrimerPair], request: PrimerRequest) -> Iterator[PrimerPair]:
    """Yield the supplied pairs in order, skipping pairs of the wrong length."""
    for pair in pairs:
        if len(pair.left) != request.length or len(pair.right) != request.length:
            log.warning(
                "Skipping precomputed primer pair %s %s: length differs from %d",
                pair.left, pair.right, request.length,
            )
            continue
        yield pair


# --------------------- Synthetic pairs (primer3) ---------------------

def _primer3_design(seq_args: Dict, global_args: Dict) -> Dict:
    return primer3.bindings.design_primers(seq_args, global_args)


class SyntheticPrimerSource:
    def __init__(
        self,
        request: PrimerRequest,
        seed: Optional[int] = None,
        template_length: int = 300,
        max_template_tries: int = 50,
        design_fn: Optional[DesignFn] = None,
    ) -> None:
        if request.length > PRIMER3_MAX_PRIMER_SIZE:
            raise ValueError(
                f"primer3 designs primers of at most {PRIMER3_MAX_PRIMER_SIZE} bp (requested {request.length})"
            )
        if template_length < 2 * request.length + 20:
            raise ValueError(
                f"Template length ({template_length}) too short for two {request.length} bp primers"
            )
        self.request = request
        self.template_length = template_length
        self.max_template_tries = max_template_tries
        self.rng = random.Random(seed)
        self._design = design_fn or _primer3_design
        self._counter = 0

    def global_args(self) -> Dict:
        L = self.request.length
        tm = self.request.optimal_tm
        tol = self.request.tm_tolerance
        return {
            "PRIMER_TASK": "generic",
            "PRIMER_PICK_LEFT_PRIMER": 1,
            "PRIMER_PICK_RIGHT_PRIMER": 1,
            "PRIMER_PICK_INTERNAL_OLIGO": 0,
            "PRIMER_OPT_SIZE": L,
            "PRIMER_MIN_SIZE": L,
            "PRIMER_MAX_SIZE": L,
            "PRIMER_OPT_TM": tm,
            "PRIMER_MIN_TM": tm - tol,
            "PRIMER_MAX_TM": tm + tol,
            "PRIMER_MIN_GC": 30.0,
            "PRIMER_MAX_GC": 70.0,
            "PRIMER_MAX_POLY_X": 4,
            "PRIMER_PRODUCT_SIZE_RANGE": [[2 * L + 20, self.template_length]],
            "PRIMER_NUM_RETURN": 1,
        }

    def _random_template(self) -> str:
        return "".join(self.rng.choice("ACGT") for _ in range(self.template_length))

    def next_pair(self) -> PrimerPair:
        args = self.global_args()
        for _ in range(self.max_template_tries):
            self._counter += 1
            seq_args = {
                "SEQUENCE_ID": f"synthetic_{self._counter}",
                "SEQUENCE_TEMPLATE": self._random_template(),
            }
            res = self._design(seq_args, args)
            if int(res.get("PRIMER_PAIR_NUM_RETURNED", 0)) > 0:
                pair = PrimerPair(res["PRIMER_LEFT_0_SEQUENCE"], res["PRIMER_RIGHT_0_SEQUENCE"])
                log.debug("Synthetic primer pair %s %s", pair.left, pair.right)
                return pair
        raise PrimerDesignError(
            f"primer3 returned no {self.request.length} bp pair near Tm {self.request.optimal_tm} "
            f"after {self.max_template_tries} random templates"
        )

    def __iter__(self) -> Iterator[PrimerPair]:
        while True:
            yield self.next_pair()


def primer_candidates(
    request: PrimerRequest,
    precomputed: Optional[Sequence[PrimerPair]] = None,
    synthetic: bool = True,
    seed: Optional[int] = None,
    design_fn: Optional[DesignFn] = None,
) -> Iterator[PrimerPair]:
    """Precomputed pairs first, then (optionally) an endless synthetic stream."""
    streams: List[Iterable[PrimerPair]] = []
    if precomputed:
        streams.append(precomputed_candidates(precomputed, request))
    if synthetic:
        streams.append(SyntheticPrimerSource(request, seed=seed, design_fn=design_fn))
    return itertools.chain.from_iterable(streams)
