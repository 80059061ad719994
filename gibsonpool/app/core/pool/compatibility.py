# File: gibsonpool/app/core/pool/compatibility.py
# Version: v0.2.1
"""
Structural checks between primers, enzyme sites and oligo sequences.

Primer checks anchor on the 3'-terminal 8 bases of each primer (the part that
must match for polymerase extension); the anchor length is fixed.

Full oligo (primers attached):
- left anchor occurs exactly once
- RC(right anchor) occurs exactly once
- RC(left anchor) and the right anchor do not occur at all

Probe (primers not attached yet): none of the four occur.

"Exactly once" means first and last hits coincide; overlapping hits count.
"""

from __future__ import annotations

from typing import Tuple

from gibsonpool.app.core.models.enzyme import RestrictionEnzyme
from gibsonpool.app.core.models.oligo import PrimerPair
from gibsonpool.app.core.models.sequences import reverse_complement

PRIMER_ANCHOR_LENGTH = 8


def occurs_exactly_once(seq: str, motif: str) -> bool:
    first = seq.find(motif)
    return first != -1 and first == seq.rfind(motif)


def three_prime_anchor(primer: str) -> str:
    if len(primer) < PRIMER_ANCHOR_LENGTH:
        raise ValueError(
            f"Primer {primer} is shorter than the {PRIMER_ANCHOR_LENGTH}-base 3' anchor"
        )
    return primer[-PRIMER_ANCHOR_LENGTH:].upper()


def _anchors(left_primer: str, right_primer: str) -> Tuple[str, str, str, str]:
    left = three_prime_anchor(left_primer)
    right = three_prime_anchor(right_primer)
    return left, reverse_complement(left), right, reverse_complement(right)


def primer_pair_compatible_with_full_oligo(left_primer: str, right_primer: str, oligo: str) -> bool:
    """True if there are no nonspecific matches of the primers to the oligo."""
    left, left_rc, right, right_rc = _anchors(left_primer, right_primer)
    s = oligo.upper()
    if not occurs_exactly_once(s, left):
        return False
    if not occurs_exactly_once(s, right_rc):
        return False
    if left_rc in s or right in s:
        return False
    return True


def primer_pair_compatible_with_probe(left_primer: str, right_primer: str, probe: str) -> bool:
    """True if no primer anchor (or its RC) matches a probe that lacks the primers."""
    s = probe.upper()
    return not any(a in s for a in _anchors(left_primer, right_primer))


def pair_compatible_with_full_oligo(pair: PrimerPair, oligo: str) -> bool:
    return primer_pair_compatible_with_full_oligo(pair.left, pair.right, oligo)


def pair_compatible_with_probe(pair: PrimerPair, probe: str) -> bool:
    return primer_pair_compatible_with_probe(pair.left, pair.right, probe)


def check_recognition_sites(oligo: str, enzyme: RestrictionEnzyme) -> Tuple[bool, str]:
    """
    The oligo must carry exactly one forward site and exactly one reverse-complement
    site: among the enzyme's motifs exactly one is present, and only once.
    Returns (ok, reason).
    """
    s = oligo.upper()
    for label, motifs in (("recognition sequence", enzyme.top_motifs),
                          ("reverse complement of recognition sequence", enzyme.reverse_complement_motifs)):
        present = [m for m in motifs if m in s]
        if not present:
            return False, f"does not contain {enzyme.name} {label}"
        if len(present) > 1 or not occurs_exactly_once(s, present[0]):
            return False, f"contains {enzyme.name} {label} more than once"
    return True, ""
