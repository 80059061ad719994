# File: gibsonpool/app/core/primer/thermodynamics.py
# Version: v0.2.0
"""
Primer melting temperature and simple composition helpers.

The pool designer never computes Tm for its own decisions; these values feed the
synthetic primer source (target window) and the reports.

method:
  - "PRIMER3" (default): `primer3.calc_tm`
      mv_conc  = K + Na (mM)
      dv_conc  = Mg (mM)
      dntp_conc= dNTPs (mM)
      dna_conc = primer concentration (nM)
  - "NN": Biopython nearest-neighbor (`Bio.SeqUtils.MeltingTemp.Tm_NN`)

v0.2.0
- Condition defaults match the primer3 defaults used by the synthetic source.
"""

from __future__ import annotations

import primer3
from Bio.SeqUtils import MeltingTemp as mt

DEFAULT_CONDITIONS = {
    "Na": 0.0,
    "K": 50.0,
    "Mg": 1.5,
    "dNTPs": 0.6,
    "dnac": 50.0,
}


def gc_percent(seq: str) -> float:
    s = (seq or "").upper()
    if not s:
        return 0.0
    return 100.0 * (s.count("G") + s.count("C")) / len(s)


def primer_tm(seq: str, method: str = "PRIMER3", **conditions) -> float:
    """Melting temperature (°C) of a primer under the given buffer conditions."""
    seq = (seq or "").upper()
    if not seq:
        return 0.0
    cond = dict(DEFAULT_CONDITIONS)
    cond.update(conditions)

    method_u = (method or "").upper()
    if method_u in ("PRIMER3", "P3"):
        return float(
            primer3.calc_tm(
                seq,
                mv_conc=cond["K"] + cond["Na"],
                dv_conc=cond["Mg"],
                dntp_conc=cond["dNTPs"],
                dna_conc=cond["dnac"],
            )
        )
    if method_u == "NN":
        return float(
            mt.Tm_NN(
                seq,
                Na=cond["Na"],
                K=cond["K"],
                Mg=cond["Mg"],
                dNTPs=cond["dNTPs"],
                dnac1=cond["dnac"],
                dnac2=0.0,
            )
        )
    raise ValueError(f"Unknown Tm method: {method}")
