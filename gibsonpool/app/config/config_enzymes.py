# File: gibsonpool/app/config/config_enzymes.py
# Version: v0.2.0
"""
Restriction enzyme catalog loader.

- Bundled catalog: gibsonpool/app/config/enzymes.json (camelCase keys)
- Names missing from the catalog are resolved through Biopython's
  `Bio.Restriction` (site -> top motif(s), `fst3` -> bottom-strand cleavage
  offset). IUPAC ambiguity codes in a site are expanded into concrete motifs
  (up to MAX_DEGENERATE_MOTIFS).
- Enzyme list files hold one enzyme name per line (`#` comments allowed); the
  order of the file is the priority order of the partitioner.

Catalog entry:

  { "name": "BsaI", "topMotifs": ["GGTCTC"], "bottomStrandCleavageOffset": 5 }

`bottomMotifs` is optional and defaults to the reverse complements of the top
motifs.

v0.2.0
- Biopython fallback for names not in the bundled catalog.
"""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from Bio import Restriction
from Bio.Data.IUPACData import ambiguous_dna_values
from pydantic import BaseModel, Field

from gibsonpool.app.config.json_store import read_json
from gibsonpool.app.core.models.enzyme import EnzymeDefinitionError, RestrictionEnzyme

log = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_CATALOG_FILE = CONFIG_DIR / "enzymes.json"

MAX_DEGENERATE_MOTIFS = 256


class EnzymeEntry(BaseModel):
    name: str
    topMotifs: List[str] = Field(..., min_length=1)
    bottomMotifs: Optional[List[str]] = None
    bottomStrandCleavageOffset: int

    def to_enzyme(self) -> RestrictionEnzyme:
        return RestrictionEnzyme.from_top_motifs(
            self.name, self.topMotifs, self.bottomStrandCleavageOffset, self.bottomMotifs
        )


class EnzymeCatalog(BaseModel):
    enzymes: List[EnzymeEntry] = Field(default_factory=list)


def load_enzyme_catalog(path: Optional[Path] = None) -> Dict[str, RestrictionEnzyme]:
    """Catalog keyed by lower-cased enzyme name, in file order."""
    p = Path(path) if path else DEFAULT_CATALOG_FILE
    catalog = EnzymeCatalog.model_validate(read_json(p))
    out: Dict[str, RestrictionEnzyme] = {}
    for entry in catalog.enzymes:
        out[entry.name.lower()] = entry.to_enzyme()
    log.debug("Loaded %d enzyme(s) from %s", len(out), p)
    return out


def expand_iupac(site: str, limit: int = MAX_DEGENERATE_MOTIFS) -> List[str]:
    """All concrete A/C/G/T motifs matched by an IUPAC site."""
    choices = []
    for base in site.upper():
        if base not in ambiguous_dna_values:
            raise EnzymeDefinitionError(f"Unknown IUPAC code {base} in site {site}")
        choices.append(ambiguous_dna_values[base])
    total = 1
    for c in choices:
        total *= len(c)
    if total > limit:
        raise EnzymeDefinitionError(f"Site {site} expands to {total} motifs (limit {limit})")
    return ["".join(p) for p in itertools.product(*choices)]


def enzyme_from_biopython(name: str) -> RestrictionEnzyme:
    """Build a descriptor from Bio.Restriction; raises EnzymeDefinitionError if unusable."""
    enz = getattr(Restriction, name, None)
    if enz is None or not hasattr(enz, "site"):
        raise EnzymeDefinitionError(f"Unknown restriction enzyme: {name}")
    offset = getattr(enz, "fst3", None)
    if offset is None:
        raise EnzymeDefinitionError(f"Enzyme {name} has no defined bottom-strand cut position")
    motifs = expand_iupac(str(enz.site))
    log.debug("Resolved %s via Bio.Restriction: site %s, fst3 %s", name, enz.site, offset)
    return RestrictionEnzyme.from_top_motifs(str(enz), motifs, int(offset))


def resolve_enzymes(
    names: Iterable[str],
    catalog: Optional[Dict[str, RestrictionEnzyme]] = None,
) -> List[RestrictionEnzyme]:
    """Resolve names in order; catalog first, then Bio.Restriction."""
    cat = catalog if catalog is not None else load_enzyme_catalog()
    out: List[RestrictionEnzyme] = []
    for name in names:
        key = name.strip()
        if not key:
            continue
        enzyme = cat.get(key.lower()) or enzyme_from_biopython(key)
        if enzyme not in out:
            out.append(enzyme)
    if not out:
        raise ValueError("No restriction enzymes given")
    return out


def parse_enzyme_names(lines: Iterable[str]) -> List[str]:
    names: List[str] = []
    for raw in lines:
        line = raw.split("#", 1)[0].strip()
        if line:
            names.append(line)
    return names


def read_enzyme_names(path: str | Path) -> List[str]:
    with Path(path).open("r", encoding="utf-8") as fh:
        return parse_enzyme_names(fh)
