# File: gibsonpool/tests/test_config_loaders.py
# Version: v0.1.0
"""
Parameter files and the enzyme catalog.
"""

from __future__ import annotations

import json

import pytest

from gibsonpool.app.config import config_pool
from gibsonpool.app.config.config_enzymes import (
    enzyme_from_biopython,
    expand_iupac,
    load_enzyme_catalog,
    parse_enzyme_names,
    read_enzyme_names,
    resolve_enzymes,
)
from gibsonpool.app.core.models.enzyme import EnzymeDefinitionError
from gibsonpool.app.core.pool.parameters import PoolDesignParameters


@pytest.fixture
def param_files(tmp_path, monkeypatch):
    default = tmp_path / "pool_param_default.json"
    default.write_text(json.dumps({"oligoSize": 230, "overlapSize": 30}), encoding="utf-8")
    current = tmp_path / "pool_param.json"
    monkeypatch.setattr(config_pool, "DEFAULT_FILE", default)
    monkeypatch.setattr(config_pool, "CURRENT_FILE", current)
    return default, current


def test_bundled_defaults_match_model_defaults():
    assert config_pool.load_default_params() == PoolDesignParameters()


def test_current_falls_back_to_defaults(param_files):
    params = config_pool.load_current_params()
    assert (params.oligoSize, params.overlapSize, params.primerLength) == (230, 30, 15)


def test_ensure_and_save_current(param_files):
    _, current = param_files
    created, params = config_pool.ensure_current_exists()
    assert created and current.exists()
    assert params.oligoSize == 230

    config_pool.save_current_params(params.model_copy(update={"optimalTm": 62.5}))
    created, params = config_pool.ensure_current_exists()
    assert not created
    assert params.optimalTm == 62.5
    assert not [p.name for p in current.parent.iterdir() if p.name.endswith(".tmp")]


def test_merge_params_ignores_none_and_revalidates():
    base = PoolDesignParameters()
    merged = config_pool.merge_params(base, {"oligoSize": 180, "primerLength": None})
    assert (merged.oligoSize, merged.primerLength) == (180, 15)
    with pytest.raises(ValueError):
        config_pool.merge_params(base, {"oligoSize": 60})


def test_bundled_catalog():
    cat = load_enzyme_catalog()
    bsai = cat["bsai"]
    assert bsai.top_motifs == ("GGTCTC",)
    assert bsai.bottom_motifs == ("GAGACC",)
    assert bsai.bottom_strand_cleavage_offset == 5
    assert cat["bsmi"].throwaway_bases == 1


def test_custom_catalog_file(tmp_path):
    p = tmp_path / "enzymes.json"
    p.write_text(json.dumps({"enzymes": [
        {"name": "Deg", "topMotifs": ["GGTCTC", "GGACTC"], "bottomStrandCleavageOffset": -2},
    ]}), encoding="utf-8")
    deg = load_enzyme_catalog(p)["deg"]
    assert deg.bottom_motifs == ("GAGACC", "GAGTCC")
    assert deg.throwaway_bases == 2


def test_resolve_enzymes_keeps_priority_order():
    enzymes = resolve_enzymes(["BsmBI", "bsai", "BsmBI"])
    assert [e.name for e in enzymes] == ["BsmBI", "BsaI"]
    with pytest.raises(ValueError):
        resolve_enzymes(["", "  "])


def test_biopython_fallback():
    ecori = enzyme_from_biopython("EcoRI")
    assert ecori.name == "EcoRI"
    assert ecori.top_motifs == ("GAATTC",)
    with pytest.raises(EnzymeDefinitionError):
        enzyme_from_biopython("NotAnEnzyme")
    # names missing from the bundled catalog resolve through Bio.Restriction
    assert resolve_enzymes(["EcoRI"])[0].top_motifs == ("GAATTC",)


def test_expand_iupac():
    assert sorted(expand_iupac("GGN")) == ["GGA", "GGC", "GGG", "GGT"]
    assert expand_iupac("ACGT") == ["ACGT"]
    with pytest.raises(EnzymeDefinitionError):
        expand_iupac("NNNNN")
    with pytest.raises(EnzymeDefinitionError):
        expand_iupac("GGZ")


def test_enzyme_name_files(tmp_path):
    assert parse_enzyme_names(["BsaI", "", "# comment", "BsmBI  # second"]) == ["BsaI", "BsmBI"]
    p = tmp_path / "enzymes.txt"
    p.write_text("BsaI\nBbsI\n", encoding="utf-8")
    assert read_enzyme_names(p) == ["BsaI", "BbsI"]
