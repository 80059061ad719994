# File: gibsonpool/app/config/config_pool.py
# Version: v0.2.0
"""
Pool design parameter files.

- defaults: gibsonpool/app/config/pool_param_default.json (bundled)
- current:  gibsonpool/app/config/pool_param.json (editable, optional)

Every payload goes through PoolDesignParameters, so a bad file fails with a
pydantic ValidationError instead of half-applying. `DEFAULT_FILE` and
`CURRENT_FILE` are module attributes; tests repoint them with monkeypatch.

v0.2.0
- `merge_params()` layers CLI/API overrides on a stored parameter set.
- `load_params_file()` for an explicit --params-json.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from gibsonpool.app.config.json_store import read_json, write_json_atomic
from gibsonpool.app.core.pool.parameters import PoolDesignParameters

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_FILE = CONFIG_DIR / "pool_param_default.json"
CURRENT_FILE = CONFIG_DIR / "pool_param.json"


def load_params_file(path: Path) -> PoolDesignParameters:
    return PoolDesignParameters.model_validate(read_json(path))


def load_default_params() -> PoolDesignParameters:
    return load_params_file(DEFAULT_FILE)


def load_current_params(fallback_to_default: bool = True) -> PoolDesignParameters:
    """Stored parameters; an absent or empty pool_param.json means the defaults."""
    payload = read_json(CURRENT_FILE)
    if not payload and fallback_to_default:
        return load_default_params()
    return PoolDesignParameters.model_validate(payload)


def save_current_params(params: PoolDesignParameters) -> None:
    write_json_atomic(CURRENT_FILE, params.model_dump())


def ensure_current_exists() -> Tuple[bool, PoolDesignParameters]:
    """Seed pool_param.json from the defaults if needed. Returns (created, params)."""
    if CURRENT_FILE.exists():
        return False, load_current_params()
    params = load_default_params()
    save_current_params(params)
    return True, params


def merge_params(base: PoolDesignParameters, overrides: Optional[Mapping[str, Any]]) -> PoolDesignParameters:
    """camelCase overrides on top of `base`; None means "keep". Re-validated as a whole."""
    data: Dict[str, Any] = base.model_dump()
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    return PoolDesignParameters.model_validate(data)
