# File: gibsonpool/app/core/config.py
# Version: v0.1.0
"""
Centralized application settings using Pydantic Settings.

Controls:
- App metadata and API prefix
- CORS origins
- Enzyme catalog path
- Default output dir for CLI runs without --out-prefix
"""
from __future__ import annotations

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- App ---
    API_PREFIX: str = "/api"
    APP_NAME: str = "GibsonPool"
    APP_VERSION: str = "0.1.0"

    # --- CORS ---
    CORS_ORIGINS: str = "*"  # comma-separated or '*' for all

    # --- Data ---
    ENZYME_CATALOG_PATH: Path = Path(__file__).resolve().parents[1] / "config" / "enzymes.json"

    # --- Output ---
    OUTPUT_DIR: Path = Path("data/out")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="GIBSONPOOL_")

    @property
    def cors_origins_list(self) -> list[str]:
        raw = self.CORS_ORIGINS.strip()
        if raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]

settings = Settings()
