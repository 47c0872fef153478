from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "pantry-chef-secret-change-in-production")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    seed_sample_recipes: bool = _env_flag("SEED_SAMPLE_RECIPES")
    seed_demo_user: bool = _env_flag("SEED_DEMO_USER")
    sample_recipes_path: Path = Path(__file__).resolve().parent / "data" / "sample_recipes.json"


DEFAULT_APP_CONFIG = AppConfig()
