from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

ENV_PREFIX = "TASKLIST"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or not v.strip() else v.strip()


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def normalize_database_url(url: str) -> str:
    """Map Heroku/Railway-style `postgres://` URLs onto the psycopg2 driver."""
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://") and "+psycopg2" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return url


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./tasks.db"
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    front_dir: Path = Path("frontend")


def load_settings() -> Settings:
    level = _env(_k("LOG_LEVEL"), "INFO").upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        level = "INFO"
    return Settings(
        database_url=normalize_database_url(_env("DATABASE_URL", "sqlite:///./tasks.db")),
        log_level=level,
        log_file=_env_path(_k("LOG_FILE"), None),
        cors_origins=_env_list(_k("CORS_ORIGINS"), ["*"]),
        front_dir=_env_path(_k("FRONT_DIR"), Path("frontend")) or Path("frontend"),
    )
