"""Configuration management for the records front-end."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

DEFAULT_BACKEND_URL = "http://localhost:3001"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

ENV_MAP = {
    "STARBOARD_BACKEND_URL": "backend_url",
    "STARBOARD_COLLECTION_PATH": "collection_path",
    "STARBOARD_PAGE_SIZE": "page_size",
    "STARBOARD_TIMEOUT": "timeout",
    "STARBOARD_SESSION_SECRET": "session_secret",
    "STARBOARD_LOG_LEVEL": "log_level",
}


def _parse_int(name: str, value: object) -> int:
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Configuration value '{name}' must be an integer") from exc


def _parse_float(name: str, value: object) -> float:
    try:
        return float(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Configuration value '{name}' must be a number") from exc


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the web UI and the backend client."""

    backend_url: str = DEFAULT_BACKEND_URL
    collection_path: str = "/records"
    page_size: int = 6
    timeout: float = 10.0
    session_secret: Optional[str] = None
    log_level: str = "INFO"

    @staticmethod
    def from_dict(data: Mapping[str, object], base: Optional["Settings"] = None) -> "Settings":
        """Overlay raw configuration values onto ``base`` (or the defaults)."""
        settings = base or Settings()
        unknown = set(data.keys()) - set(ENV_MAP.values())
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        changes: Dict[str, object] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key == "page_size":
                changes[key] = _parse_int(key, value)
            elif key == "timeout":
                changes[key] = _parse_float(key, value)
            elif key == "log_level":
                changes[key] = str(value).strip().upper()
            else:
                changes[key] = str(value).strip()

        result = replace(settings, **changes)
        result.validate()
        return result

    def validate(self) -> None:
        if not self.backend_url:
            raise ValueError("backend_url must not be empty")
        if not self.collection_path.strip("/"):
            raise ValueError("collection_path must not be empty")
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "starboard.yaml").resolve(strict=False)
    return candidate


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from defaults, an optional YAML file, and the environment."""
    env = os.environ if environ is None else environ
    path = config_path or resolve_config_path(env.get("STARBOARD_CONFIG"))

    settings = Settings()
    if path.is_file():
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        settings = Settings.from_dict(raw, settings)

    overrides = {
        conf_key: env[env_key]
        for env_key, conf_key in ENV_MAP.items()
        if env.get(env_key, "").strip()
    }
    if overrides:
        settings = Settings.from_dict(overrides, settings)
    return settings


__all__ = ["Settings", "load_settings", "resolve_config_path"]
