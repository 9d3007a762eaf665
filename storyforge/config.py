"""Runtime settings for the StoryForge API."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_ORIGINS = (
    "http://127.0.0.1:5173",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://localhost:3000",
)

_TRUE = {"1", "true", "yes", "y", "on"}


def _to_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE


def _to_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_origins(value: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, (list, tuple)):
        items = [str(v).strip() for v in value]
    else:
        items = [v.strip() for v in str(value).split(",")]
    return tuple(v for v in items if v) or default


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    token_secret: str = "dev-secret"
    token_ttl_s: int = 7 * 24 * 3600
    reset_token_ttl_s: int = 3600
    expose_reset_tokens: bool = False
    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ORIGINS)

    ai_provider: str = "mock"
    ai_base_url: str = "https://api.openai.com"
    ai_api_key: str = ""
    ai_model: str = "gpt-4"
    ai_image_model: str = "dall-e-3"
    ai_timeout_s: float = 60.0

    export_worker_enabled: bool = True
    export_poll_interval_s: float = 1.0
    export_delay_s: float = 5.0

    store_connect_attempts: int = 5
    store_connect_backoff_s: float = 0.5
    store_connect_backoff_max_s: float = 8.0

    log_level: str = "INFO"
    log_format: str = "plain"

    @classmethod
    def load(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from the optional YAML file named by ``STORYFORGE_CONFIG``,
        then apply ``STORYFORGE_*`` environment overrides on top."""
        source = environ if environ is not None else os.environ
        raw: dict[str, Any] = {}

        config_path = source.get("STORYFORGE_CONFIG", "").strip()
        if config_path:
            path = Path(config_path).expanduser()
            if path.exists():
                loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(loaded, dict):
                    raw.update(loaded)

        for f in fields(cls):
            env_value = source.get(f"STORYFORGE_{f.name.upper()}")
            if env_value is not None and env_value.strip() != "":
                raw[f.name] = env_value.strip()

        return cls.from_mapping(raw)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Settings":
        base = cls()
        updates: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in raw:
                continue
            value = raw[f.name]
            current = getattr(base, f.name)
            if isinstance(current, bool):
                updates[f.name] = _to_bool(value, current)
            elif isinstance(current, int):
                updates[f.name] = _to_int(value, current)
            elif isinstance(current, float):
                updates[f.name] = _to_float(value, current)
            elif isinstance(current, Path):
                updates[f.name] = Path(str(value)).expanduser()
            elif isinstance(current, tuple):
                updates[f.name] = _to_origins(value, current)
            else:
                updates[f.name] = str(value)
        return replace(base, **updates)
