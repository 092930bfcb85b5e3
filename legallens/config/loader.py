"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  -- Static tuning defaults checked into the repo
#   2. .env file           -- Local developer overrides (not committed)
#   3. Environment vars    -- Set at deploy time
#
# load_config() reads the YAML file, then deep-merges the values that
# Settings resolved from the environment on top of it.  settings_from_config()
# goes the other way and turns the merged dict back into a Settings object,
# which is what main.py hands to the services.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import yaml

from legallens.config.settings import Settings

# YAML section -> Settings field names it may set.
_SECTION_FIELDS: dict[str, tuple[str, ...]] = {
    "storage": ("data_dir",),
    "indexing": ("chunk_size", "chunk_overlap", "min_chunk_length", "retrieval_top_k"),
    "summary": (
        "summary_cache_ttl",
        "summary_cache_max_size",
        "summary_cache_scope",
        "summary_rate_limit",
        "summary_rate_window",
        "summary_max_chars",
    ),
    "answer": ("answer_max_context_chars", "fallback_context_chars"),
    "capabilities": ("generation_timeout", "embedding_timeout"),
    "processing": ("processing_workers",),
    "logging": ("log_level",),
}


def load_config(path: str = "config/config.yaml") -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = Settings()
    env_overrides: dict[str, Any] = {
        "app": {"env": settings.app_env},
        "llm": {"available_providers": settings.get_available_llm_providers()},
    }
    # Only fields explicitly set in the environment win over the YAML file;
    # plain defaults must not mask tuned values.
    for section, fields in _SECTION_FIELDS.items():
        for field in fields:
            if field in settings.model_fields_set:
                env_overrides.setdefault(section, {})[field] = getattr(settings, field)

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def settings_from_config(config: dict, base: Settings | None = None) -> Settings:
    """Return a Settings copy with the tuning values from *config* applied."""
    base = base or Settings()
    updates: dict[str, Any] = {}
    for section, fields in _SECTION_FIELDS.items():
        values = config.get(section) or {}
        for field in fields:
            if field in values:
                updates[field] = values[field]
    if not updates:
        return base
    return Settings(**{**base.model_dump(), **updates})


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
