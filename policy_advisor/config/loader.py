"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  — static defaults checked into the repo
#   2. .env file           — local developer overrides (not committed)
#   3. Environment vars    — set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the values
# that were explicitly set in the environment on top.  build_settings()
# turns the merged result back into a validated Settings object.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from policy_advisor.config.settings import Settings

_DEFAULT_CONFIG_PATH = Path(__file__).with_name("config.yaml")


def load_config(path: str | Path | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.  Defaults to the
            ``config.yaml`` shipped next to this module.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    # Only fields set in the environment or .env override the YAML layer;
    # untouched Settings defaults must not clobber YAML values.
    settings = Settings()
    env_overrides = settings.model_dump(include=settings.model_fields_set)

    _deep_merge(yaml_config, _nest(env_overrides))
    return yaml_config


def build_settings(path: str | Path | None = None) -> Settings:
    """Return a :class:`Settings` built from the merged YAML + env layers."""
    merged = load_config(path)
    return Settings(**_flatten(merged))


# Sections in config.yaml map onto flat Settings fields by prefix-free keys:
#   llm.model -> llm_model, storage.backend -> storage_backend, ...
_SECTIONS: dict[str, dict[str, str]] = {
    "app": {"host": "app_host", "port": "app_port", "env": "app_env", "title": "app_title"},
    "llm": {
        "api_key": "openai_api_key",
        "base_url": "openai_base_url",
        "model": "llm_model",
        "translation_model": "translation_model",
        "timeout_seconds": "llm_timeout_seconds",
        "site_url": "site_url",
    },
    "embedding": {
        "provider": "embedding_provider",
        "model": "openai_embedding_model",
        "dimension": "embedding_dimension",
        "concurrency": "embedding_concurrency",
    },
    "storage": {"backend": "storage_backend", "sqlite_db_path": "sqlite_db_path"},
    "ingestion": {
        "chunk_size": "chunk_size",
        "chunk_overlap": "chunk_overlap",
        "max_upload_bytes": "max_upload_bytes",
    },
    "retrieval": {"top_k": "retrieval_top_k"},
    "languages": {"base": "base_language", "translation_cache_ttl": "translation_cache_ttl"},
    "logging": {"level": "log_level"},
}


def _nest(flat: dict) -> dict:
    """Map flat Settings field names onto the YAML section layout."""
    nested: dict = {}
    for section, keys in _SECTIONS.items():
        for key, field in keys.items():
            if field in flat:
                nested.setdefault(section, {})[key] = flat[field]
    return nested


def _flatten(nested: dict) -> dict:
    """Map the YAML section layout back onto flat Settings field names."""
    flat: dict = {}
    for section, keys in _SECTIONS.items():
        values = nested.get(section) or {}
        for key, field in keys.items():
            if key in values and values[key] is not None:
                flat[field] = values[key]
    return flat


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
