"""Configuration module: exports Settings, the YAML loader and the language table."""

from policy_advisor.config.languages import SUPPORTED_LANGUAGES, language_name
from policy_advisor.config.loader import build_settings, load_config
from policy_advisor.config.settings import Settings

__all__ = ["SUPPORTED_LANGUAGES", "Settings", "build_settings", "language_name", "load_config"]
