"""Unit tests for settings, the YAML loader, languages, the cache and logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from policy_advisor.config.languages import SUPPORTED_LANGUAGES, language_name, validate_language
from policy_advisor.config.loader import build_settings, load_config
from policy_advisor.config.settings import Settings
from policy_advisor.providers.cache.memory_cache import MemoryCacheProvider
from policy_advisor.utils.errors import ValidationError
from policy_advisor.utils.logging import configure_logging, get_logger

_YAML = """\
app:
  port: 9001
storage:
  backend: sqlite
  sqlite_db_path: /tmp/custom.db
retrieval:
  top_k: 7
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(_YAML, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("STORAGE_BACKEND", "RETRIEVAL_TOP_K", "APP_PORT", "APP_ENV"):
        monkeypatch.delenv(name, raising=False)


class TestLoader:
    def test_yaml_values_apply(self, config_file: Path) -> None:
        settings = build_settings(config_file)
        assert settings.app_port == 9001
        assert settings.storage_backend == "sqlite"
        assert settings.sqlite_db_path == "/tmp/custom.db"
        assert settings.retrieval_top_k == 7

    def test_environment_overrides_yaml(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("RETRIEVAL_TOP_K", "3")

        settings = build_settings(config_file)

        assert settings.storage_backend == "memory"
        assert settings.retrieval_top_k == 3
        assert settings.app_port == 9001

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        assert "storage" not in load_config(tmp_path / "absent.yaml")
        assert build_settings(tmp_path / "absent.yaml").chunk_size == 1000

    def test_shipped_config_matches_defaults(self) -> None:
        settings = build_settings()
        assert settings.chunk_size == 1000
        assert settings.chunk_overlap == 200
        assert settings.embedding_dimension == 384
        assert settings.max_upload_bytes == 10 * 1024 * 1024


class TestSettings:
    def test_is_production(self) -> None:
        assert Settings(app_env="production").is_production is True
        assert Settings(app_env="development").is_production is False

    def test_llm_configured(self) -> None:
        assert Settings(openai_api_key="sk-x").llm_configured() is True
        assert Settings(openai_api_key="").llm_configured() is False


class TestLanguages:
    def test_ten_languages(self) -> None:
        assert set(SUPPORTED_LANGUAGES) == {
            "en", "es", "fr", "de", "zh", "ja", "ko", "pt", "it", "ru",
        }

    def test_language_name(self) -> None:
        assert language_name("zh") == "Chinese"
        assert validate_language("ru") == "ru"

    def test_unsupported(self) -> None:
        with pytest.raises(ValidationError):
            language_name("xx")


class TestMemoryCache:
    @pytest.mark.asyncio
    async def test_set_get_delete(self) -> None:
        cache = MemoryCacheProvider()
        await cache.set("k", "v")
        assert await cache.get("k") == "v"
        assert await cache.exists("k") is True
        await cache.delete("k")
        assert await cache.get("k") is None
        assert await cache.exists("k") is False

    @pytest.mark.asyncio
    async def test_zero_ttl_is_not_stored(self) -> None:
        cache = MemoryCacheProvider()
        await cache.set("k", "v", ttl=0)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_max_size_evicts(self) -> None:
        cache = MemoryCacheProvider(max_size=2)
        for key in ("a", "b", "c"):
            await cache.set(key, key.upper())
        assert len(cache) == 2
        assert await cache.get("c") == "C"


class TestLogging:
    def test_third_party_loggers_quieted(self) -> None:
        try:
            configure_logging(log_level="DEBUG")
            assert logging.getLogger().level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
            assert logging.getLogger("openai").level == logging.WARNING
        finally:
            configure_logging(log_level="INFO")

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(log_level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_json_output_renders(self, capsys: pytest.CaptureFixture[str]) -> None:
        try:
            configure_logging(log_level="INFO", json_output=True)
            get_logger("tests.logging").info("json_event", document_id=7)
            out = capsys.readouterr().out
            assert '"event": "json_event"' in out
            assert '"document_id": 7' in out
            assert '"app": "policy-advisor"' in out
        finally:
            configure_logging(log_level="INFO")
