"""Tests for environment-driven logging configuration."""

import pytest
import structlog

from shopcart.infrastructure.log_config import get_environment, get_log_level, setup_structlog


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("ENV", "ENVIRONMENT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
    structlog.reset_defaults()


class TestEnvironment:

    def test_defaults_to_development(self):
        assert get_environment() == "development"

    def test_env_takes_precedence(self, monkeypatch):
        monkeypatch.setenv("ENV", "Production")
        monkeypatch.setenv("ENVIRONMENT", "staging")
        assert get_environment() == "production"

    def test_test_environment_raises_level(self, monkeypatch):
        monkeypatch.setenv("ENV", "test")
        assert get_log_level() == "WARNING"


class TestRenderer:

    def test_env_production_renders_json(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")
        setup_structlog()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_environment_production_renders_json(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        setup_structlog()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_development_renders_console(self):
        setup_structlog()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
