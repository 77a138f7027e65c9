"""Tests for configuration loading, logging and store selection."""

import logging
from unittest.mock import patch

from app.main import build_store
from app.services.sql_store import SqlPatientStore
from app.services.store import InMemoryPatientStore
from app.utils.config import AppConfig, load_config
from app.utils.logging import get_logger


class TestLoadConfig:
    """Tests for environment-driven configuration."""

    def test_defaults(self):
        """Test configuration with no environment overrides."""
        with patch.dict("os.environ", {}, clear=True):
            config = load_config()
        assert config.store == "memory"
        assert config.database_url == "sqlite+aiosqlite:///./patients.db"
        assert config.database_echo is False
        assert config.log.level == "INFO"

    def test_environment_overrides(self):
        """Test that environment variables are picked up."""
        env = {
            "PATIENT_STORE": "sql",
            "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
            "DATABASE_ECHO": "true",
            "LOG_LEVEL": "DEBUG",
        }
        with patch.dict("os.environ", env, clear=True):
            config = load_config()
        assert config.store == "sql"
        assert config.database_url == "sqlite+aiosqlite:///:memory:"
        assert config.database_echo is True
        assert config.log.level == "DEBUG"


class TestBuildStore:
    """Tests for store selection."""

    def test_memory_store(self):
        """Test the default in-memory store."""
        assert isinstance(build_store(AppConfig()), InMemoryPatientStore)

    def test_sql_store(self):
        """Test that the sql backend uses the configured URL."""
        store = build_store(AppConfig(store="sql", database_url="sqlite+aiosqlite:///:memory:"))
        assert isinstance(store, SqlPatientStore)
        assert store.database_url == "sqlite+aiosqlite:///:memory:"


class TestGetLogger:
    """Tests for per-module logger levels."""

    def test_explicit_level(self):
        """Test that an explicit level wins over the environment."""
        with patch.dict("os.environ", {"LOG_LEVEL": "ERROR"}):
            logger = get_logger("app.tests.explicit", level="debug")
        assert logger.level == logging.DEBUG

    def test_level_from_environment(self):
        """Test that LOG_LEVEL is used when no level is given."""
        with patch.dict("os.environ", {"LOG_LEVEL": "warning"}):
            logger = get_logger("app.tests.env")
        assert logger.level == logging.WARNING

    def test_default_level(self):
        """Test the INFO fallback."""
        with patch.dict("os.environ", {}, clear=True):
            logger = get_logger("app.tests.default")
        assert logger.level == logging.INFO
