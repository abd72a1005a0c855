"""
Tests for DatabaseFactory - Property-Based Tests and Unit Tests

Feature: form-draft-persistence

Property: Missing environment variables detection
Property: Database factory singleton identity

Unit tests: 延迟/立即连接、连接失败不回退、连接日志、setup_draft_database
"""

import logging
import os
from unittest.mock import MagicMock, patch

import pytest
from hypothesis import given, settings, strategies as st
from peewee import MySQLDatabase, PostgresqlDatabase, SqliteDatabase

from src.forms.infrastructure.persistence.exceptions import (
    DatabaseConfigError,
    DatabaseConnectionError,
)
from src.forms.infrastructure.persistence.form_draft_model import FormDraftModel
from src.main.bootstrap.database_factory import (
    REQUIRED_ENV_VARS,
    SERVER_ENV_VARS,
    DatabaseFactory,
)
from src.main.bootstrap.database_setup import setup_draft_database


ALL_ENV_VARS = REQUIRED_ENV_VARS + SERVER_ENV_VARS + ["FORMS_DATABASE_PORT"]

MYSQL_ENV = {
    "FORMS_DATABASE_DRIVER": "mysql",
    "FORMS_DATABASE_HOST": "db.internal",
    "FORMS_DATABASE_DATABASE": "forms_test",
    "FORMS_DATABASE_USER": "forms",
    "FORMS_DATABASE_PASSWORD": "secret",
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clean_env(monkeypatch):
    """清空 FORMS_DATABASE_* 并重置单例"""
    for var in ALL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    DatabaseFactory._instance = None
    yield monkeypatch
    if DatabaseFactory._instance is not None:
        DatabaseFactory._instance.reset()


def _sqlite_env(monkeypatch, path):
    monkeypatch.setenv("FORMS_DATABASE_DRIVER", "sqlite")
    monkeypatch.setenv("FORMS_DATABASE_DATABASE", str(path))


# ===========================================================================
# Property-Based Tests
# ===========================================================================

class TestDatabaseFactoryProperties:

    @settings(max_examples=100, deadline=None)
    @given(
        present_flags=st.lists(
            st.booleans(),
            min_size=len(REQUIRED_ENV_VARS),
            max_size=len(REQUIRED_ENV_VARS),
        )
    )
    def test_missing_env_vars_detection(self, present_flags):
        """
        For any subset of the required variables that is missing (sqlite driver),
        validate_env_vars() returns exactly the missing names.
        """
        saved = {var: os.environ.get(var) for var in ALL_ENV_VARS}
        try:
            for var in ALL_ENV_VARS:
                os.environ.pop(var, None)

            expected_missing = []
            for var, present in zip(REQUIRED_ENV_VARS, present_flags):
                if present:
                    os.environ[var] = "sqlite" if var == "FORMS_DATABASE_DRIVER" else "drafts.db"
                else:
                    expected_missing.append(var)

            assert set(DatabaseFactory.validate_env_vars()) == set(expected_missing)
        finally:
            for var, val in saved.items():
                if val is None:
                    os.environ.pop(var, None)
                else:
                    os.environ[var] = val

    @settings(max_examples=100, deadline=None)
    @given(call_count=st.integers(min_value=2, max_value=20))
    def test_singleton_identity(self, call_count):
        DatabaseFactory._instance = None

        first = DatabaseFactory.get_instance()
        for _ in range(call_count - 1):
            assert DatabaseFactory.get_instance() is first
        DatabaseFactory._instance = None


# ===========================================================================
# Unit Tests
# ===========================================================================

class TestDatabaseFactoryUnit:

    def test_server_driver_requires_credentials(self, clean_env):
        clean_env.setenv("FORMS_DATABASE_DRIVER", "mysql")
        clean_env.setenv("FORMS_DATABASE_DATABASE", "forms")

        assert set(DatabaseFactory.validate_env_vars()) == set(SERVER_ENV_VARS)

    def test_whitespace_counts_as_missing(self, clean_env):
        for var, val in MYSQL_ENV.items():
            clean_env.setenv(var, val)
        clean_env.setenv("FORMS_DATABASE_HOST", "   ")

        assert DatabaseFactory.validate_env_vars() == ["FORMS_DATABASE_HOST"]

    def test_initialize_raises_config_error_on_missing_vars(self, clean_env):
        factory = DatabaseFactory.get_instance()
        with pytest.raises(DatabaseConfigError) as exc_info:
            factory.initialize(load_env=False)
        assert set(exc_info.value.missing_vars) == set(REQUIRED_ENV_VARS)

    def test_unsupported_driver(self, clean_env):
        clean_env.setenv("FORMS_DATABASE_DRIVER", "oracle")
        clean_env.setenv("FORMS_DATABASE_DATABASE", "forms")
        for var in SERVER_ENV_VARS:
            clean_env.setenv(var, "x")

        with pytest.raises(DatabaseConfigError, match="Unsupported"):
            DatabaseFactory.get_instance().initialize(load_env=False)

    def test_lazy_initialization_defers_connection(self, clean_env, tmp_path):
        _sqlite_env(clean_env, tmp_path / "drafts.db")

        factory = DatabaseFactory.get_instance()
        factory.initialize(eager=False, load_env=False)

        assert factory._initialized is True
        assert factory._peewee_db is None

        db = factory.get_peewee_db()
        assert isinstance(db, SqliteDatabase)
        assert factory.get_peewee_db() is db

    def test_eager_initialization_connects_and_logs(self, clean_env, tmp_path, caplog):
        _sqlite_env(clean_env, tmp_path / "drafts.db")

        factory = DatabaseFactory.get_instance()
        with caplog.at_level(logging.INFO, logger="src.main.bootstrap.database_factory"):
            factory.initialize(eager=True, load_env=False)

        assert factory._peewee_db is not None
        assert not factory._peewee_db.is_closed()
        assert "drafts.db" in caplog.text

    def test_connection_failure_raises_without_fallback(self, clean_env):
        for var, val in MYSQL_ENV.items():
            clean_env.setenv(var, val)

        with patch.object(MySQLDatabase, "connect", side_effect=Exception("Connection refused")):
            factory = DatabaseFactory.get_instance()
            with pytest.raises(DatabaseConnectionError) as exc_info:
                factory.initialize(eager=True, load_env=False)

        assert exc_info.value.host == "db.internal"
        assert exc_info.value.database == "forms_test"
        assert factory._peewee_db is None

    def test_postgres_default_port(self, clean_env):
        for var, val in MYSQL_ENV.items():
            clean_env.setenv(var, val)
        clean_env.setenv("FORMS_DATABASE_DRIVER", "postgresql")

        factory = DatabaseFactory.get_instance()
        factory.initialize(load_env=False)
        db = factory._build_peewee_db()

        assert isinstance(db, PostgresqlDatabase)
        assert db.connect_params["port"] == 5432

    def test_reset_clears_singleton_and_connection(self):
        factory = DatabaseFactory.get_instance()
        peewee_db = MagicMock()
        factory._peewee_db = peewee_db
        factory._initialized = True

        factory.reset()

        peewee_db.close.assert_called_once()
        assert DatabaseFactory._instance is None
        assert factory._peewee_db is None
        assert factory._initialized is False


class TestSetupDraftDatabaseUnit:

    def test_creates_table(self, clean_env, tmp_path):
        _sqlite_env(clean_env, tmp_path / "drafts.db")
        with patch("src.main.bootstrap.database_factory.load_dotenv"):
            assert setup_draft_database() is True

        db = DatabaseFactory.get_instance().get_peewee_db()
        assert db.table_exists(FormDraftModel._meta.table_name)

    def test_missing_config_returns_false(self, clean_env):
        with patch("src.main.bootstrap.database_factory.load_dotenv"):
            assert setup_draft_database() is False

    def test_connection_error_propagates(self, clean_env):
        for var, val in MYSQL_ENV.items():
            clean_env.setenv(var, val)
        with patch("src.main.bootstrap.database_factory.load_dotenv"), \
             patch.object(MySQLDatabase, "connect", side_effect=Exception("refused")):
            with pytest.raises(DatabaseConnectionError):
                setup_draft_database()
