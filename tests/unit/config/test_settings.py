"""Unit tests for environment-based settings."""

import pytest

from hospital_charges.config.settings import DatabaseSettings, Settings, get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    for name in ("HC_INPATIENT_MYSQL_HOST", "HC_DB_POOL_SIZE", "HC_DB_POOL_PREFILL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.unit
class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.inpatient_mysql_database == "inpatient_charges"
        assert settings.outpatient_mysql_database == "outpatient_charges"
        assert settings.db_pool_size == 5
        assert settings.db_max_overflow == 0
        assert settings.db_pool_prefill is False

    def test_prefixed_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HC_INPATIENT_MYSQL_HOST", "drg-db.internal")
        monkeypatch.setenv("HC_DB_POOL_SIZE", "8")
        monkeypatch.setenv("HC_DB_POOL_PREFILL", "true")

        settings = Settings(_env_file=None)

        assert settings.inpatient_database.host == "drg-db.internal"
        assert settings.outpatient_database.host == "localhost"
        assert settings.pool.pool_size == 8
        assert settings.pool.prefill is True

    def test_pool_size_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, db_pool_size=0)

    def test_databases_share_timeouts(self):
        settings = Settings(_env_file=None, db_connect_timeout=3, db_read_timeout=9)

        for database in (settings.inpatient_database, settings.outpatient_database):
            assert database.connect_timeout == 3
            assert database.read_timeout == 9

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestDatabaseSettings:
    def test_connect_kwargs(self):
        database = DatabaseSettings(
            host="db", port=3307, user="reader", password="pw", database="inpatient_charges"
        )

        kwargs = database.connect_kwargs()

        assert kwargs["host"] == "db"
        assert kwargs["port"] == 3307
        assert kwargs["password"] == "pw"
        assert kwargs["charset"] == "utf8mb4"
        assert kwargs["autocommit"] is True

    def test_describe_omits_password(self):
        database = DatabaseSettings(
            host="db", user="reader", password="hunter2", database="outpatient_charges"
        )

        summary = database.describe()

        assert "hunter2" not in summary
        assert summary == "mysql://reader@db:3306/outpatient_charges"
