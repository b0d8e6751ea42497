"""
Unit tests for ServiceManager pool lifecycle.
"""

from unittest.mock import MagicMock

import pytest

from hospital_charges.config.settings import Settings
from hospital_charges.domain.models import ChargeSetting
from hospital_charges.services import ServiceManager


@pytest.fixture
def settings():
    return Settings(_env_file=None, db_pool_size=2, db_pool_timeout=1.0)


@pytest.mark.unit
class TestServiceManager:
    def test_from_settings_builds_one_pool_per_database(self, settings, fake_database):
        manager = ServiceManager.from_settings(
            settings,
            inpatient_creator=fake_database.connect,
            outpatient_creator=fake_database.connect,
        )

        assert manager.inpatient_pool.name == "inpatient"
        assert manager.outpatient_pool.name == "outpatient"
        assert manager.inpatient_pool.pool_size == 2
        assert manager.regional_inpatient.repository.pool is manager.inpatient_pool
        assert manager.outpatient_comparison.repository.catalog.setting is ChargeSetting.OUTPATIENT
        manager.close()

    def test_services_share_the_setting_pool(self, settings, fake_database):
        manager = ServiceManager.from_settings(
            settings,
            inpatient_creator=fake_database.connect,
            outpatient_creator=fake_database.connect,
        )
        fake_database.define("getDRGs", [[{"drg id": 39, "drg definition": "EXTRACRANIAL"}]])
        fake_database.define("getCities", [[{"city": "ALBANY"}]])

        with manager:
            assert [d.id for d in manager.inpatient_comparison.get_drgs()] == [39]
            assert manager.regional_inpatient.get_cities("NY") == ["ALBANY"]
            assert manager.inpatient_pool.checked_out == 0

        assert len(fake_database.connections) == 1

    def test_prefill_warms_both_pools(self, fake_database):
        settings = Settings(_env_file=None, db_pool_size=3, db_pool_prefill=True)
        manager = ServiceManager.from_settings(
            settings,
            inpatient_creator=fake_database.connect,
            outpatient_creator=fake_database.connect,
        )

        with manager:
            assert manager.inpatient_pool.available == 3
            assert manager.outpatient_pool.available == 3

        assert all(connection.closed for connection in fake_database.connections)

    def test_no_connections_opened_without_prefill(self, settings, fake_database):
        with ServiceManager.from_settings(
            settings,
            inpatient_creator=fake_database.connect,
            outpatient_creator=fake_database.connect,
        ):
            pass

        assert fake_database.connections == []

    def test_failed_start_disposes_pools(self):
        inpatient_pool = MagicMock()
        inpatient_pool.warm_up.side_effect = RuntimeError("database down")
        outpatient_pool = MagicMock()
        manager = ServiceManager(inpatient_pool, outpatient_pool, prefill=True)

        with pytest.raises(RuntimeError, match="database down"):
            with manager:
                pass

        inpatient_pool.dispose.assert_called_once_with()
        outpatient_pool.dispose.assert_called_once_with()

    def test_close_is_idempotent(self):
        inpatient_pool = MagicMock(name="inpatient_pool")
        outpatient_pool = MagicMock(name="outpatient_pool")
        manager = ServiceManager(inpatient_pool, outpatient_pool)

        manager.close()
        manager.close()

        inpatient_pool.dispose.assert_called_once_with()
        outpatient_pool.dispose.assert_called_once_with()

    def test_dispose_failure_does_not_stop_close(self, log_events):
        inpatient_pool = MagicMock()
        inpatient_pool.name = "inpatient"
        inpatient_pool.dispose.side_effect = RuntimeError("already gone")
        outpatient_pool = MagicMock()
        manager = ServiceManager(inpatient_pool, outpatient_pool)

        manager.close()

        outpatient_pool.dispose.assert_called_once_with()
        assert log_events("services.pool_dispose_failed")[0]["pool"] == "inpatient"
