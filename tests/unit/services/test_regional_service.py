"""
Unit tests for the regional service facades.
"""

from decimal import Decimal

import pytest

from hospital_charges.io.repositories import INPATIENT_CATALOG, OUTPATIENT_CATALOG, ChargeRepository
from hospital_charges.services import RegionalInpatientService, RegionalOutpatientService


@pytest.fixture
def regional_inpatient(make_pool):
    return RegionalInpatientService(ChargeRepository(make_pool(), INPATIENT_CATALOG))


@pytest.mark.unit
class TestRegionalServices:
    def test_get_cities(self, regional_inpatient, fake_database):
        fake_database.define("getCities", [[{"city": "ALBANY"}, {"city": "ALBANY"}]])

        assert regional_inpatient.get_cities("NY") == ["ALBANY"]

    def test_get_drgs_by_region(self, regional_inpatient, fake_database, drg_rows):
        fake_database.define("getRegionalDRGs", [drg_rows])

        drgs = regional_inpatient.get_drgs_by_region("NY", "ALBANY")

        assert len(drgs) == 4
        assert fake_database.calls == [("getRegionalDRGs", ("ALBANY", "NY", None))]

    def test_get_apcs_by_region(self, make_pool, fake_database):
        service = RegionalOutpatientService(
            ChargeRepository(make_pool("outpatient"), OUTPATIENT_CATALOG)
        )
        fake_database.define("getRegionalAPCs", [[{"apc id": 12, "apc definition": "Level I"}]])

        apcs = service.get_apcs_by_region("NY", "ALBANY")

        assert [apc.id for apc in apcs] == [12]

    def test_get_regional_results(self, regional_inpatient, fake_database, provider_rows):
        rows = [
            {
                **row,
                "drg id": 39,
                "drg definition": "EXTRACRANIAL PROCEDURES W/O CC/MCC",
                "avg charges": Decimal("61254.50"),
                "avg payments": Decimal("9000.00"),
                "avg medicare payments": Decimal("8000.00"),
            }
            for row in provider_rows
        ]
        fake_database.define("getRegionalCharges", [rows])

        results = regional_inpatient.get_regional_results("NY", "NEW YORK", 39)

        assert [r.provider.id for r in results] == ["330024", "330101", "330214"]

    def test_unavailable_results_are_none(self, regional_inpatient, fake_database):
        fake_database.define("getRegionalCharges", [None])

        assert regional_inpatient.get_regional_results("NY", "NEW YORK", 39) is None
