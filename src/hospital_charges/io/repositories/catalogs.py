"""Stored-procedure names and column contracts per charge setting.

Column names are a strict contract with the database: renaming one, or
changing the number or order of result sets a procedure returns, is a breaking
change.
"""

from dataclasses import dataclass

from hospital_charges.domain.models import ChargeSetting

# Shared column names
STATE = "state"
CITY = "city"

PROVIDER_ID = "provider id"
PROVIDER_NAME = "provider name"
PROVIDER_STREET = "provider street"
PROVIDER_CITY = "provider city"
PROVIDER_STATE = "provider state"
PROVIDER_ZIP = "provider zip"

AVG_CHARGES = "avg charges"
AVG_PAYMENTS = "avg payments"
AVG_MEDICARE_PAYMENTS = "avg medicare payments"

AVG_CHARGES_PERCENTILE = "avg charges percentile"
AVG_PAYMENTS_PERCENTILE = "avg payments percentile"
AVG_MEDICARE_PAYMENTS_PERCENTILE = "avg medicare payments percentile"


@dataclass(frozen=True)
class ProcedureCatalog:
    """Procedures and classification columns of one charge database."""

    setting: ChargeSetting
    id_column: str
    definition_column: str

    classifications: str
    states: str
    cities_to_compare: str
    cities: str
    providers: str
    regional_classifications: str
    charges: str
    regional_charges: str


INPATIENT_CATALOG = ProcedureCatalog(
    setting=ChargeSetting.INPATIENT,
    id_column="drg id",
    definition_column="drg definition",
    classifications="getDRGs",
    states="getStates",
    cities_to_compare="getCitiesToCompare",
    cities="getCities",
    providers="getProviders",
    regional_classifications="getRegionalDRGs",
    charges="getCharges",
    regional_charges="getRegionalCharges",
)

OUTPATIENT_CATALOG = ProcedureCatalog(
    setting=ChargeSetting.OUTPATIENT,
    id_column="apc id",
    definition_column="apc definition",
    classifications="getAPCs",
    states="getStates",
    cities_to_compare="getCitiesToCompare",
    cities="getCities",
    providers="getProviders",
    regional_classifications="getRegionalAPCs",
    charges="getCharges",
    regional_charges="getRegionalCharges",
)
