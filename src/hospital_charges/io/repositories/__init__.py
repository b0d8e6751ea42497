"""Repositories over the charge databases' stored procedures."""

from .catalogs import INPATIENT_CATALOG, OUTPATIENT_CATALOG, ProcedureCatalog
from .charge_repository import ChargeRepository

__all__ = [
    "ChargeRepository",
    "INPATIENT_CATALOG",
    "OUTPATIENT_CATALOG",
    "ProcedureCatalog",
]
