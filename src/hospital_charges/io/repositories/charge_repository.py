"""
Charge Repository: stored-procedure data access for one charge database.

Each public operation is one pooled connection checkout, one procedure call and
one release. Faults never propagate: they are logged once, with the operation
name, at the operation boundary and surface to the caller as ``None``. An empty
result set is a valid empty list and is distinct from ``None``.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, List, Optional, TypeVar, Union

import pymysql
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from hospital_charges.domain.models import ChargeClassification, ComparisonResult, Provider
from hospital_charges.io.connectors.connection_pool import ConnectionPool
from hospital_charges.io.connectors.exceptions import ChargeDataError, MissingResultSetError
from hospital_charges.io.connectors.procedure_invoker import ProcedureInvoker
from hospital_charges.utils.logging import get_logger

from . import catalogs
from .catalogs import ProcedureCatalog
from .charge_detail import ChargeDetailAssembler
from .row_mapper import (
    Row,
    map_rows,
    map_unique_rows,
    to_classification_summary,
    to_provider,
    to_regional_result,
    to_string,
)

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

DATA_ACCESS_ERRORS = (ChargeDataError, pymysql.Error, SQLAlchemyError, ValidationError)


def _error_details(error: Exception) -> dict:
    if isinstance(error, ChargeDataError):
        return error.to_dict()
    return {"error_type": type(error).__name__, "message": str(error)}


def data_access_operation(func: F) -> F:
    """Operation boundary: log any data-access fault once and return None."""
    operation = func.__name__

    @functools.wraps(func)
    def wrapper(self: "ChargeRepository", *args: Any, **kwargs: Any) -> Any:
        try:
            return func(self, *args, **kwargs)
        except DATA_ACCESS_ERRORS as e:
            logger.error(
                "charge_data.operation_failed",
                operation=operation,
                setting=self.catalog.setting.value,
                arguments=list(args),
                exc_info=not isinstance(e, MissingResultSetError),
                **_error_details(e),
            )
            return None

    return wrapper  # type: ignore[return-value]


class ChargeRepository:
    """
    Data-access operations for one charge setting (inpatient or outpatient).

    The pool is injected; the repository never creates or disposes it.

    Usage:
        repo = ChargeRepository(inpatient_pool, INPATIENT_CATALOG)
        drgs = repo.list_classifications()
        if drgs is None:
            ...  # data unavailable
    """

    def __init__(self, pool: ConnectionPool, catalog: ProcedureCatalog):
        self.pool = pool
        self.catalog = catalog
        self.invoker = ProcedureInvoker(pool)

    def _fetch(self, procedure: str, *params: Any) -> List[Row]:
        """Single-result-set call; raises MissingResultSetError if none is produced."""
        with self.invoker.call(procedure, *params) as results:
            results.require_result_set()
            return results.rows()

    @data_access_operation
    def list_classifications(self) -> Optional[List[ChargeClassification]]:
        """All classifications (id and definition), deduplicated by id."""
        rows = self._fetch(self.catalog.classifications)
        return map_unique_rows(
            rows,
            lambda row: to_classification_summary(row, self.catalog),
            key=lambda classification: classification.id,
        )

    @data_access_operation
    def list_states(self, classification_id: int) -> Optional[List[str]]:
        """States with providers billing the classification, deduplicated."""
        rows = self._fetch(self.catalog.states, classification_id)
        return map_unique_rows(rows, to_string(catalogs.STATE))

    @data_access_operation
    def list_cities_to_compare(
        self, classification_id: int, state: str
    ) -> Optional[List[str]]:
        """Cities in ``state`` with providers billing the classification, deduplicated."""
        rows = self._fetch(self.catalog.cities_to_compare, classification_id, state)
        return map_unique_rows(rows, to_string(catalogs.CITY))

    @data_access_operation
    def list_cities(self, state: str) -> Optional[List[str]]:
        """All cities in ``state``, deduplicated."""
        rows = self._fetch(self.catalog.cities, state)
        return map_unique_rows(rows, to_string(catalogs.CITY))

    @data_access_operation
    def list_providers(
        self, state: str, city: str, classification_id: int
    ) -> Optional[List[Provider]]:
        """Providers in a city billing the classification, in result-set order."""
        rows = self._fetch(self.catalog.providers, classification_id, city, state)
        return map_rows(rows, to_provider)

    @data_access_operation
    def list_classifications_by_region(
        self, state: str, city: str
    ) -> Optional[List[ChargeClassification]]:
        """Classifications billed in a city (id and definition), not deduplicated."""
        rows = self._fetch(self.catalog.regional_classifications, city, state)
        return map_rows(rows, lambda row: to_classification_summary(row, self.catalog))

    @data_access_operation
    def get_charge_detail(
        self, classification_id: int, provider_id: Union[str, int]
    ) -> Optional[ChargeClassification]:
        """
        Charges, payments and percentile ranks of one provider for one classification.

        Assembled from four sequential result sets; if any of them is missing
        the whole detail is discarded and None is returned.
        """
        procedure = self.catalog.charges
        assembler = ChargeDetailAssembler(self.catalog.setting, classification_id)

        with self.invoker.call(procedure, classification_id, provider_id) as results:
            results.require_result_set()
            while True:
                assembler.consume(results.rows())
                if assembler.done:
                    break
                if not results.next_result_set():
                    assembler.fail()
                    raise MissingResultSetError(procedure, results.index)

        return assembler.build()

    @data_access_operation
    def get_regional_results(
        self, state: str, city: str, classification_id: int
    ) -> Optional[List[ComparisonResult]]:
        """One comparison per joined row returned for the region, never deduplicated."""
        rows = self._fetch(self.catalog.regional_charges, classification_id, city, state)
        return map_rows(rows, lambda row: to_regional_result(row, self.catalog))
