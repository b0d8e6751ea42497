"""
Service construction and connection pool lifecycle.

A ServiceManager is created once at process start. It owns one connection pool
per charge database, hands the pools to the repositories behind the four
services, and disposes the pools once at process stop. Nothing here is a
module-level global: the hosting application keeps the manager and passes the
services it needs down to its request handlers.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from hospital_charges.config.settings import Settings, get_settings
from hospital_charges.io.connectors.connection_pool import ConnectionPool
from hospital_charges.io.repositories import (
    INPATIENT_CATALOG,
    OUTPATIENT_CATALOG,
    ChargeRepository,
)
from hospital_charges.utils.logging import get_logger

from .comparison import InpatientComparisonService, OutpatientComparisonService
from .regional import RegionalInpatientService, RegionalOutpatientService

logger = get_logger(__name__)


class ServiceManager:
    """
    Owns the charge database pools and the services built on them.

    Usage:
        with ServiceManager.from_settings() as services:
            drgs = services.inpatient_comparison.get_drgs()
    """

    def __init__(
        self,
        inpatient_pool: ConnectionPool,
        outpatient_pool: ConnectionPool,
        prefill: bool = False,
    ):
        self.inpatient_pool = inpatient_pool
        self.outpatient_pool = outpatient_pool
        self.prefill = prefill
        self._closed = False

        inpatient = ChargeRepository(inpatient_pool, INPATIENT_CATALOG)
        outpatient = ChargeRepository(outpatient_pool, OUTPATIENT_CATALOG)

        self.inpatient_comparison = InpatientComparisonService(inpatient)
        self.outpatient_comparison = OutpatientComparisonService(outpatient)
        self.regional_inpatient = RegionalInpatientService(inpatient)
        self.regional_outpatient = RegionalOutpatientService(outpatient)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        inpatient_creator: Optional[Callable[[], Any]] = None,
        outpatient_creator: Optional[Callable[[], Any]] = None,
    ) -> "ServiceManager":
        """
        Build pools and services from configuration.

        Args:
            settings: Settings to use (defaults to the cached process settings)
            inpatient_creator: Connection factory override for the inpatient pool
            outpatient_creator: Connection factory override for the outpatient pool
        """
        settings = settings or get_settings()
        pool_settings = settings.pool
        return cls(
            ConnectionPool.from_settings(
                "inpatient",
                settings.inpatient_database,
                pool_settings,
                creator=inpatient_creator,
            ),
            ConnectionPool.from_settings(
                "outpatient",
                settings.outpatient_database,
                pool_settings,
                creator=outpatient_creator,
            ),
            prefill=pool_settings.prefill,
        )

    def start(self) -> "ServiceManager":
        """Open pooled connections up front when prefill is configured."""
        if self.prefill:
            self.inpatient_pool.warm_up()
            self.outpatient_pool.warm_up()
        logger.info("services.started", prefill=self.prefill)
        return self

    def close(self) -> None:
        """Dispose both pools. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        for pool in (self.inpatient_pool, self.outpatient_pool):
            try:
                pool.dispose()
            except Exception as e:
                logger.warning(
                    "services.pool_dispose_failed",
                    pool=pool.name,
                    error=str(e),
                )
        logger.info("services.closed")

    def __enter__(self) -> "ServiceManager":
        try:
            return self.start()
        except Exception:
            self.close()
            raise

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
