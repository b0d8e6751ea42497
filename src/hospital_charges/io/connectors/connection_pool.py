"""
Bounded MySQL connection pool for stored-procedure access.

Wraps SQLAlchemy's thread-safe ``QueuePool`` around a PyMySQL connection
factory. One pool exists per charge database; it is created once when the
services start, passed explicitly to every repository, and disposed once when
the services stop.
"""

import threading
from contextlib import contextmanager
from typing import Any, Callable, Generator, List, Optional

import pymysql
from pymysql.cursors import DictCursor
from sqlalchemy import exc as sa_exc
from sqlalchemy.pool import QueuePool

from hospital_charges.config.settings import DatabaseSettings, PoolSettings
from hospital_charges.utils.logging import get_logger

from .exceptions import ConnectionPoolClosed, ConnectionPoolTimeout

logger = get_logger(__name__)


def mysql_creator(database: DatabaseSettings) -> Callable[[], pymysql.Connection]:
    """Build a zero-argument PyMySQL connection factory with dict rows."""

    def _connect() -> pymysql.Connection:
        return pymysql.connect(cursorclass=DictCursor, **database.connect_kwargs())

    return _connect


class ConnectionPool:
    """
    Thread-safe pool of database connections.

    Every ``acquire`` must be paired with exactly one ``release``. Use the
    ``connection()`` context manager so the release happens on every exit
    path, including exceptions and early returns.

    Usage:
        pool = ConnectionPool.from_settings("inpatient", db_settings, pool_settings)
        with pool.connection() as conn:
            with conn.cursor() as cursor:
                cursor.callproc("getDRGs", (None,))
        pool.dispose()
    """

    def __init__(
        self,
        name: str,
        creator: Callable[[], Any],
        pool_size: int = 5,
        max_overflow: int = 0,
        timeout: float = 30.0,
        recycle: int = -1,
    ):
        """
        Initialize the pool. Connections are opened lazily on first acquire.

        Args:
            name: Pool name used in log records (e.g. "inpatient")
            creator: Zero-argument callable returning a new DB-API connection
            pool_size: Number of connections kept open
            max_overflow: Extra connections allowed beyond pool_size
            timeout: Seconds to wait for a free connection
            recycle: Seconds after which a connection is reopened (-1 disables)
        """
        self.name = name
        self.pool_size = pool_size
        self.timeout = timeout
        self._pool = QueuePool(
            creator,
            pool_size=pool_size,
            max_overflow=max_overflow,
            timeout=timeout,
            recycle=recycle,
        )
        self._lock = threading.Lock()
        self._checked_out: set = set()
        self._disposed = False

        logger.info(
            "connection_pool.created",
            pool=name,
            pool_size=pool_size,
            max_overflow=max_overflow,
            timeout=timeout,
            recycle=recycle,
        )

    @classmethod
    def from_settings(
        cls,
        name: str,
        database: DatabaseSettings,
        pool_settings: PoolSettings,
        creator: Optional[Callable[[], Any]] = None,
    ) -> "ConnectionPool":
        """Create a pool for one charge database from configuration."""
        logger.info(
            "connection_pool.configuring",
            pool=name,
            database=database.describe(),
        )
        return cls(
            name,
            creator or mysql_creator(database),
            pool_size=pool_settings.pool_size,
            max_overflow=pool_settings.max_overflow,
            timeout=pool_settings.timeout,
            recycle=pool_settings.recycle,
        )

    @property
    def available(self) -> int:
        """Open connections currently idle in the pool."""
        return self._pool.checkedin()

    @property
    def checked_out(self) -> int:
        """Connections currently handed out to callers."""
        with self._lock:
            return len(self._checked_out)

    def acquire(self) -> Any:
        """
        Check a connection out of the pool.

        Raises:
            ConnectionPoolClosed: If the pool has been disposed
            ConnectionPoolTimeout: If no connection frees up within ``timeout``
            pymysql.Error: If a new connection cannot be opened
        """
        with self._lock:
            if self._disposed:
                raise ConnectionPoolClosed(self.name)

        try:
            connection = self._pool.connect()
        except sa_exc.TimeoutError as e:
            raise ConnectionPoolTimeout(self.name, self.timeout) from e

        with self._lock:
            if self._disposed:
                # disposed while we were waiting: close instead of handing out
                connection.invalidate()
                raise ConnectionPoolClosed(self.name)
            self._checked_out.add(connection)
        logger.debug("connection_pool.acquired", pool=self.name)
        return connection

    def release(self, connection: Any) -> None:
        """
        Return a connection to the pool.

        Always succeeds from the caller's point of view: failures while
        resetting the connection are logged, and releasing a connection that is
        not checked out from this pool is ignored.
        """
        with self._lock:
            if connection not in self._checked_out:
                logger.warning("connection_pool.release_ignored", pool=self.name)
                return
            self._checked_out.discard(connection)
            disposed = self._disposed

        try:
            if disposed:
                # the pool is gone; close for real instead of parking it
                connection.invalidate()
            else:
                connection.close()
        except Exception as close_error:
            logger.warning(
                "connection_pool.release_failed",
                pool=self.name,
                error=str(close_error),
                error_type=type(close_error).__name__,
            )
        else:
            logger.debug("connection_pool.released", pool=self.name)

    @contextmanager
    def connection(self) -> Generator[Any, None, None]:
        """Acquire a connection and release it on every exit path."""
        connection = self.acquire()
        try:
            yield connection
        finally:
            self.release(connection)

    def warm_up(self) -> int:
        """
        Open ``pool_size`` connections up front and park them in the pool.

        Returns:
            Number of idle connections after warm-up
        """
        held: List[Any] = []
        try:
            for _ in range(self.pool_size):
                held.append(self.acquire())
        finally:
            for connection in held:
                self.release(connection)

        logger.info("connection_pool.warmed", pool=self.name, available=self.available)
        return self.available

    def dispose(self) -> None:
        """Close every idle connection and shut the pool down for good."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            leaked = len(self._checked_out)
        self._pool.dispose()
        if leaked:
            logger.warning(
                "connection_pool.disposed_with_checkouts",
                pool=self.name,
                checked_out=leaked,
            )
        logger.info("connection_pool.disposed", pool=self.name)

    def __enter__(self) -> "ConnectionPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
