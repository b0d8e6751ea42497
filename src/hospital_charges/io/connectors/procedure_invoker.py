"""
Stored-procedure invocation over a pooled connection.

Each ``call`` checks out one connection, binds the positional inputs plus the
trailing small-integer OUT status parameter, executes the procedure, and
exposes its result sets in order through ``ResultSetReader``. The cursor is
closed and the connection released when the ``with`` block exits, however it
exits.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generator, List

import pymysql

from hospital_charges.utils.logging import get_logger

from .connection_pool import ConnectionPool
from .exceptions import MissingResultSetError, ProcedureCallError, ProcedureStage

logger = get_logger(__name__)

# Placeholder bound to the trailing OUT parameter; the procedure overwrites it.
STATUS_PLACEHOLDER = None

# PyMySQL decodes text columns while reading packets, so undecodable bytes
# surface as a bare UnicodeDecodeError (a ValueError) rather than pymysql.Error.
DRIVER_ERRORS = (pymysql.Error, ValueError)


class ResultSetReader:
    """Sequential view over the result sets produced by one procedure call."""

    def __init__(self, cursor: Any, procedure: str):
        self._cursor = cursor
        self.procedure = procedure
        self.index = 0

    @property
    def has_result_set(self) -> bool:
        """True when the cursor is positioned on a result set (possibly empty)."""
        return self._cursor.description is not None

    def require_result_set(self) -> None:
        """Raise MissingResultSetError unless positioned on a result set."""
        if not self.has_result_set:
            raise MissingResultSetError(self.procedure, self.index)

    def rows(self) -> List[Dict[str, Any]]:
        """Fetch every row of the current result set."""
        try:
            return list(self._cursor.fetchall())
        except DRIVER_ERRORS as e:
            raise ProcedureCallError(
                self.procedure,
                ProcedureStage.FETCH,
                f"reading result set #{self.index + 1} failed",
                original_error=e,
            ) from e

    def next_result_set(self) -> bool:
        """
        Move to the next result set.

        Returns:
            True if the cursor now sits on another result set, False otherwise.
            The trailing status packet MySQL sends after CALL carries no columns
            and therefore counts as "no further result set".
        """
        try:
            moved = self._cursor.nextset()
        except DRIVER_ERRORS as e:
            raise ProcedureCallError(
                self.procedure,
                ProcedureStage.ADVANCE,
                f"advancing past result set #{self.index + 1} failed",
                original_error=e,
            ) from e
        self.index += 1
        return bool(moved) and self.has_result_set


class ProcedureInvoker:
    """
    Issues stored-procedure calls on connections borrowed from a pool.

    Usage:
        invoker = ProcedureInvoker(pool)
        with invoker.call("getStates", 42) as results:
            results.require_result_set()
            states = [row["state"] for row in results.rows()]
    """

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    @contextmanager
    def call(self, procedure: str, *params: Any) -> Generator[ResultSetReader, None, None]:
        """
        Execute ``procedure`` with positional ``params`` and yield its results.

        Raises:
            ProcedureCallError: If execution fails
            ConnectionPoolTimeout: If no connection is available
        """
        args = (*params, STATUS_PLACEHOLDER)
        with self.pool.connection() as connection:
            cursor = connection.cursor()
            try:
                logger.debug(
                    "procedure.call",
                    pool=self.pool.name,
                    procedure=procedure,
                    arg_count=len(args),
                )
                try:
                    cursor.callproc(procedure, args)
                except DRIVER_ERRORS as e:
                    raise ProcedureCallError(
                        procedure,
                        ProcedureStage.EXECUTE,
                        "execution failed",
                        original_error=e,
                    ) from e

                yield ResultSetReader(cursor, procedure)
            finally:
                try:
                    cursor.close()
                except Exception as close_error:
                    logger.warning(
                        "procedure.cursor_close_failed",
                        procedure=procedure,
                        error=str(close_error),
                    )
