"""Pytest configuration and scripted DB-API fakes.

The fakes stand in for a MySQL server: a FakeDatabase maps stored-procedure
names to the result sets they return, and FakeConnection/FakeCursor replay them
through the DB-API calls the data-access layer uses (callproc, description,
fetchall, nextset). Pools in tests are real ConnectionPool instances whose
creator hands out FakeConnections.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pytest

from hospital_charges.io.connectors.connection_pool import ConnectionPool

# A result set is a list of dict rows; None means "no result set here".
ResultSets = Sequence[Optional[List[Dict[str, Any]]]]
ProcedureScript = Union[ResultSets, Exception, Callable[[tuple], Any]]


class FakeDatabase:
    """Procedure name -> scripted result sets, shared by every fake connection."""

    def __init__(self) -> None:
        self.procedures: Dict[str, ProcedureScript] = {}
        self.calls: List[tuple] = []
        self.connections: List["FakeConnection"] = []
        self._lock = threading.Lock()

    def define(self, procedure: str, script: ProcedureScript) -> None:
        self.procedures[procedure] = script

    def record(self, procedure: str, args: tuple) -> None:
        with self._lock:
            self.calls.append((procedure, args))

    def connect(self) -> "FakeConnection":
        connection = FakeConnection(self)
        with self._lock:
            self.connections.append(connection)
        return connection

    def resolve(self, procedure: str, args: tuple) -> ResultSets:
        script = self.procedures.get(procedure)
        if script is None:
            raise LookupError(f"procedure {procedure} is not scripted")
        if isinstance(script, Exception):
            raise script
        if callable(script):
            outcome = script(args)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        return script


class FakeCursor:
    def __init__(self, database: FakeDatabase) -> None:
        self._database = database
        self._sets: ResultSets = []
        self._position = 0
        self.closed = False

    def callproc(self, procedure: str, args: tuple) -> tuple:
        self._database.record(procedure, tuple(args))
        self._sets = list(self._database.resolve(procedure, tuple(args)))
        self._position = 0
        return args

    @property
    def _current(self) -> Optional[List[Dict[str, Any]]]:
        if self._position < len(self._sets):
            return self._sets[self._position]
        return None

    @property
    def description(self) -> Optional[tuple]:
        current = self._current
        if current is None:
            return None
        if not current:
            return (("status", None, None, None, None, None, None),)
        return tuple((name, None, None, None, None, None, None) for name in current[0])

    def fetchall(self) -> tuple:
        return tuple(self._current or ())

    def nextset(self) -> Optional[bool]:
        self._position += 1
        if self._position < len(self._sets):
            return True
        return None

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    def __init__(self, database: FakeDatabase) -> None:
        self._database = database
        self.cursors: List[FakeCursor] = []
        self.rollbacks = 0
        self.closed = False

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self._database)
        self.cursors.append(cursor)
        return cursor

    def rollback(self) -> None:
        self.rollbacks += 1

    def commit(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def make_pool(fake_database: FakeDatabase):
    """Factory for real ConnectionPools backed by the fake database."""
    pools: List[ConnectionPool] = []

    def _make(name: str = "inpatient", **kwargs: Any) -> ConnectionPool:
        kwargs.setdefault("pool_size", 2)
        kwargs.setdefault("max_overflow", 0)
        kwargs.setdefault("timeout", 1.0)
        pool = ConnectionPool(name, fake_database.connect, **kwargs)
        pools.append(pool)
        return pool

    yield _make

    for pool in pools:
        pool.dispose()


def logged_events(caplog: pytest.LogCaptureFixture, event: str) -> List[Dict[str, Any]]:
    """JSON-decoded structlog records whose event name is ``event``."""
    events = []
    for record in caplog.records:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            continue
        if isinstance(payload, dict) and payload.get("event") == event:
            events.append(payload)
    return events


@pytest.fixture
def log_events(caplog: pytest.LogCaptureFixture):
    """Callable returning the decoded records for a given event name."""
    caplog.set_level(logging.DEBUG)
    return lambda event: logged_events(caplog, event)


@pytest.fixture
def failure_events(caplog: pytest.LogCaptureFixture):
    """Callable returning the charge_data.operation_failed records logged so far."""
    caplog.set_level(logging.INFO)
    return lambda: logged_events(caplog, "charge_data.operation_failed")


@pytest.fixture
def drg_rows() -> List[Dict[str, Any]]:
    return [
        {"drg id": 39, "drg definition": "EXTRACRANIAL PROCEDURES W/O CC/MCC"},
        {"drg id": 57, "drg definition": "DEGENERATIVE NERVOUS SYSTEM DISORDERS W/O MCC"},
        {"drg id": 39, "drg definition": "EXTRACRANIAL PROCEDURES W/O CC/MCC"},
        {"drg id": 64, "drg definition": "INTRACRANIAL HEMORRHAGE OR CEREBRAL INFARCTION W MCC"},
    ]


@pytest.fixture
def provider_rows() -> List[Dict[str, Any]]:
    return [
        {
            "provider id": "330024",
            "provider name": "MOUNT SINAI HOSPITAL",
            "provider street": "ONE GUSTAVE L LEVY PLACE",
            "provider city": "NEW YORK",
            "provider state": "NY",
            "provider zip": "10029",
        },
        {
            "provider id": "330101",
            "provider name": "NEW YORK-PRESBYTERIAN HOSPITAL",
            "provider street": "525 EAST 68TH STREET",
            "provider city": "NEW YORK",
            "provider state": "NY",
            "provider zip": "10065",
        },
        {
            "provider id": "330214",
            "provider name": "NYU HOSPITALS CENTER",
            "provider street": "550 FIRST AVENUE",
            "provider city": "NEW YORK",
            "provider state": "NY",
            "provider zip": "10016",
        },
    ]
