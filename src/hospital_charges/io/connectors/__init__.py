"""Pooled MySQL connections and stored-procedure invocation.

Keep this package import lightweight: the exception types are imported eagerly,
while the pool and invoker (which pull in SQLAlchemy and PyMySQL) load lazily.
"""

from __future__ import annotations

import importlib
from typing import Any

from .exceptions import (
    ChargeDataError,
    ConnectionPoolClosed,
    ConnectionPoolTimeout,
    MissingResultSetError,
    ProcedureCallError,
    ProcedureStage,
    RowMappingError,
)

__all__ = [
    "ChargeDataError",
    "ConnectionPoolClosed",
    "ConnectionPoolTimeout",
    "MissingResultSetError",
    "ProcedureCallError",
    "ProcedureStage",
    "RowMappingError",
    "ConnectionPool",
    "ProcedureInvoker",
    "ResultSetReader",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "ConnectionPool": (".connection_pool", "ConnectionPool"),
    "ProcedureInvoker": (".procedure_invoker", "ProcedureInvoker"),
    "ResultSetReader": (".procedure_invoker", "ResultSetReader"),
}


def __getattr__(name: str) -> Any:
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _LAZY_IMPORTS[name]
    module = importlib.import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(_LAZY_IMPORTS.keys())))
