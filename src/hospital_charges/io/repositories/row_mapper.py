"""
Row-to-entity mapping for stored-procedure result sets.

Rows are dicts keyed by column name (PyMySQL ``DictCursor``), so lookups are by
name and column order in the procedure is irrelevant. A missing column or a
value that cannot be converted raises RowMappingError.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, TypeVar

from hospital_charges.domain.models import (
    ChargeClassification,
    ComparisonResult,
    Provider,
)
from hospital_charges.io.connectors.exceptions import RowMappingError

from . import catalogs
from .catalogs import ProcedureCatalog

Row = Dict[str, Any]
T = TypeVar("T")

PERCENTILE_SCALE = 2
_PERCENTILE_QUANTUM = Decimal(1).scaleb(-PERCENTILE_SCALE)


def column_value(row: Row, column: str) -> Any:
    try:
        return row[column]
    except KeyError as e:
        raise RowMappingError(column, "missing from result set", e) from e


def as_int(row: Row, column: str) -> int:
    value = column_value(row, column)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise RowMappingError(column, f"cannot convert {value!r} to int", e) from e


def as_text(row: Row, column: str) -> Optional[str]:
    """Exact textual form of a column; decimals are never routed through float."""
    value = column_value(row, column)
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise RowMappingError(column, "value is not valid UTF-8", e) from e
    return str(value)


def as_key(row: Row, column: str) -> str:
    """Text of a natural-key column, which must be neither NULL nor empty."""
    value = as_text(row, column)
    if not value:
        raise RowMappingError(column, "is null or empty")
    return value


def round_percentile(value: Any) -> Optional[Decimal]:
    """Round a percentile rank to two fractional digits, half-up.

    >>> round_percentile(Decimal("0.565"))
    Decimal('0.57')
    >>> round_percentile("0.564")
    Decimal('0.56')
    """
    if value is None:
        return None
    if isinstance(value, float):
        # repr of a float is its shortest round-tripping decimal text
        value = repr(value)
    return Decimal(value).quantize(_PERCENTILE_QUANTUM, rounding=ROUND_HALF_UP)


def as_percentile(row: Row, column: str) -> Optional[Decimal]:
    value = column_value(row, column)
    try:
        return round_percentile(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise RowMappingError(column, f"cannot convert {value!r} to decimal", e) from e


def to_provider(row: Row) -> Provider:
    return Provider(
        id=as_key(row, catalogs.PROVIDER_ID),
        name=as_text(row, catalogs.PROVIDER_NAME),
        street=as_text(row, catalogs.PROVIDER_STREET),
        city=as_text(row, catalogs.PROVIDER_CITY),
        state=as_text(row, catalogs.PROVIDER_STATE),
        zip_code=as_text(row, catalogs.PROVIDER_ZIP),
    )


def to_classification_summary(row: Row, catalog: ProcedureCatalog) -> ChargeClassification:
    """Identifier and definition only, as returned by the list procedures."""
    return ChargeClassification(
        setting=catalog.setting,
        id=as_int(row, catalog.id_column),
        definition=as_text(row, catalog.definition_column),
    )


def charge_amounts(row: Row) -> Dict[str, Optional[str]]:
    """The three raw amount fields of a charges row, keyed by model field name."""
    return {
        "avg_charges": as_text(row, catalogs.AVG_CHARGES),
        "avg_payments": as_text(row, catalogs.AVG_PAYMENTS),
        "avg_medicare_payments": as_text(row, catalogs.AVG_MEDICARE_PAYMENTS),
    }


def to_regional_result(row: Row, catalog: ProcedureCatalog) -> ComparisonResult:
    """One pre-joined row: full provider plus classification amounts (no percentiles)."""
    classification = ChargeClassification(
        setting=catalog.setting,
        id=as_int(row, catalog.id_column),
        definition=as_text(row, catalog.definition_column),
        **charge_amounts(row),
    )
    return ComparisonResult(
        setting=catalog.setting,
        provider=to_provider(row),
        classification=classification,
    )


def to_string(column: str) -> Callable[[Row], Optional[str]]:
    """Mapper pulling a single text column, e.g. ``state`` or ``city``."""

    def _map(row: Row) -> Optional[str]:
        return as_text(row, column)

    return _map


def map_rows(rows: Iterable[Row], mapper: Callable[[Row], T]) -> List[T]:
    """Map every row, keeping result-set order and duplicates."""
    return [mapper(row) for row in rows]


def map_unique_rows(
    rows: Iterable[Row],
    mapper: Callable[[Row], T],
    key: Optional[Callable[[T], Hashable]] = None,
) -> List[T]:
    """
    Map rows and drop structural duplicates, first occurrence wins.

    Args:
        rows: Result-set rows
        mapper: Row-to-value mapper
        key: Deduplication key of a mapped value (defaults to the value itself)
    """
    seen = set()
    unique: List[T] = []
    for row in rows:
        value = mapper(row)
        marker = key(value) if key is not None else value
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(value)
    return unique
