"""
Assembly of a charge detail from the four result sets of ``getCharges``.

Result sets arrive in a fixed order:
1. avg charges / avg payments / avg medicare payments (text amounts)
2. avg charges percentile
3. avg payments percentile
4. avg medicare payments percentile

The assembler is a small state machine. Each consumed result set moves it one
state forward; a result set that never arrives moves it to FAILED, and a
FAILED or unfinished assembler refuses to build, so a partially populated
classification can never be returned.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Optional

from hospital_charges.domain.models import ChargeClassification, ChargeSetting

from . import catalogs
from .row_mapper import Row, as_percentile, charge_amounts


class ChargeDetailState(str, Enum):
    AWAITING_CHARGES = "awaiting_charges"
    AWAITING_CHARGES_PERCENTILE = "awaiting_charges_percentile"
    AWAITING_PAYMENTS_PERCENTILE = "awaiting_payments_percentile"
    AWAITING_MEDICARE_PERCENTILE = "awaiting_medicare_percentile"
    DONE = "done"
    FAILED = "failed"


_NEXT_STATE = {
    ChargeDetailState.AWAITING_CHARGES: ChargeDetailState.AWAITING_CHARGES_PERCENTILE,
    ChargeDetailState.AWAITING_CHARGES_PERCENTILE: ChargeDetailState.AWAITING_PAYMENTS_PERCENTILE,
    ChargeDetailState.AWAITING_PAYMENTS_PERCENTILE: ChargeDetailState.AWAITING_MEDICARE_PERCENTILE,
    ChargeDetailState.AWAITING_MEDICARE_PERCENTILE: ChargeDetailState.DONE,
}

# state -> (result-set column, model field)
_PERCENTILE_COLUMNS = {
    ChargeDetailState.AWAITING_CHARGES_PERCENTILE: (
        catalogs.AVG_CHARGES_PERCENTILE,
        "avg_charges_percentile",
    ),
    ChargeDetailState.AWAITING_PAYMENTS_PERCENTILE: (
        catalogs.AVG_PAYMENTS_PERCENTILE,
        "avg_payments_percentile",
    ),
    ChargeDetailState.AWAITING_MEDICARE_PERCENTILE: (
        catalogs.AVG_MEDICARE_PAYMENTS_PERCENTILE,
        "avg_medicare_payments_percentile",
    ),
}


class ChargeDetailAssembler:
    """Accumulates one ChargeClassification across sequential result sets."""

    def __init__(
        self,
        setting: ChargeSetting,
        classification_id: int,
        definition: Optional[str] = None,
    ):
        self.state = ChargeDetailState.AWAITING_CHARGES
        self._fields: Dict[str, Any] = {
            "setting": setting,
            "id": classification_id,
            "definition": definition,
        }

    @property
    def done(self) -> bool:
        return self.state is ChargeDetailState.DONE

    def consume(self, rows: Iterable[Row]) -> ChargeDetailState:
        """Read the result set expected in the current state and advance.

        When a result set holds several rows the last one wins.
        """
        if self.state is ChargeDetailState.AWAITING_CHARGES:
            for row in rows:
                self._fields.update(charge_amounts(row))
        elif self.state in _PERCENTILE_COLUMNS:
            column, field = _PERCENTILE_COLUMNS[self.state]
            for row in rows:
                self._fields[field] = as_percentile(row, column)
        else:
            raise RuntimeError(f"cannot consume a result set in state {self.state.value}")

        self.state = _NEXT_STATE[self.state]
        return self.state

    def fail(self) -> None:
        self.state = ChargeDetailState.FAILED
        self._fields.clear()

    def build(self) -> ChargeClassification:
        if not self.done:
            raise RuntimeError(f"charge detail incomplete (state {self.state.value})")
        return ChargeClassification(**self._fields)
