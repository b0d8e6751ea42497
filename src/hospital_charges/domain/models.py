"""
Pydantic v2 value records for published hospital-charge data.

Records are immutable once built by the row mapper: every query constructs
fresh instances and hands them to the caller, the data-access layer keeps no
reference to them.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChargeSetting(str, Enum):
    """Care setting a classification belongs to."""

    INPATIENT = "inpatient"
    OUTPATIENT = "outpatient"


class ChargeClassification(BaseModel):
    """
    A DRG (inpatient) or APC (outpatient) code with its published charges.

    List queries populate only ``id`` and ``definition``. Amounts come from the
    charge-detail and regional queries and are kept as the exact text of the
    database decimal. Percentile ranks are only set by the charge-detail query
    and always carry two fractional digits.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    setting: ChargeSetting = Field(..., description="Inpatient (DRG) or outpatient (APC)")
    id: int = Field(..., description="Classification code")
    definition: Optional[str] = Field(default=None, description="Code definition text")

    avg_charges: Optional[str] = Field(default=None, description="Average covered charges")
    avg_payments: Optional[str] = Field(default=None, description="Average total payments")
    avg_medicare_payments: Optional[str] = Field(
        default=None, description="Average Medicare payments"
    )

    avg_charges_percentile: Optional[Decimal] = Field(default=None)
    avg_payments_percentile: Optional[Decimal] = Field(default=None)
    avg_medicare_payments_percentile: Optional[Decimal] = Field(default=None)


class Provider(BaseModel):
    """A hospital or facility; ``id`` is the natural key."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    name: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class ComparisonResult(BaseModel):
    """One provider paired with one classification snapshot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    setting: ChargeSetting
    provider: Provider
    classification: ChargeClassification
