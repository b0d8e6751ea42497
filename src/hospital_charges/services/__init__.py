"""Service facades consumed by the presentation tier."""

from .comparison import (
    ComparisonService,
    InpatientComparisonService,
    OutpatientComparisonService,
)
from .manager import ServiceManager
from .regional import RegionalInpatientService, RegionalOutpatientService, RegionalService

__all__ = [
    "ComparisonService",
    "InpatientComparisonService",
    "OutpatientComparisonService",
    "RegionalService",
    "RegionalInpatientService",
    "RegionalOutpatientService",
    "ServiceManager",
]
