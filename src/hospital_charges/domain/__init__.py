"""Hospital charge domain: value records and in-memory comparison."""

from .comparison import compose_comparison, find_classification, find_provider
from .models import ChargeClassification, ChargeSetting, ComparisonResult, Provider

__all__ = [
    # Models
    "ChargeClassification",
    "ChargeSetting",
    "ComparisonResult",
    "Provider",
    # Composition
    "compose_comparison",
    "find_classification",
    "find_provider",
]
