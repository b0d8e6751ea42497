"""In-memory composition of provider comparisons.

Works purely on lists the caller already fetched; nothing here touches the
database. Contrast with ``ChargeRepository.get_regional_results`` which returns
pre-joined pairs from a single procedure call.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

from .models import ChargeClassification, ComparisonResult, Provider


def find_provider(
    providers: Iterable[Provider], provider_id: Union[str, int]
) -> Optional[Provider]:
    """Return the provider whose id equals ``provider_id`` (compared as text)."""
    wanted = str(provider_id)
    for provider in providers:
        if provider.id == wanted:
            return provider
    return None


def find_classification(
    classifications: Iterable[ChargeClassification], classification_id: int
) -> Optional[ChargeClassification]:
    for classification in classifications:
        if classification.id == classification_id:
            return classification
    return None


def compose_comparison(
    providers: Optional[Iterable[Provider]],
    provider_id: Union[str, int],
    classifications: Optional[Iterable[ChargeClassification]],
    classification_id: int,
) -> Optional[ComparisonResult]:
    """Pair a provider and a classification picked from previously fetched lists.

    Args:
        providers: Providers returned by an earlier ``list_providers`` call
        provider_id: Identifier of the provider to compare
        classifications: Classifications returned by an earlier list call
        classification_id: Identifier of the classification to compare

    Returns:
        ComparisonResult, or None when either identifier is absent from its list
        (a ``None`` list counts as absent).
    """
    if providers is None or classifications is None:
        return None

    provider = find_provider(providers, provider_id)
    if provider is None:
        return None

    classification = find_classification(classifications, classification_id)
    if classification is None:
        return None

    return ComparisonResult(
        setting=classification.setting,
        provider=provider,
        classification=classification,
    )
