"""Two-provider comparison services consumed by the presentation tier.

Every method returns entities, or ``None`` when the data is unavailable; the
caller is not told why.
"""

from __future__ import annotations

from typing import List, Optional, Union

from hospital_charges.domain.comparison import compose_comparison
from hospital_charges.domain.models import ChargeClassification, ComparisonResult, Provider
from hospital_charges.io.repositories import ChargeRepository


class ComparisonService:
    """Operations shared by the inpatient and outpatient comparison flows."""

    def __init__(self, repository: ChargeRepository):
        self.repository = repository

    def get_states(self, classification_id: int) -> Optional[List[str]]:
        return self.repository.list_states(classification_id)

    def get_cities_to_compare(
        self, classification_id: int, state: str
    ) -> Optional[List[str]]:
        return self.repository.list_cities_to_compare(classification_id, state)

    def get_providers(
        self, state: str, city: str, classification_id: int
    ) -> Optional[List[Provider]]:
        return self.repository.list_providers(state, city, classification_id)

    def get_result(
        self,
        providers: Optional[List[Provider]],
        provider_id: Union[str, int],
        classifications: Optional[List[ChargeClassification]],
        classification_id: int,
    ) -> Optional[ComparisonResult]:
        """
        Charge comparison entry for one provider and one classification.

        The pair is picked from lists the caller already holds; no query is
        issued unless both are found. The listed classification only carries
        id and definition, so the charges and percentile ranks are then read
        with a single charge-detail call.
        """
        composed = compose_comparison(
            providers, provider_id, classifications, classification_id
        )
        if composed is None:
            return None

        detail = self.repository.get_charge_detail(
            composed.classification.id, composed.provider.id
        )
        if detail is None:
            return None

        return composed.model_copy(
            update={
                "classification": detail.model_copy(
                    update={"definition": composed.classification.definition}
                )
            }
        )


class InpatientComparisonService(ComparisonService):
    """Comparison of two providers' charges for a diagnosis-related group."""

    def get_drgs(self) -> Optional[List[ChargeClassification]]:
        return self.repository.list_classifications()


class OutpatientComparisonService(ComparisonService):
    """Comparison of two providers' charges for an ambulatory payment classification."""

    def get_apcs(self) -> Optional[List[ChargeClassification]]:
        return self.repository.list_classifications()
