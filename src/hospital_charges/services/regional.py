"""Regional charge services: every provider in a city for one classification."""

from __future__ import annotations

from typing import List, Optional

from hospital_charges.domain.models import ChargeClassification, ComparisonResult
from hospital_charges.io.repositories import ChargeRepository


class RegionalService:
    def __init__(self, repository: ChargeRepository):
        self.repository = repository

    def get_cities(self, state: str) -> Optional[List[str]]:
        return self.repository.list_cities(state)

    def get_regional_results(
        self, state: str, city: str, classification_id: int
    ) -> Optional[List[ComparisonResult]]:
        return self.repository.get_regional_results(state, city, classification_id)


class RegionalInpatientService(RegionalService):
    def get_drgs_by_region(
        self, state: str, city: str
    ) -> Optional[List[ChargeClassification]]:
        return self.repository.list_classifications_by_region(state, city)


class RegionalOutpatientService(RegionalService):
    def get_apcs_by_region(
        self, state: str, city: str
    ) -> Optional[List[ChargeClassification]]:
        return self.repository.list_classifications_by_region(state, city)
