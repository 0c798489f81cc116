"""Protocol repository (can implement later for SQL Alchemy / simple JSON file etc.)"""

from typing import Protocol
from uuid import UUID

from src.core.models import OpeningModel, VariationModel


class RepertoireRepository(Protocol):
    """Persistence layer orchestration"""

    def list_openings(self) -> list[OpeningModel]:
        """All openings with their variations."""
        ...

    def get_variations(self, variation_ids: list[UUID]) -> list[VariationModel]:
        """The variations with the given IDs (unknown IDs are skipped)."""
        ...

    def add_variation(
        self, opening_name: str, variation_name: str, moves: list[str]
    ) -> tuple[OpeningModel, VariationModel]:
        """Store a variation under the opening with that name (creating the opening if it does not exist yet)."""
        ...

    def delete_variation(
        self, opening_id: UUID, variation_id: UUID
    ) -> VariationModel | None:
        """Remove a variation's record. An opening without variations left is removed as well."""
        ...
