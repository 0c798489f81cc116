"""Implementation of (Repertoire)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import OpeningModel, VariationModel
from src.db.schema import DBOpening, DBVariation

logger = logging.getLogger(__name__)


class SQLRepertoireRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def list_openings(self) -> list[OpeningModel]:
        """All openings with their variations, oldest first."""
        query = select(DBOpening).order_by(DBOpening.created_at)
        return [self._to_opening_model(opening) for opening in self.db.scalars(query)]

    def get_variations(self, variation_ids: list[UUID]) -> list[VariationModel]:
        """The variations with the given IDs, in the order requested (unknown IDs are skipped)."""
        query = select(DBVariation).where(DBVariation.id.in_(variation_ids))
        found = {variation.id: variation for variation in self.db.scalars(query)}
        return [
            self._to_variation_model(found[variation_id])
            for variation_id in variation_ids
            if variation_id in found
        ]

    def add_variation(
        self, opening_name: str, variation_name: str, moves: list[str]
    ) -> tuple[OpeningModel, VariationModel]:
        """Store a variation under the opening with that name (creating the opening if it does not exist yet)."""
        opening_db = self.db.scalar(
            select(DBOpening).where(DBOpening.name == opening_name)
        )
        if opening_db is None:
            opening_db = DBOpening(id=uuid4(), name=opening_name)
            self.db.add(opening_db)
            logger.info("Created opening %r", opening_name)

        variation_db = DBVariation(id=uuid4(), name=variation_name, moves=list(moves))
        opening_db.variations.append(variation_db)
        self.db.commit()
        self.db.refresh(opening_db)
        return self._to_opening_model(opening_db), self._to_variation_model(
            variation_db
        )

    def delete_variation(
        self, opening_id: UUID, variation_id: UUID
    ) -> VariationModel | None:
        """Remove a variation's record. An opening without variations left is removed as well."""
        variation_db = self.db.scalar(
            select(DBVariation).where(
                DBVariation.id == variation_id, DBVariation.opening_id == opening_id
            )
        )
        if variation_db is None:
            return None

        variation_model = self._to_variation_model(variation_db)
        opening_db = variation_db.opening
        opening_db.variations.remove(variation_db)
        if not opening_db.variations:
            self.db.delete(opening_db)
            logger.info("Removed opening %r (no variations left)", opening_db.name)
        self.db.commit()
        return variation_model

    def _to_variation_model(self, variation_db: DBVariation) -> VariationModel:
        """Convert SQLAlchemy model to data transfer model."""
        return VariationModel(
            id=variation_db.id,
            name=variation_db.name,
            moves=list(variation_db.moves),
        )

    def _to_opening_model(self, opening_db: DBOpening) -> OpeningModel:
        return OpeningModel(
            id=opening_db.id,
            name=opening_db.name,
            variations=[
                self._to_variation_model(variation)
                for variation in opening_db.variations
            ],
        )
