"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and db layer (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer or API layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass
class VariationModel:
    """One line of an opening, as the SAN moves played from the starting position."""

    id: UUID
    name: str
    moves: list[str]


@dataclass
class OpeningModel:
    """An opening groups variations under a shared name (ex. 'Sicilian Defense' -> 'Najdorf Variation')."""

    id: UUID
    name: str
    variations: list[VariationModel] = field(default_factory=list)
