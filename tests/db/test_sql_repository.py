"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import OpeningModel, VariationModel
from src.db.schema import DBOpening, DBVariation
from src.db.sql_repository import SQLRepertoireRepository

NAJDORF = ["e4", "c5", "Nf3", "d6", "d4", "cxd4", "Nxd4", "Nf6", "Nc3", "a6"]
DRAGON = ["e4", "c5", "Nf3", "d6", "d4", "cxd4", "Nxd4", "Nf6", "Nc3", "g6"]


def test_add_variation(db_session_repo: Session) -> None:
    """A new opening gets created together with its first variation."""
    repo = SQLRepertoireRepository(db_session_repo)
    opening, variation = repo.add_variation("Sicilian Defense", "Najdorf", NAJDORF)

    assert isinstance(opening, OpeningModel)
    assert isinstance(variation, VariationModel)
    assert opening.name == "Sicilian Defense"
    assert opening.variations == [variation]
    assert variation.name == "Najdorf"
    assert variation.moves == NAJDORF


def test_add_variation_to_existing_opening(db_session_repo: Session) -> None:
    """Same opening name: the variation is added to the opening already stored"""
    repo = SQLRepertoireRepository(db_session_repo)
    first_opening, _ = repo.add_variation("Sicilian Defense", "Najdorf", NAJDORF)
    second_opening, dragon = repo.add_variation("Sicilian Defense", "Dragon", DRAGON)

    assert second_opening.id == first_opening.id
    assert {variation.name for variation in second_opening.variations} == {"Najdorf", "Dragon"}
    assert dragon in second_opening.variations
    assert len(db_session_repo.scalars(select(DBOpening)).all()) == 1


def test_list_openings(db_session_repo: Session) -> None:
    repo = SQLRepertoireRepository(db_session_repo)
    assert repo.list_openings() == []

    repo.add_variation("Sicilian Defense", "Najdorf", NAJDORF)
    repo.add_variation("Italian Game", "Giuoco Piano", ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5"])
    repo.add_variation("Sicilian Defense", "Dragon", DRAGON)

    openings = repo.list_openings()
    assert {opening.name for opening in openings} == {"Sicilian Defense", "Italian Game"}
    variation_counts = {opening.name: len(opening.variations) for opening in openings}
    assert variation_counts == {"Sicilian Defense": 2, "Italian Game": 1}


def test_get_variations_in_requested_order(db_session_repo: Session) -> None:
    """Order follows the request, unknown IDs are skipped."""
    repo = SQLRepertoireRepository(db_session_repo)
    _, najdorf = repo.add_variation("Sicilian Defense", "Najdorf", NAJDORF)
    _, dragon = repo.add_variation("Sicilian Defense", "Dragon", DRAGON)

    found = repo.get_variations([dragon.id, uuid4(), najdorf.id])
    assert found == [dragon, najdorf]

    assert repo.get_variations([uuid4()]) == []
    assert repo.get_variations([]) == []


def test_delete_variation(db_session_repo: Session) -> None:
    """The variation is removed, its opening stays as long as it has other variations"""
    repo = SQLRepertoireRepository(db_session_repo)
    _, najdorf = repo.add_variation("Sicilian Defense", "Najdorf", NAJDORF)
    opening, dragon = repo.add_variation("Sicilian Defense", "Dragon", DRAGON)

    deleted = repo.delete_variation(opening.id, najdorf.id)
    assert deleted == najdorf
    assert repo.get_variations([najdorf.id]) == []

    openings = repo.list_openings()
    assert len(openings) == 1
    assert openings[0].variations == [dragon]


def test_delete_last_variation_removes_opening(db_session_repo: Session) -> None:
    repo = SQLRepertoireRepository(db_session_repo)
    opening, variation = repo.add_variation("Italian Game", "Giuoco Piano", ["e4", "e5"])

    assert repo.delete_variation(opening.id, variation.id) == variation
    assert repo.list_openings() == []
    assert db_session_repo.scalars(select(DBVariation)).all() == []


def test_attempt_deleting_unknown_variation(db_session_repo: Session) -> None:
    """
    the delete_variation() method should break early and return None

    NOTE the variation has to belong to the given opening as well.
    """
    repo = SQLRepertoireRepository(db_session_repo)
    opening, variation = repo.add_variation("Italian Game", "Giuoco Piano", ["e4", "e5"])
    other_opening, _ = repo.add_variation("Sicilian Defense", "Najdorf", NAJDORF)

    assert repo.delete_variation(opening.id, uuid4()) is None
    assert repo.delete_variation(other_opening.id, variation.id) is None
    assert repo.get_variations([variation.id]) == [variation]
