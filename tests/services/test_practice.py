"""Unit tests for /src/services/practice.py"""

import random
from uuid import uuid4

import pytest

from src.chess.pieces import Color
from src.core.exceptions import NotationError, PracticeStateError
from src.core.models import VariationModel
from src.core.shared_types import MoveVerdict
from src.services.practice import (
    Accuracy,
    Hint,
    PracticeSession,
    is_defense_opening,
)

ITALIAN = VariationModel(
    id=uuid4(), name="Italian Game", moves=["e4", "e5", "Nf3", "Nc6", "Bc4"]
)
SICILIAN = VariationModel(id=uuid4(), name="Sicilian Defense", moves=["e4", "c5", "Nf3"])


def start(*variations: VariationModel) -> PracticeSession:
    return PracticeSession.start(list(variations), random.Random(42))


# --- HELPERS ---
@pytest.mark.parametrize(
    "name, expected",
    [
        ("Italian Game", False),
        ("Ruy Lopez", False),
        ("Queen's Gambit", False),
        ("Sicilian Defense: Najdorf", True),
        ("King's Indian Defence", True),
        ("Queen's Gambit Declined", True),
        ("French: Winawer", True),
        ("caro-kann advance", True),
    ],
)
def test_is_defense_opening(name: str, expected: bool) -> None:
    assert is_defense_opening(name) == expected


@pytest.mark.parametrize(
    "correct, total, expected",
    [(0, 0, 0), (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 8, 38), (5, 5, 100)],
)
def test_accuracy_rounds_half_up(correct: int, total: int, expected: int) -> None:
    assert Accuracy(correct, total).percentage == expected


# --- STARTING ---
def test_start_without_variations() -> None:
    with pytest.raises(PracticeStateError):
        _ = PracticeSession.start([])


def test_start_as_white() -> None:
    session = start(ITALIAN)
    assert session.current_variation == ITALIAN
    assert session.user_color == Color.WHITE
    assert session.expected_move == "e4"
    assert not session.awaiting_opponent
    assert session.history == []
    assert session.accuracy.percentage == 0


def test_start_as_black() -> None:
    """The stored line opens, so the opponent is to move first"""
    session = start(SICILIAN)
    assert session.user_color == Color.BLACK
    assert session.awaiting_opponent
    with pytest.raises(PracticeStateError):
        session.submit_move("c7", "c5")


def test_start_shuffles_a_copy() -> None:
    variations = [ITALIAN, SICILIAN]
    session = PracticeSession.start(variations, random.Random(1))
    assert variations == [ITALIAN, SICILIAN]
    assert sorted(variation.name for variation in session.variations) == [
        "Italian Game",
        "Sicilian Defense",
    ]


# --- PLAYING ---
def test_correct_moves_and_opponent_replies() -> None:
    session = start(ITALIAN)
    assert session.submit_move("e2", "e4") == MoveVerdict.CORRECT
    assert session.history == ["e4"]
    assert session.awaiting_opponent

    # not the user's turn
    with pytest.raises(PracticeStateError):
        session.submit_move("d2", "d4")

    assert session.play_opponent_move() == "e5"
    assert session.history == ["e4", "e5"]
    assert not session.awaiting_opponent
    assert session.expected_move == "Nf3"
    assert session.accuracy == Accuracy(1, 1)


def test_opponent_waits_for_the_user() -> None:
    session = start(ITALIAN)
    with pytest.raises(PracticeStateError):
        session.play_opponent_move()


def test_illegal_move_is_not_counted() -> None:
    session = start(ITALIAN)
    assert session.submit_move("e2", "e5") == MoveVerdict.ILLEGAL
    assert session.submit_move("e7", "e5") == MoveVerdict.ILLEGAL
    assert session.attempts == 0
    assert session.accuracy == Accuracy(0, 0)
    assert session.game.board.to_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


def test_incorrect_moves_and_hints() -> None:
    """First the square to move from, after more tries also the square to move to"""
    session = start(ITALIAN)
    session.submit_move("e2", "e4")
    session.play_opponent_move()

    assert session.submit_move("d2", "d4") == MoveVerdict.INCORRECT
    assert session.attempts == 1
    assert session.hint is None
    # the wrong move was not played
    assert session.game.get_piece("d4") is None

    assert session.submit_move("b1", "c3") == MoveVerdict.INCORRECT
    assert session.hint == Hint("g1")

    assert session.submit_move("f1", "c4") == MoveVerdict.INCORRECT
    assert session.hint == Hint("g1")

    assert session.submit_move("d1", "h5") == MoveVerdict.INCORRECT
    assert session.hint == Hint("g1", "f3")

    assert session.submit_move("g1", "f3") == MoveVerdict.CORRECT
    assert session.attempts == 0
    assert session.hint is None
    assert session.accuracy == Accuracy(2, 6)
    assert session.accuracy.percentage == 33


def test_annotations_in_stored_line_are_ignored() -> None:
    session = start(VariationModel(id=uuid4(), name="King's Gambit", moves=["e4!", "e5", "f4!?"]))
    assert session.submit_move("e2", "e4") == MoveVerdict.CORRECT
    assert session.play_opponent_move() == "e5"
    assert session.submit_move("f2", "f4") == MoveVerdict.CORRECT
    assert session.history == ["e4", "e5", "f4"]


def test_complete_line_as_black() -> None:
    session = start(SICILIAN)
    assert session.play_opponent_move() == "e4"
    assert session.submit_move("c7", "c5") == MoveVerdict.CORRECT
    assert session.play_opponent_move() == "Nf3"

    # the line is played out: the next step moves on (here: completes the session)
    assert session.line_finished
    assert session.awaiting_opponent
    assert session.play_opponent_move() is None
    assert session.completed
    assert not session.awaiting_opponent

    with pytest.raises(PracticeStateError):
        session.submit_move("g8", "f6")
    with pytest.raises(PracticeStateError):
        session.play_opponent_move()


def test_moving_on_to_next_variation() -> None:
    """Every selected variation gets played, each one on a fresh board"""
    session = start(ITALIAN, SICILIAN)
    played: list[str] = []

    while not session.completed:
        if session.history == []:
            played.append(session.current_variation.name)
            assert session.game.board.to_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

        if session.awaiting_opponent:
            session.play_opponent_move()
            continue

        expected = session.game.parse(session.expected_move or "")
        assert expected is not None
        assert session.submit_move(expected.from_square, expected.to_square) == MoveVerdict.CORRECT

    assert sorted(played) == ["Italian Game", "Sicilian Defense"]
    assert session.variation_index == 1
    assert session.accuracy.percentage == 100


def test_stored_line_that_cannot_be_played() -> None:
    session = start(VariationModel(id=uuid4(), name="Broken", moves=["e4", "Ke3"]))
    session.submit_move("e2", "e4")
    with pytest.raises(NotationError):
        session.play_opponent_move()
