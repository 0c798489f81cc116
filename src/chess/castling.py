"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from src.chess.pieces import Color
from src.chess.square import Square


class CastlingSide(Enum):
    """The two castling directions. Values are their notation in SAN."""

    KING_SIDE = "O-O"
    QUEEN_SIDE = "O-O-O"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    (Color.WHITE, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    (Color.BLACK, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    (Color.BLACK, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}

NOTATION_TO_CASTLING: dict[str, CastlingSide] = {
    "O-O": CastlingSide.KING_SIDE,
    "0-0": CastlingSide.KING_SIDE,
    "O-O-O": CastlingSide.QUEEN_SIDE,
    "0-0-0": CastlingSide.QUEEN_SIDE,
}


def castling_side(king_from: Square, king_to: Square) -> Optional[CastlingSide]:
    """A king displaced by exactly two files along its rank is how castling gets requested."""
    if king_from.rank != king_to.rank:
        return None
    files_moved = king_to.file - king_from.file
    if abs(files_moved) != 2:
        return None
    return CastlingSide.KING_SIDE if files_moved > 0 else CastlingSide.QUEEN_SIDE
