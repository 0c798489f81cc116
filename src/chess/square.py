"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# Chess board is always 8x8.
BOARD_DIMENSIONS = (8, 8)

# always used with fullmatch()
ALGEBRAIC_SQUARE = re.compile(r"[a-h][1-8]")


@dataclass(frozen=True, order=True)
class Square:
    """
    Files and ranks are 1-based: a1 is (1, 1), h8 is (8, 8).

    NOTE: ordering compares file first, then rank. That is the same order as sorting the algebraic names ("a1" < "a2" < ... < "h8").
    """

    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not ALGEBRAIC_SQUARE.fullmatch(sq):
            raise ValueError(f"Not a square in algebraic notation: {sq!r}")
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    @classmethod
    def parse(cls, sq: str) -> Optional[Square]:
        """Forgiving version of `from_algebraic()`: anything that is not an on-board square gives None."""
        if not isinstance(sq, str) or not ALGEBRAIC_SQUARE.fullmatch(sq):
            return None
        return cls.from_algebraic(sq)

    def to_algebraic(self) -> str:
        return f"{self.file_letter}{self.rank}"

    @property
    def file_letter(self) -> str:
        return chr(self.file + ord("a") - 1)

    def offset(self, df: int, dr: int) -> Square:
        """The square reached by stepping along a vector. Might be off the board!"""
        return Square(self.file + df, self.rank + dr)

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )
