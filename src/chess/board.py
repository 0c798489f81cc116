"""The Game board holds the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    """
    Sparse mapping of squares to pieces. A square without an entry is empty.

    Being a dict keyed by square, there can never be two pieces on one square.
    """

    position: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[1]:
            raise ValueError(
                f"Piece placement needs {BOARD_DIMENSIONS[1]} ranks, got {len(fen_by_ranks)}: {fen_str!r}"
            )

        position: dict[Square, Piece] = {}
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.isalpha():
                    position[Square(file, rank)] = Piece.from_fen(character)
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other. Those just get skipped.
                    file += int(character)
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        """Take a piece off the board. Returns what was standing there (if anything)."""
        return self.position.pop(square, None)

    def move_piece(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """Update the position on the board. Whatever stood on the target square gets captured (and returned)."""
        piece_that_moved = self.position.pop(from_square)
        captured = self.position.get(to_square)
        self.position[to_square] = piece_that_moved
        return captured

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        """Squares holding the requested kind of piece, in square order (a1, a2, ... h8)"""
        return sorted(
            square
            for square, piece in self.position.items()
            if piece.type == piece_type and piece.color == color
        )

    def occupied_squares(self) -> list[Square]:
        return sorted(self.position)
