"""
The Game class is the entrypoint into the chess rules for the service layer (and anything else that wants to play moves).
It owns one board, the color to move and the history of moves, and is responsible for validating and making a move.

Squares go in and come out in algebraic notation ("e4"). Bad input never raises:
* `apply()` returns False and leaves the game untouched
* `parse()` returns None
"""

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, CastlingSide, castling_side
from src.chess.moves import (
    Move,
    en_passant_origins,
    en_passant_square,
    passed_pawn_square,
    pseudo_legal_destinations,
)
from src.chess.notation import ParsedMove, move_to_san, parse_san
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square

logger = logging.getLogger(__name__)


@dataclass
class Game:
    board: Board = field(default_factory=Board.starting_position)
    color_to_move: Color = Color.WHITE
    moves: list[Move] = field(default_factory=list)

    # --- API ---
    def get_piece(self, square: str) -> Optional[Piece]:
        """The piece on the square. None for an empty square, but also for anything that is not a square at all."""
        parsed = Square.parse(square)
        if parsed is None:
            return None
        return self.board.piece(parsed)

    def valid_moves(self, square: str) -> list[str]:
        """
        Squares the piece on the given square can move to.

        NOTE: An empty list does not tell you whether the square was valid. It is also empty for an empty square or a piece of the color not to move.
        """
        parsed = Square.parse(square)
        if parsed is None:
            return []
        return [target.to_algebraic() for target in self.destinations(parsed)]

    def apply(self, from_square: str, to_square: str) -> bool:
        """
        Attempt to make a move
        -----

        1. there must be a piece to move
        2. it must be of the color to move
        3. the target must be one of its valid moves (or a castling request)

        If any check fails: return False and change nothing. Otherwise:

        4. write the move down (before the board changes!)
        5. update the board (NOTE: if castling, move the king and the rook)
        6. update the history of moves
        7. the other color is to move
        """
        origin = Square.parse(from_square)
        target = Square.parse(to_square)
        if origin is None or target is None:
            logger.debug("Rejected %r -> %r: not a square", from_square, to_square)
            return False

        piece = self.board.piece(origin)
        if piece is None:
            logger.debug("Rejected %s -> %s: no piece to move", from_square, to_square)
            return False

        if piece.color != self.color_to_move:
            logger.debug(
                "Rejected %s -> %s: %s is to move",
                from_square,
                to_square,
                self.color_to_move.name.lower(),
            )
            return False

        side = self._requested_castling(origin, target, piece)
        if side is not None:
            move = self._castle(piece, side)
        elif target in self.destinations(origin):
            move = self._move(origin, target, piece)
        else:
            logger.debug("Rejected %s -> %s: not a valid move", from_square, to_square)
            return False

        self.moves.append(move)
        self.color_to_move = self.color_to_move.opponent
        logger.debug("Played %s (%s)", move.notation, move.to_uci())
        return True

    def last_move_notation(self) -> str:
        """SAN of the last move played (empty string before the first move)"""
        return self.moves[-1].notation if self.moves else ""

    def parse(self, notation: str) -> Optional[ParsedMove]:
        """Which squares a SAN token (ex. from a stored opening line) moves from/to in the current position."""
        return parse_san(self, notation)

    def clone(self) -> Self:
        """Independent copy: making moves on it never touches this game."""
        return deepcopy(self)

    @property
    def last_move(self) -> Optional[Move]:
        return self.moves[-1] if self.moves else None

    def destinations(self, square: Square) -> list[Square]:
        """
        Pseudo-legal target squares of the piece on the square, if it is the color to move
        ----

        1. the movement rules of the piece type (the moves module does this calculation)
        2. add the en passant capture, if the last move allows one
        """
        piece = self.board.piece(square)
        if piece is None or piece.color != self.color_to_move:
            return []

        destinations = pseudo_legal_destinations(square, self.board)
        if piece.type == PieceType.PAWN:
            ep_target = en_passant_square(self.last_move)
            if (
                ep_target is not None
                and self.board.is_empty(ep_target)
                and square in en_passant_origins(ep_target, piece.color, self.board)
            ):
                destinations.append(ep_target)
        return destinations

    # -- PRIVATE HELPERS ---
    def _move(self, origin: Square, target: Square, piece: Piece) -> Move:
        """Any move that is not castling."""
        notation = move_to_san(self, origin, target)
        if self._is_en_passant(origin, target, piece):
            captured = self.board.remove_piece(passed_pawn_square(target, piece.color))
            self.board.move_piece(origin, target)
        else:
            captured = self.board.move_piece(origin, target)
        return Move(origin, target, piece, captured, notation)

    def _is_en_passant(self, origin: Square, target: Square, piece: Piece) -> bool:
        """A pawn changing file onto an empty square can only be taking en passant"""
        return (
            piece.type == PieceType.PAWN
            and origin.file != target.file
            and self.board.is_empty(target)
        )

    # -- CASTLING RULE HELPERS ---
    def _requested_castling(
        self, origin: Square, target: Square, piece: Piece
    ) -> Optional[CastlingSide]:
        """
        Is the move a castling request that is allowed?
        ---

        * the king moves two files along its home rank, from its starting square
        * the rook of that side is still on its starting square
        * neither of the two has moved (or been taken) before in this game

        NOTE: There is no check on the squares in between or on whether any of them are under attack.
        """
        if piece.type != PieceType.KING:
            return None

        side = castling_side(origin, target)
        if side is None:
            return None

        rule = CASTLING_RULES[(piece.color, side)]
        if origin != rule.king_from or target != rule.king_to:
            return None
        if self.board.piece(rule.rook_from) != Piece(PieceType.ROOK, piece.color):
            return None
        if self._has_been_touched(rule.king_from) or self._has_been_touched(
            rule.rook_from
        ):
            return None
        return side

    def _has_been_touched(self, square: Square) -> bool:
        """Whether any move so far started from or landed on the square."""
        return any(square in (move.from_square, move.to_square) for move in self.moves)

    def _castle(self, king: Piece, side: CastlingSide) -> Move:
        """
        Move both the King and the Rook

        NOTE: Whatever stands on the landing squares is discarded. Castling never counts as a capture.
        """
        rule = CASTLING_RULES[(king.color, side)]
        self.board.move_piece(rule.king_from, rule.king_to)
        self.board.move_piece(rule.rook_from, rule.rook_to)
        return Move(rule.king_from, rule.king_to, king, None, side.value)
