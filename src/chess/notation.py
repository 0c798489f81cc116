"""
Standard Algebraic Notation (SAN)
-----

Both directions of the codec live here:
* writing a move down (`move_to_san()`), including the disambiguation needed when two identical pieces can reach the same square.
* reading a move back (`parse_san()`) into the squares it moves from/to, given the position it is played in.

Castling is written by the Game itself ("O-O" / "O-O-O"), but is read back here.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Protocol

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, NOTATION_TO_CASTLING
from src.chess.moves import is_en_passant_pattern
from src.chess.pieces import SAN_TO_PIECE, Color, Piece, PieceType
from src.chess.square import Square

logger = logging.getLogger(__name__)

# check, mate and annotation glyphs at the end of a move: "Nf3+", "Qxf7#", "e4!?"
ANNOTATION_GLYPHS = re.compile(r"[+#!?]+$")

# The shapes of notation we understand (castling is handled separately)
PAWN_PUSH = re.compile(r"^(?P<to>[a-h][1-8])$")
PAWN_CAPTURE = re.compile(r"^(?P<file>[a-h])x(?P<to>[a-h][1-8])$")
PIECE_MOVE = re.compile(
    r"^(?P<piece>[KQRBN])(?P<file>[a-h])?(?P<rank>[1-8])?(?P<capture>x)?(?P<to>[a-h][1-8])$"
)


class Position(Protocol):
    """Just the parts of the Game the codec needs"""

    board: Board
    color_to_move: Color

    def destinations(self, square: Square) -> list[Square]: ...


@dataclass(frozen=True)
class ParsedMove:
    """Squares (in algebraic notation) a SAN token resolves to"""

    from_square: str
    to_square: str


@dataclass(frozen=True)
class SanRequest:
    """What a (non-castling) SAN token asks for, before looking at the board."""

    piece_type: PieceType
    to_square: Square
    from_file: Optional[int] = None
    from_rank: Optional[int] = None
    is_capture: bool = False


def strip_annotations(notation: str) -> str:
    """Remove trailing check/mate/annotation glyphs (and whitespace)"""
    return ANNOTATION_GLYPHS.sub("", notation.strip()).strip()


# --- GENERATION ---
def find_ambiguous(
    position: Position, from_square: Square, to_square: Square, piece: Piece
) -> list[Square]:
    """
    Other pieces of the same color and type that could also go to the target square.

    An empty list means the moving piece is the only one that can get there (so no disambiguation needed).
    """
    return [
        square
        for square in position.board.locate_pieces(piece.type, piece.color)
        if square != from_square and to_square in position.destinations(square)
    ]


def disambiguator(from_square: Square, ambiguous: list[Square]) -> str:
    """
    Prefer the file of the origin, then its rank, and only if both are shared the full origin square.
    ex) knights on b1 and e2 both reaching c3: "Nbc3". Rooks on a1 and a5 both reaching a3: "R1a3"
    """
    if not ambiguous:
        return ""
    if not any(square.file == from_square.file for square in ambiguous):
        return from_square.file_letter
    if not any(square.rank == from_square.rank for square in ambiguous):
        return str(from_square.rank)
    return from_square.to_algebraic()


def move_to_san(position: Position, from_square: Square, to_square: Square) -> str:
    """
    Write down a move BEFORE it is made on the board (the captured piece is still standing on the target square).

    * pawns: "e4", or "exd5" when taking (a change of file always means taking, en passant included)
    * pieces: <letter><disambiguator><x if taking><target square>, ex) "Nf3", "Nbd2", "Rxe8"
    """
    piece = position.board.piece(from_square)
    if piece is None:
        raise ValueError(f"No piece on {from_square.to_algebraic()} to write a move for.")

    captured = position.board.piece(to_square)
    target = to_square.to_algebraic()

    if piece.type == PieceType.PAWN:
        if captured is not None or from_square.file != to_square.file:
            return f"{from_square.file_letter}x{target}"
        return target

    ambiguous = find_ambiguous(position, from_square, to_square, piece)
    capture_mark = "x" if captured is not None else ""
    return f"{piece.san_letter}{disambiguator(from_square, ambiguous)}{capture_mark}{target}"


# --- PARSING ---
def read_san(notation: str) -> Optional[SanRequest]:
    """Match the token against the shapes we know. None if it is none of them."""
    match = PAWN_PUSH.match(notation)
    if match:
        to_square = Square.from_algebraic(match["to"])
        # a pawn that does not take stays on its file
        return SanRequest(PieceType.PAWN, to_square, from_file=to_square.file)

    match = PAWN_CAPTURE.match(notation)
    if match:
        return SanRequest(
            PieceType.PAWN,
            Square.from_algebraic(match["to"]),
            from_file=ord(match["file"]) - ord("a") + 1,
            is_capture=True,
        )

    match = PIECE_MOVE.match(notation)
    if match:
        return SanRequest(
            SAN_TO_PIECE[match["piece"]],
            Square.from_algebraic(match["to"]),
            from_file=ord(match["file"]) - ord("a") + 1 if match["file"] else None,
            from_rank=int(match["rank"]) if match["rank"] else None,
            is_capture=bool(match["capture"]),
        )

    return None


def find_candidates(position: Position, request: SanRequest) -> list[Square]:
    """
    All squares (in square order) of pieces of the side to move that fit the request
    ---

    1. right piece type and color, on the requested file/rank (if any)
    2. can move to the target square
    3. capture notation needs something to take (an enemy piece, or for pawns the en passant pattern), a plain move needs an empty square.
    """
    color = position.color_to_move
    board = position.board
    candidates: list[Square] = []
    for square in board.locate_pieces(request.piece_type, color):
        if request.from_file is not None and square.file != request.from_file:
            continue
        if request.from_rank is not None and square.rank != request.from_rank:
            continue
        if request.to_square not in position.destinations(square):
            continue

        target_piece = board.piece(request.to_square)
        if request.is_capture:
            takes_enemy_piece = target_piece is not None and target_piece.color != color
            takes_en_passant = request.piece_type == PieceType.PAWN and is_en_passant_pattern(
                request.to_square, color, board
            )
            if not (takes_enemy_piece or takes_en_passant):
                continue
        elif target_piece is not None:
            continue

        candidates.append(square)
    return candidates


def parse_san(position: Position, notation: str) -> Optional[ParsedMove]:
    """
    Translate a SAN token into the squares to move from/to, for the side to move.

    Returns None when the token is not understood or no piece can play it.
    If more than one piece fits (under-disambiguated notation), the first one in square order wins.
    """
    clean = strip_annotations(notation)

    castling = NOTATION_TO_CASTLING.get(clean)
    if castling is not None:
        rule = CASTLING_RULES[(position.color_to_move, castling)]
        return ParsedMove(rule.king_from.to_algebraic(), rule.king_to.to_algebraic())

    request = read_san(clean)
    if request is None:
        logger.debug("Unrecognized notation: %r", notation)
        return None

    candidates = find_candidates(position, request)
    if not candidates:
        logger.debug("No piece can play %r", notation)
        return None
    if len(candidates) > 1:
        logger.debug(
            "%r fits %s, picking %s",
            notation,
            [square.to_algebraic() for square in candidates],
            candidates[0].to_algebraic(),
        )

    return ParsedMove(candidates[0].to_algebraic(), request.to_square.to_algebraic())
