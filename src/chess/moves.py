"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the move sets for each piece type.

Moves are pseudo-legal: a move is allowed when the piece can geometrically get there and the target square is not
occupied by its own color. Nothing here checks whether the mover leaves its own king in check.
Castling and en passant depend on the history of the game, so those are taken care of by the Game class.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]

# White moves UP the board, black moves DOWN
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}
PAWN_STARTING_RANK: dict[Color, int] = {Color.WHITE: 2, Color.BLACK: 7}
# The rank a pawn lands on when taking en passant
EN_PASSANT_RANK: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 3}


@dataclass(frozen=True)
class Move:
    """A move that has been played: what moved where, what got taken, and how it was written down."""

    from_square: Square
    to_square: Square
    piece: Piece
    captured: Optional[Piece] = None
    notation: str = ""

    def to_uci(self) -> str:
        """Universal Chess Interface notation: <from_square><to_square>, ex. 'e2e4'"""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    piece = board.piece(square)
    if piece is None:
        return []

    targets: list[Square] = []
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square.is_within_bounds():
            blocker = board.piece(target_square)
            if blocker is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if blocker.color != piece.color:
                    targets.append(target_square)
                break

            targets.append(target_square)
            target_square = target_square.offset(df, dr)
    return targets


def single_step_move(
    square: Square, board: Board, deltas: list[Vector]
) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    piece = board.piece(square)
    if piece is None:
        return []

    targets: list[Square] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if not target_square.is_within_bounds():
            continue

        occupant = board.piece(target_square)
        if occupant is None or occupant.color != piece.color:
            targets.append(target_square)

    return targets


def candidate_pawn_moves(square: Square, board: Board) -> list[Square]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally

    NOTE: En passant will be taken care of in the Game class
    """
    piece = board.piece(square)
    if piece is None:
        return []

    direction = PAWN_DIRECTION[piece.color]
    targets: list[Square] = []

    one_forward = square.offset(0, direction)
    if one_forward.is_within_bounds() and board.piece(one_forward) is None:
        targets.append(one_forward)

        two_forward = square.offset(0, 2 * direction)
        if (
            square.rank == PAWN_STARTING_RANK[piece.color]
            and board.piece(two_forward) is None
        ):
            targets.append(two_forward)

    # pawns take diagonally:
    for df in [-1, 1]:
        target_square = square.offset(df, direction)
        if not target_square.is_within_bounds():
            continue
        occupant = board.piece(target_square)
        if occupant is not None and occupant.color != piece.color:
            targets.append(target_square)
    return targets


def candidate_knight_moves(square: Square, board: Board) -> list[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    knight_deltas: list[Vector] = [
        (2, 1),
        (2, -1),
        (-2, 1),
        (-2, -1),
        (1, 2),
        (1, -2),
        (-1, 2),
        (-1, -2),
    ]
    return single_step_move(square, board, knight_deltas)


def candidate_bishop_moves(square: Square, board: Board) -> list[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    diagonals: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
    return raycasting_move(square, board, diagonals)


def candidate_rook_moves(square: Square, board: Board) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    stay_on_rank = [(1, 0), (-1, 0)]
    stay_on_file = [(0, 1), (0, -1)]
    horizontal_moves = raycasting_move(square, board, stay_on_rank)
    vertical_moves = raycasting_move(square, board, stay_on_file)
    return horizontal_moves + vertical_moves


def candidate_queen_moves(square: Square, board: Board) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    horizontal_and_vertical_moves = candidate_rook_moves(square, board)
    diagonal_moves = candidate_bishop_moves(square, board)
    return horizontal_and_vertical_moves + diagonal_moves


def candidate_king_moves(square: Square, board: Board) -> list[Square]:
    """
    The king can move by a single square at the time.

    Castling is requested as a two-file king move, and handled by the Game class.
    """
    king_deltas: list[Vector] = [
        (0, 1),
        (0, -1),
        (1, 0),
        (-1, 0),
        (1, 1),
        (1, -1),
        (-1, 1),
        (-1, -1),
    ]
    return single_step_move(square, board, king_deltas)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def pseudo_legal_destinations(square: Square, board: Board) -> list[Square]:
    """
    Destinations of whatever piece stands on the square (empty list for an empty square).

    Final filter applied to every rule: the target must be on the board and must not hold a piece of the mover's own color.
    """
    piece = board.piece(square)
    if piece is None:
        return []

    movement_rule = MOVEMENT_RULES[piece.type]
    destinations: list[Square] = []
    for target_square in movement_rule(square, board):
        if not target_square.is_within_bounds():
            continue
        occupant = board.piece(target_square)
        if occupant is not None and occupant.color == piece.color:
            continue
        destinations.append(target_square)
    return destinations


# -- EN PASSANT MOVES ---
def en_passant_square(last_move: Optional[Move]) -> Optional[Square]:
    """The square passed over by a pawn that just advanced two squares (None if the last move was anything else)."""
    if last_move is None or last_move.piece.type != PieceType.PAWN:
        return None
    if abs(last_move.to_square.rank - last_move.from_square.rank) != 2:
        return None
    passed_rank = (last_move.from_square.rank + last_move.to_square.rank) // 2
    return Square(last_move.from_square.file, passed_rank)


def en_passant_origins(
    en_passant_target: Square, color: Color, board: Board
) -> list[Square]:
    """Given a target en passant square, check the adjacent files (one rank back from the target) for pawns of the given color."""
    own_pawn = Piece(PieceType.PAWN, color)
    origins: list[Square] = []
    for df in [-1, 1]:
        maybe_pawn_square = en_passant_target.offset(df, -PAWN_DIRECTION[color])
        if not maybe_pawn_square.is_within_bounds():
            continue
        if board.piece(maybe_pawn_square) == own_pawn:
            origins.append(maybe_pawn_square)
    return origins


def passed_pawn_square(en_passant_target: Square, color: Color) -> Square:
    """Where the pawn that gets taken en passant is standing: same file as the target, one rank back."""
    return en_passant_target.offset(0, -PAWN_DIRECTION[color])


def is_en_passant_pattern(target_square: Square, color: Color, board: Board) -> bool:
    """
    Does an (empty) target square look like an en passant capture for the given color?

    The target is on the 6th rank (white) / 3rd rank (black) and an enemy pawn stands right behind it.
    """
    if board.piece(target_square) is not None:
        return False
    if target_square.rank != EN_PASSANT_RANK[color]:
        return False
    passed_pawn = board.piece(passed_pawn_square(target_square, color))
    return passed_pawn == Piece(PieceType.PAWN, color.opponent)
