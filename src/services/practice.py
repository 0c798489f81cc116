"""
Practice session: drilling stored opening lines
----

The session replays the selected variations one after another (in random order). The user plays one side of each line,
the other side is played from the stored notation. Every attempt of the user is compared with the stored move.

NOTE: Timing (ex. waiting a second before the opponent replies) is up to the caller.
The caller asks `awaiting_opponent` and calls `play_opponent_move()` whenever it sees fit.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.game import Game
from src.chess.notation import strip_annotations
from src.chess.pieces import Color
from src.core.exceptions import NotationError, PracticeStateError
from src.core.models import VariationModel
from src.core.shared_types import MoveVerdict

logger = logging.getLogger(__name__)

# Variations with one of these in the name are played from Black's side
DEFENSE_KEYWORDS: tuple[str, ...] = (
    "defense",
    "defence",
    "declined",
    "counter",
    "sicilian",
    "french",
    "caro-kann",
    "alekhine",
    "pirc",
    "modern",
    "scandinavian",
    "nimzo",
)

# Number of wrong attempts after which a hint is shown: first the square to move from, later also the square to move to
HINT_ORIGIN_AFTER = 2
HINT_FULL_AFTER = 4


def is_defense_opening(variation_name: str) -> bool:
    lower_name = variation_name.lower()
    return any(keyword in lower_name for keyword in DEFENSE_KEYWORDS)


@dataclass
class Accuracy:
    correct: int = 0
    total: int = 0

    @property
    def percentage(self) -> int:
        """Rounded half up. Zero as long as nothing has been attempted."""
        if self.total == 0:
            return 0
        return math.floor(100 * self.correct / self.total + 0.5)


@dataclass(frozen=True)
class Hint:
    from_square: str
    to_square: Optional[str] = None


@dataclass
class PracticeSession:
    variations: list[VariationModel]
    game: Game = field(default_factory=Game)
    variation_index: int = 0
    move_index: int = 0
    attempts: int = 0
    accuracy: Accuracy = field(default_factory=Accuracy)
    completed: bool = False
    user_color: Color = Color.WHITE
    hint: Optional[Hint] = None
    history: list[str] = field(default_factory=list)

    @classmethod
    def start(
        cls, variations: list[VariationModel], rng: Optional[random.Random] = None
    ) -> Self:
        """Shuffle the selected variations and set up the board for the first one."""
        if not variations:
            raise PracticeStateError("Select at least one variation to practice.")

        shuffled = list(variations)
        (rng or random.Random()).shuffle(shuffled)
        session = cls(variations=shuffled)
        session._set_up_variation()
        return session

    @property
    def current_variation(self) -> VariationModel:
        return self.variations[self.variation_index]

    @property
    def expected_move(self) -> Optional[str]:
        """The next move of the stored line (None once the line has been played out)"""
        moves = self.current_variation.moves
        return moves[self.move_index] if self.move_index < len(moves) else None

    @property
    def line_finished(self) -> bool:
        return self.expected_move is None

    @property
    def awaiting_opponent(self) -> bool:
        """True when the next step is not up to the user: the opponent's reply, or moving on once the line is finished."""
        if self.completed:
            return False
        return self.line_finished or self.game.color_to_move != self.user_color

    def submit_move(self, from_square: str, to_square: str) -> MoveVerdict:
        """
        The user attempts a move
        -----

        1. Try it on a copy of the game. Not possible at all? Then it does not count as an attempt.
        2. Same notation as the stored move: keep the copy, count a correct attempt.
        3. Otherwise: count a wrong attempt and (after enough of them) show a hint.
        """
        self._assert_users_turn()

        trial = self.game.clone()
        if not trial.apply(from_square, to_square):
            return MoveVerdict.ILLEGAL

        expected = self.expected_move
        # for the type checker: the line is not finished when it is the user's turn
        assert expected is not None

        if strip_annotations(trial.last_move_notation()) == strip_annotations(expected):
            self._commit(trial)
            self.accuracy.correct += 1
            self.accuracy.total += 1
            self.attempts = 0
            self.hint = None
            return MoveVerdict.CORRECT

        self.accuracy.total += 1
        self.attempts += 1
        self._update_hint(expected)
        return MoveVerdict.INCORRECT

    def play_opponent_move(self) -> Optional[str]:
        """
        Next step of the scripted side
        ----

        * Line played out: move on to the next variation, or complete the session after the last one. Returns None.
        * Otherwise: play the stored move and return its notation.
        """
        if self.completed:
            raise PracticeStateError("Practice session is already completed.")

        if self.line_finished:
            self._next_variation()
            return None

        if self.game.color_to_move == self.user_color:
            raise PracticeStateError("Waiting for the user to make a move.")

        notation = self.expected_move
        assert notation is not None

        parsed = self.game.parse(notation)
        trial = self.game.clone()
        if parsed is None or not trial.apply(parsed.from_square, parsed.to_square):
            raise NotationError(
                f"Cannot play {notation!r} (move {self.move_index + 1} of {self.current_variation.name!r})."
            )
        self._commit(trial)
        return trial.last_move_notation()

    # -- PRIVATE HELPERS ---
    def _assert_users_turn(self) -> None:
        if self.completed:
            raise PracticeStateError("Practice session is already completed.")
        if self.awaiting_opponent:
            raise PracticeStateError("Waiting for the opponent to make a move.")

    def _commit(self, game: Game) -> None:
        self.game = game
        self.history.append(game.last_move_notation())
        self.move_index += 1

    def _update_hint(self, expected: str) -> None:
        parsed = self.game.parse(expected)
        if parsed is None:
            return
        if self.attempts == HINT_ORIGIN_AFTER:
            self.hint = Hint(parsed.from_square)
        elif self.attempts == HINT_FULL_AFTER:
            self.hint = Hint(parsed.from_square, parsed.to_square)

    def _next_variation(self) -> None:
        if self.variation_index + 1 >= len(self.variations):
            self.completed = True
            logger.info(
                "Practice completed with %d%% accuracy", self.accuracy.percentage
            )
            return
        self.variation_index += 1
        self._set_up_variation()

    def _set_up_variation(self) -> None:
        """Fresh board. The side the user plays follows from the name of the variation."""
        self.game = Game()
        self.move_index = 0
        self.attempts = 0
        self.hint = None
        self.history = []
        self.user_color = (
            Color.BLACK if is_defense_opening(self.current_variation.name) else Color.WHITE
        )
        logger.info(
            "Practicing %r as %s",
            self.current_variation.name,
            self.user_color.name.lower(),
        )
