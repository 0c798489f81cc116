"""Orchestration of communication from API models to business logic and persistence layers (and the reverse direction)."""

import logging
import random
from typing import Optional
from uuid import UUID, uuid4

from src.api.models import (
    DeleteVariationRequest,
    ImportVariationRequest,
    OpeningResponse,
    PracticeMoveRequest,
    PracticeMoveResponse,
    PracticeRequest,
    PracticeStateResponse,
    StartPracticeRequest,
    VariationResponse,
)
from src.chess.game import Game
from src.chess.pgn import parse_movetext
from src.core.exceptions import NotationError, PracticeStateError, RepositoryError
from src.core.models import OpeningModel
from src.core.shared_types import Color, MoveVerdict
from src.db.repository import RepertoireRepository
from src.services.practice import PracticeSession

logger = logging.getLogger(__name__)


def replay_line(moves: list[str]) -> Game:
    """Play a line of SAN moves from the starting position. Raises NotationError at the first move that does not work."""
    game = Game()
    for ply, notation in enumerate(moves, start=1):
        parsed = game.parse(notation)
        if parsed is None or not game.apply(parsed.from_square, parsed.to_square):
            move_number = f"{(ply + 1) // 2}{'.' if ply % 2 else '...'}"
            raise NotationError(f"Cannot play {move_number} {notation}")
    return game


class TrainerService:
    """Orchestration of layers for the opening trainer."""

    def __init__(
        self, repository: RepertoireRepository, rng: Optional[random.Random] = None
    ) -> None:
        self.repo = repository
        self.rng = rng or random.Random()
        self.sessions: dict[UUID, PracticeSession] = {}

    # -- Repertoire logic ---
    def import_variation(self, request: ImportVariationRequest) -> OpeningResponse:
        """Store pasted movetext as a variation of an opening."""

        # Read the moves out of the movetext, and make sure they can actually be played
        moves = parse_movetext(request.notation)
        if not moves:
            raise NotationError(f"No moves found in {request.notation!r}")
        replay_line(moves)

        # Store under the (new or existing) opening
        opening, variation = self.repo.add_variation(
            request.opening_name, request.variation_name, moves
        )
        logger.info(
            "Imported %r / %r (%d moves)", opening.name, variation.name, len(moves)
        )
        return self._create_opening_response(opening)

    def list_openings(self) -> list[OpeningResponse]:
        return [
            self._create_opening_response(opening)
            for opening in self.repo.list_openings()
        ]

    def delete_variation(self, request: DeleteVariationRequest) -> None:
        """Handle a request to delete a Variation record."""
        deleted = self.repo.delete_variation(request.opening_id, request.variation_id)
        if deleted is None:
            raise RepositoryError(
                f"Variation {request.variation_id} of opening {request.opening_id} not found."
            )

    # -- Practice logic ---
    def start_practice(self, request: StartPracticeRequest) -> PracticeStateResponse:
        """Start drilling the selected variations (in random order)."""
        variations = self.repo.get_variations(request.variation_ids)
        if not variations:
            raise RepositoryError("None of the selected variations were found.")

        session = PracticeSession.start(variations, self.rng)
        session_id = uuid4()
        self.sessions[session_id] = session
        return self._create_practice_response(session_id, session)

    def practice_move(self, request: PracticeMoveRequest) -> PracticeMoveResponse:
        """The user attempts a move in a practice session."""
        session = self._fetch_session(request.session_id)
        verdict = session.submit_move(request.from_square, request.to_square)
        played = session.history[-1] if verdict == MoveVerdict.CORRECT else None
        return PracticeMoveResponse(
            verdict=verdict,
            played=played,
            state=self._create_practice_response(request.session_id, session),
        )

    def opponent_move(self, request: PracticeRequest) -> PracticeStateResponse:
        """
        Let the stored line make its next step.
        ----
        Called by the frontend (after a short delay of its choosing) as long as the state says `awaiting_opponent`.

        NOTE: A session is forgotten once it completes. The returned state is the last one it reports.
        """
        session = self._fetch_session(request.session_id)
        if not session.awaiting_opponent:
            raise PracticeStateError("It is the user's turn to move.")
        session.play_opponent_move()
        response = self._create_practice_response(request.session_id, session)
        if session.completed:
            del self.sessions[request.session_id]
            logger.info("Practice session %s completed and closed", request.session_id)
        return response

    def get_practice(self, request: PracticeRequest) -> PracticeStateResponse:
        session = self._fetch_session(request.session_id)
        return self._create_practice_response(request.session_id, session)

    def stop_practice(self, request: PracticeRequest) -> None:
        self._fetch_session(request.session_id)
        del self.sessions[request.session_id]

    # -- Internal helpers --
    def _fetch_session(self, session_id: UUID) -> PracticeSession:
        """Attempt to find the session and raise error if it fails."""
        session = self.sessions.get(session_id)
        if session is None:
            raise RepositoryError(f"Practice session with {session_id=} not found.")
        return session

    def _create_opening_response(self, opening: OpeningModel) -> OpeningResponse:
        return OpeningResponse(
            opening_id=opening.id,
            name=opening.name,
            variations=[
                VariationResponse(
                    variation_id=variation.id,
                    name=variation.name,
                    moves=variation.moves,
                )
                for variation in opening.variations
            ],
        )

    def _create_practice_response(
        self, session_id: UUID, session: PracticeSession
    ) -> PracticeStateResponse:
        hint = session.hint
        return PracticeStateResponse(
            session_id=session_id,
            variation_name=session.current_variation.name,
            variation_number=session.variation_index + 1,
            variation_count=len(session.variations),
            user_color=Color[session.user_color.name],
            board_fen=session.game.board.to_fen(),
            expected_move=session.expected_move,
            attempts=session.attempts,
            accuracy=session.accuracy.percentage,
            completed=session.completed,
            awaiting_opponent=session.awaiting_opponent,
            move_history=session.history,
            hint_from=hint.from_square if hint else None,
            hint_to=hint.to_square if hint else None,
        )
