"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, MoveVerdict


# --- REQUEST MODELS ---
class ImportVariationRequest(BaseModel):
    opening_name: str
    variation_name: str
    notation: str

    @field_validator("opening_name", "variation_name", "notation")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Opening name, variation name and notation are all required.")
        return value.strip()


class DeleteVariationRequest(BaseModel):
    opening_id: UUID
    variation_id: UUID


class StartPracticeRequest(BaseModel):
    variation_ids: list[UUID]

    @field_validator("variation_ids")
    @classmethod
    def validate_selection(cls, value: list[UUID]) -> list[UUID]:
        if not value:
            raise InvalidRequestError("Select at least one variation to practice.")
        return value


class PracticeRequest(BaseModel):
    session_id: UUID


class PracticeMoveRequest(BaseModel):
    session_id: UUID
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        def _is_algebraic_notation(value: str) -> bool:
            if len(value) != 2:
                return False

            first_character = value[0]
            second_character = value[1]
            if not (first_character in "abcdefgh" and second_character in "12345678"):
                return False
            return True

        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


# --- RESPONSE MODELS ---
class VariationResponse(BaseModel):
    variation_id: UUID
    name: str
    moves: list[str]


class OpeningResponse(BaseModel):
    opening_id: UUID
    name: str
    variations: list[VariationResponse]


class PracticeStateResponse(BaseModel):
    session_id: UUID
    variation_name: str
    variation_number: int
    variation_count: int
    user_color: Color
    board_fen: str
    expected_move: Optional[str]
    attempts: int
    accuracy: int
    completed: bool
    awaiting_opponent: bool
    move_history: list[str]
    hint_from: Optional[str] = None
    hint_to: Optional[str] = None


class PracticeMoveResponse(BaseModel):
    verdict: MoveVerdict
    played: Optional[str]
    state: PracticeStateResponse
