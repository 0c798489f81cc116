"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class MoveVerdict(StrEnum):
    """How a move attempted during practice compares to the stored line."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    ILLEGAL = "illegal"
