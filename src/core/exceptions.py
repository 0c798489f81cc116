"""
Custom exceptions, shared across layers.

NOTE: TrainerError deliberately does not derive from ValueError. Pydantic would otherwise wrap the errors raised in validators into a ValidationError.
"""


class TrainerError(Exception):
    """Top-level exception of the application. Catch this one to catch them all."""


class InvalidRequestError(TrainerError):
    """A request does not contain what it should."""


class RepositoryError(TrainerError):
    """The requested record could not be found."""


class NotationError(TrainerError):
    """A line of moves does not replay on the board."""


class PracticeStateError(TrainerError):
    """The requested action is not possible in the current state of the practice session."""
