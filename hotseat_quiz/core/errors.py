"""Exception types raised by the quiz engine."""

from __future__ import annotations


class HotseatQuizError(Exception):
    """Base class for every error the engine raises."""


class ConfigurationError(HotseatQuizError):
    """Raised when a match cannot be started with the given players, bank or settings."""


class InvalidStateTransition(HotseatQuizError):
    """Raised when an event arrives in a state that does not accept it."""

    def __init__(self, operation: str, state: object) -> None:
        super().__init__(f"'{operation}' is not allowed while the match is {state}.")
        self.operation = operation
        self.state = state


class OutOfRangeAnswer(HotseatQuizError):
    """Raised when an answer index does not point at a selectable option."""

    def __init__(self, answer_index: int, answer_count: int) -> None:
        super().__init__(
            f"Answer index {answer_index} is not selectable (question has {answer_count} answers)."
        )
        self.answer_index = answer_index
        self.answer_count = answer_count


class QuizImportError(HotseatQuizError):
    """Raised when a quiz definition cannot be parsed or fetched."""
