"""Exceptions raised by the utility helpers."""

from postlint.exceptions import PostlintError


class DateTimeError(PostlintError):
    """Base exception for datetime conversion errors."""


class InvalidDateTimeInputError(DateTimeError):
    """Raised when the input is empty or otherwise unusable."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid datetime input '{value}': {reason}")


class DateTimeParsingError(DateTimeError):
    """Raised when a string cannot be parsed as a datetime."""

    def __init__(self, value: str, original_exception: Exception) -> None:
        self.value = value
        self.original_exception = original_exception
        super().__init__(f"Cannot parse datetime from '{value}': {original_exception}")
