"""Custom exceptions for the level test."""


class LevelTestError(Exception):
    """Base exception for level test errors."""
    pass


class GenerationError(LevelTestError):
    """Content generator failed, timed out or returned empty text."""
    pass


class ContentParseError(LevelTestError):
    """Generated text could not be repaired into the expected payload."""
    pass


class InvariantViolation(LevelTestError):
    """Locally defined data broke its own contract. Indicates a bug."""
    pass


class SessionStateError(LevelTestError):
    """Operation not allowed in the current session state."""
    pass


class UnknownSubjectError(LevelTestError):
    """Subject is not in the catalogue."""
    pass
