"""
Exception types raised by the extraction engine.
"""


class QuizParseError(Exception):
    """Base class for every error raised while extracting questions."""


class EmptyInputError(QuizParseError):
    """The document text is empty or whitespace-only."""


class ConfigError(QuizParseError):
    """The AI path was requested without a usable configuration."""


class CompletionError(QuizParseError):
    """A single call to the text-completion service failed."""

    def __init__(self, message: str, rate_limited: bool = False):
        super().__init__(message)
        self.rate_limited = rate_limited


class RefinementError(QuizParseError):
    """A chunk could not be turned into a question batch."""
