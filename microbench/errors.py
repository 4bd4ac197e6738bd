"""Exception types raised by the harness."""

from typing import Optional


class MicrobenchError(Exception):
    """Base class for harness errors."""


class ConfigurationError(MicrobenchError, ValueError):
    """Invalid candidates, unit, order or catalog name."""


class CandidateError(MicrobenchError):
    """A unit of work raised while being measured. Original error is __cause__."""

    def __init__(self, label: str, message: Optional[str] = None):
        self.label = label
        super().__init__(message or f"candidate {label!r} failed")


class CheckFailedError(MicrobenchError):
    """The result check rejected the candidates' outputs."""
