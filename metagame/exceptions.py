"""Custom exceptions for the metagame analyzer.

The analysis functions never raise on data values; these are raised at the
boundaries where files and user input are read.
"""
from typing import Optional


class MetagameError(Exception):
    """Base exception for metagame analyzer errors.

    Attributes:
        code (str): Error code for identifying the error type
        message (str): Descriptive error message
        details (dict): Additional error context
    """

    def __init__(self, message: str, code: str = "METAGAME_ERR", details: Optional[dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        error_msg = f"[{self.code}] {self.message}"
        if self.details:
            error_msg += f"\nDetails: {self.details}"
        return error_msg


class TournamentDataError(MetagameError):
    """Raised when a tournament file is missing or cannot be parsed."""

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[dict] = None):
        details = dict(details or {})
        if path is not None:
            details["path"] = path
        super().__init__(message, code="TOURNAMENT_DATA_ERR", details=details)


class ArchetypeConfigError(MetagameError):
    """Raised when an archetype definition file fails validation."""

    def __init__(self, message: str, errors: Optional[list[str]] = None, details: Optional[dict] = None):
        self.errors = list(errors or [])
        details = dict(details or {})
        if self.errors:
            details["errors"] = self.errors
        super().__init__(message, code="ARCHETYPE_CONFIG_ERR", details=details)
