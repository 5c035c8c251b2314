"""Exception hierarchy for the demo player."""

from typing import Any, Dict, Optional


class DemoPlayerError(Exception):
    """Base exception for all demo player errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ScriptNotFoundError(DemoPlayerError):
    """The demo script file does not exist or is not a file."""


class CommandExecutionError(DemoPlayerError):
    """A script line failed while being executed."""
