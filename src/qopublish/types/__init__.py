"""
Shared types for qopublish: run states, the run report and exceptions.
"""

from .states import BatchReport, BatchState, FileRecord, FileState


# Exceptions
class PublishPipelineError(Exception):
    """Base exception for everything that aborts a publish run."""

    pass


class ConfigError(PublishPipelineError):
    """Raised when a configuration value cannot be parsed or is invalid."""

    pass


class ConversionError(PublishPipelineError):
    """Raised when the notebook converter fails for a file.

    Carries the command and whatever the converter wrote to stderr.
    """

    def __init__(
        self, message, filename=None, command=None, returncode=None, stderr=""
    ):
        super().__init__(message)
        self.filename = filename
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class PublishError(PublishPipelineError):
    """Raised when copying outputs to a destination fails."""

    def __init__(self, message, source=None, destination=None):
        super().__init__(message)
        self.source = source
        self.destination = destination


__all__ = [
    "BatchReport",
    "BatchState",
    "FileRecord",
    "FileState",
    "PublishPipelineError",
    "ConfigError",
    "ConversionError",
    "PublishError",
]
