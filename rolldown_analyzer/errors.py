"""
Exception types raised by the analyzer.

Only missing or unreadable inputs are fatal. Everything that goes wrong while
folding individual log lines is tolerated and never reaches the caller, unless
strict mode is switched on for the reducer.
"""


class AnalyzerError(Exception):
    """Base class for every error raised by rolldown_analyzer."""


class ConfigurationError(AnalyzerError):
    """Required configuration (CLI argument or environment variable) is missing."""


class AnalyzerInputError(AnalyzerError):
    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{reason}: {self.path}")


class MetadataError(AnalyzerInputError):
    """The build metadata file is missing or is not a JSON object."""


class LogSourceError(AnalyzerInputError):
    """The build event log cannot be opened or read."""


class EventIntegrityError(AnalyzerError):
    """Raised in strict mode when the event log references unknown calls or chunks."""
