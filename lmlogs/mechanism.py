"""Core error types for :mod:`lmlogs`."""


class LMLogsException(Exception):
    """Base class for all lmlogs exceptions."""

    def __init__(self, exception: Exception, source: str = "Unknown", note: str = ""):
        super().__init__(f"<{source}> {note}: {exception}")
        self.exception = exception
        self.source = source
        self.note = note

    def __str__(self):
        return f"<{self.source}> {self.note}: {self.exception}"


class ConfigurationError(LMLogsException):
    """Raised when the exporter configuration is unusable."""


class EncodingError(LMLogsException):
    """Raised when a log record cannot be rendered as JSON."""


class TransportError(LMLogsException):
    """Raised when an HTTP request could not be sent or completed."""
