"""
Application errors for clean API and tool error handling.

Use ServiceUnavailableError when a dependency (the LLM) is misconfigured or
unreachable so the API can return 503 with a user-facing message.
CorpusError and its subclasses describe why a corpus operation could not be
completed; the tool layer turns them into {"error": message} results.
"""


class ServiceUnavailableError(Exception):
    """Raised when a required service (e.g. the chat model) is unavailable or misconfigured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CorpusError(Exception):
    """Base class for failures of a read-only corpus operation."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class OutsideRootError(CorpusError):
    """Requested path resolves outside the corpus root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path is outside the allowed directory: {path}")


class DocumentNotFoundError(CorpusError):
    """Requested file or directory does not exist or cannot be read."""


class NotADirectoryCorpusError(CorpusError):
    """A directory operation was requested on a file."""


class UnsupportedDocumentError(CorpusError):
    """File exists but its extension is not a document extension."""


class InvalidPatternError(CorpusError):
    """Search pattern is not a valid regular expression."""
