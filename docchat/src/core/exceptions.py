"""
DocChat - Exceptions
=====================
Error taxonomy shared by every component.  The HTTP layer maps these
to status codes; nothing else in the package catches them except the
two documented recovery points (collection init at startup and the
query-path search fallback).
"""


class DocChatError(Exception):
    """Base exception for all DocChat errors."""
    pass


class InvalidArgumentError(DocChatError, ValueError):
    """
    Bad or missing input.

    Raised when:
    - Text to embed is ``None``, empty, or whitespace only
    - An uploaded file has no filename
    """
    pass


class UnsupportedFormatError(DocChatError):
    """A file extension the text extractor does not handle."""

    def __init__(self, message: str, extension: str = None):
        super().__init__(message)
        self.extension = extension


class EmbeddingError(DocChatError):
    """
    The embedding model call failed.

    Always raised ``from`` the original exception so the cause stays
    attached.
    """
    pass


class VectorStoreError(DocChatError):
    """
    A vector store call failed or returned an unexpected status.

    ``status_code`` is ``None`` when no HTTP response was received.
    """

    def __init__(self, message: str, status_code: int = None, body: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class StoreUnavailableError(VectorStoreError):
    """Collection creation or search could not be completed."""
    pass


class StoreWriteError(VectorStoreError):
    """A point upsert was rejected or never reached the store."""
    pass
