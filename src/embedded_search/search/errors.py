"""Exceptions raised by the search index."""


class SearchIndexError(Exception):
    """Base class for user-facing index errors."""


class ConfigurationError(SearchIndexError, ValueError):
    """Raised when fields are registered in an invalid order or shape."""


class DuplicateDocumentError(SearchIndexError):
    """Raised when adding a document id that is already live in the index."""

    def __init__(self, document_id: object) -> None:
        super().__init__(f"Document {document_id!r} is already indexed")
        self.document_id = document_id


class UnknownDocumentError(SearchIndexError, LookupError):
    """Raised when removing a document id that is not live in the index."""

    def __init__(self, document_id: object) -> None:
        super().__init__(f"Document {document_id!r} is not indexed")
        self.document_id = document_id


class InvalidDocumentIdError(SearchIndexError, TypeError):
    """Raised when a document id cannot be used as a dictionary key."""

    def __init__(self, document_id: object) -> None:
        super().__init__(f"Document id {document_id!r} is not hashable")
        self.document_id = document_id
