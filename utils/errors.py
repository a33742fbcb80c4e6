# utils/errors.py


class BibleApiError(Exception):
    """Base class for errors reported back to API callers."""
    status_code = 500


class NotFoundError(BibleApiError):
    """Translation, book, chapter or verse could not be resolved."""
    status_code = 404


class InvalidInputError(BibleApiError):
    """A required field is missing or blank."""
    status_code = 400


class InvalidApiKeyError(BibleApiError):
    """The API key is missing or unknown."""
    status_code = 401

    def __init__(self, message='Invalid or missing API key'):
        super().__init__(message)


class StorageError(BibleApiError):
    """A persisted document could not be read or written."""
    status_code = 500
