class WordmineError(Exception):
    """Base class for errors raised by the vocabulary core."""


class ValidationError(WordmineError, ValueError):
    """Bad input (grade out of range, empty text). Raised before any write."""


class TokenizationError(WordmineError):
    """The morphological analyser is unavailable or returned malformed output."""


class ConflictError(WordmineError):
    """A unique constraint was violated.

    Ingestion relies on atomic upserts, so this only surfaces if the storage
    layer reports an integrity violation the upsert did not absorb.
    """


class StorageError(WordmineError):
    """A transaction could not be started, executed or committed.

    Nothing from the failed operation is committed, so it is safe to retry.
    """


class NotFoundError(WordmineError, LookupError):
    """No word or sentence with the requested id."""
