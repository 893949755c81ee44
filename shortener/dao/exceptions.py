"""Exceptions related to Data Access Objects (DAO) operations.

Together with a normal return value these exceptions are the complete outcome
vocabulary of the storage layer:

    success         -> return value
    conflict        -> ShortURLAlreadyExistsError (carries the existing record)
    not-found       -> ShortURLNotFoundError
    internal error  -> DataStoreError

Example:
    >>> from shortener.dao.exceptions import ShortURLAlreadyExistsError
    >>> try:
    ...     dao.insert('https://example.com', 'zzz999', 'user-1')
    ... except ShortURLAlreadyExistsError as e:
    ...     print(e.short_url.shortcode)
    abc123
"""

from shortener.exceptions import ShortenerError
from shortener.models import ShortURLModel


class DAOError(ShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortURLNotFoundError(DAOError):
    """Raised when a shortcode is not found in the data store."""

    error_code = 'dao:short_url_not_found_error'


class ShortURLAlreadyExistsError(DAOError):
    """Raised when the original URL has already been shortened.

    This is an expected outcome (first writer wins), not a failure. The record
    that won is available as `short_url`.
    """

    error_code = 'dao:short_url_already_exists_error'

    def __init__(self, message: str, short_url: ShortURLModel):
        super().__init__(message)
        self.short_url = short_url


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include I/O failures, malformed persisted data, query failures and timeouts.
    """

    error_code = 'dao:data_store_error'
