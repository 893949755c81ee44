"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (in-memory maps, an append-only
file or PostgreSQL).

Responsibilities:
    - Provide an interface for inserting and retrieving ShortURLModel objects.
    - Standardize error handling across multiple data store implementations.
    - Enforce a consistent API for use by the HTTP handlers.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortener.dao.memory import ShortURLMemoryDAO

        >>> dao = ShortURLMemoryDAO()

        >>> short_url = dao.insert('https://example.com/blog/article-123', 'a1b2c3', 'user-1')
        >>> short_url.shortcode
        'a1b2c3'

        >>> dao.get('a1b2c3')
        'https://example.com/blog/article-123'

NOTE:
    - Mappings are immutable. The DAO does not provide an interface to update or delete entries.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from shortener.models import ShortURLModel, BatchRequestItem, BatchResponseItem, UserURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Every method accepts an optional `timeout` keyword argument (seconds). What the
    deadline bounds depends on the data store: the in-memory and file DAOs only bound
    the wait for their lock (a started fsync is never interrupted), while the
    PostgreSQL DAO applies it as the transaction's statement_timeout. An elapsed
    deadline raises DataStoreError.

    Methods:
        insert(target: str, shortcode: str, user_id: str | None, **kwargs) -> ShortURLModel:
            Shorten `target` under the proposed `shortcode`.
            Raises ShortURLAlreadyExistsError if `target` was already shortened.
            Raises DataStoreError on I/O, encoding or query failure.

        get(shortcode: str, **kwargs) -> str:
            Retrieve the original URL by shortcode.
            Raises ShortURLNotFoundError if the shortcode does not exist.
            Raises DataStoreError on read failure.

        insert_batch(items: Sequence[BatchRequestItem], user_id: str | None, **kwargs) -> list[BatchResponseItem]:
            Shorten many URLs at once, one response per request item in input order.
            Raises DataStoreError on failure.

        list_by_owner(user_id: str, **kwargs) -> list[UserURLModel]:
            List every mapping created by `user_id`, in no particular order.
            Raises DataStoreError on read failure.

        ping(**kwargs) -> bool:
            Healthcheck the data store.
            Raises DataStoreError if the data store is unavailable.

        close() -> None:
            Release the data store's resources.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLFileDAO or
        ShortURLPostgresDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def insert(self, target: str, shortcode: str, user_id: str | None = None, **kwargs) -> ShortURLModel:
        """Shorten an original URL under a proposed shortcode.

        The first writer of an original URL wins: a later submission of the same
        URL does not create a second record, regardless of the proposed shortcode.

        Args:
            target (str):
                The original long URL.

            shortcode (str):
                The proposed shortcode for the new mapping.

            user_id (str | None):
                Anonymous identity of the submitting user.

            **kwargs:
                Additional keyword arguments, used by data store (e.g. `timeout`).

        Returns:
            ShortURLModel: the newly created mapping.

        Raises:
            ShortURLAlreadyExistsError:
                If `target` is already shortened. The existing mapping is attached.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> str:
        """Retrieve the original URL of a shortcode.

        Args:
            shortcode (str):
                The shortcode to look up.

            **kwargs:
                Additional keyword arguments, used by data store (e.g. `timeout`).

        Returns:
            str: The original long URL.

        Raises:
            ShortURLNotFoundError:
                If no mapping with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert_batch(self, items: Sequence[BatchRequestItem], user_id: str | None = None, **kwargs) -> list[BatchResponseItem]:
        """Shorten a batch of original URLs.

        Each item follows the same first-writer-wins rule as insert(). Items that
        repeat an URL already stored (or repeated earlier in the same batch)
        receive the existing shortcode.

        Args:
            items (Sequence[BatchRequestItem]):
                Request items, each with a caller-supplied correlation ID.

            user_id (str | None):
                Anonymous identity of the submitting user.

            **kwargs:
                Additional keyword arguments, used by data store (e.g. `timeout`).

        Returns:
            list[BatchResponseItem]: exactly one response per request item, in input order.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_by_owner(self, user_id: str, **kwargs) -> list[UserURLModel]:
        """List every mapping created by a user.

        Args:
            user_id (str):
                Anonymous identity of the user.

            **kwargs:
                Additional keyword arguments, used by data store (e.g. `timeout`).

        Returns:
            list[UserURLModel]: the user's mappings, in no particular order.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def ping(self, **kwargs) -> bool:
        """Healthcheck the data store.

        Returns:
            bool: True if the data store is available.

        Raises:
            DataStoreError:
                If the data store is unavailable.
        """
        pass

    def close(self) -> None:
        """Release data store resources (no-op by default)."""
        pass

    def __enter__(self) -> 'ShortURLBaseDAO':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
