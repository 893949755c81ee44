"""Data Access Object (DAO) implementation keeping shortened URLs in process memory

Mappings live for the lifetime of the process and are lost on restart.

Classes:
    ShortURLMemoryDAO:
        DAO for storing and retrieving ShortURLModel in two lock-guarded dictionaries.

Example:
    >>> from shortener.dao.memory import ShortURLMemoryDAO

    >>> dao = ShortURLMemoryDAO()
    >>> dao.insert('https://example.com', 'abc123', 'user-1').shortcode
    'abc123'
    >>> dao.insert('https://example.com', 'zzz999', 'user-1')
    Traceback (most recent call last):
        ...
    shortener.dao.exceptions.ShortURLAlreadyExistsError: URL 'https://example.com' is already shortened to 'abc123'.
    >>> dao.get('abc123')
    'https://example.com'
"""

from collections.abc import Sequence

from beartype import beartype

from shortener.models import ShortURLModel, BatchRequestItem, BatchResponseItem, UserURLModel
from shortener.dao.base import ShortURLBaseDAO
from shortener.dao.memory.mixins import ReverseIndexMixin


class ShortURLMemoryDAO(ReverseIndexMixin, ShortURLBaseDAO):
    """In-memory Data Access Object (DAO) for managing short URL mappings

    Every method holds the mixin's lock for its whole duration. The optional
    `timeout` keyword argument bounds the wait for that lock.
    """

    @beartype
    def insert(self, target: str, shortcode: str, user_id: str | None = None, **kwargs) -> ShortURLModel:
        with self._locked(kwargs.get('timeout')):
            return self._insert(target, shortcode, user_id)

    @beartype
    def get(self, shortcode: str, **kwargs) -> str:
        with self._locked(kwargs.get('timeout')):
            return self._get(shortcode)

    @beartype
    def insert_batch(self, items: Sequence[BatchRequestItem], user_id: str | None = None, **kwargs) -> list[BatchResponseItem]:
        with self._locked(kwargs.get('timeout')):
            return self._insert_batch(items, user_id)

    @beartype
    def list_by_owner(self, user_id: str, **kwargs) -> list[UserURLModel]:
        with self._locked(kwargs.get('timeout')):
            return self._list_by_owner(user_id)

    def ping(self, **kwargs) -> bool:
        return True
