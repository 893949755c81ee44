"""Reverse-index mixin shared by the map-backed DAOs (in-memory and file).

Responsibilities:
    - Own the primary map (shortcode -> ShortURLModel) and its reverse index (target -> shortcode)
    - Serialize every access to both maps with a single lock
    - Decide first-writer-wins before a shortcode is ever allocated

Classes:
    - ReverseIndexMixin: maps, lock and the check-then-act logic of the map-backed DAOs.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLMemoryDAO(ReverseIndexMixin, ShortURLBaseDAO):
        ...     def get(self, shortcode, **kwargs):
        ...         with self._locked(kwargs.get('timeout')):
        ...             return self._get(shortcode)
"""

import threading
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from shortener.models import ShortURLModel, BatchRequestItem, BatchResponseItem, UserURLModel
from shortener.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError, ShortURLNotFoundError
from shortener.utils.shortener import generate_shortcode


class ReverseIndexMixin:
    """Mixin providing the lock-guarded primary map and reverse index.

    All underscore helpers below (except `_locked`) assume the caller already holds
    the lock, so that "check reverse index, decide new-vs-conflict, persist, update
    both maps" always runs as one guarded unit.

    Attributes:
        _urls (dict[str, ShortURLModel]):
            Primary map, shortcode -> record.

        _reverse (dict[str, str]):
            Reverse index, original URL -> shortcode.

    Methods:
        _persist(short_url: ShortURLModel) -> None:
            Hook called before a new record is indexed. No-op by default;
            durable DAOs override it and raise DataStoreError on failure.
    """

    def __init__(self):
        self._urls: dict[str, ShortURLModel] = {}
        self._reverse: dict[str, str] = {}
        self._lock = threading.Lock()

    @contextmanager
    def _locked(self, timeout: float | None = None) -> Iterator[None]:
        """Hold the maps' lock, waiting at most `timeout` seconds for it

        Raises:
            DataStoreError:
                If the lock could not be acquired before the deadline.
        """
        acquired = self._lock.acquire() if timeout is None else self._lock.acquire(timeout=max(timeout, 0))
        if not acquired:
            raise DataStoreError(f'Timed out after {timeout}s waiting for the data store lock.')
        try:
            yield
        finally:
            self._lock.release()

    def _persist(self, short_url: ShortURLModel) -> None:
        pass

    def _index(self, short_url: ShortURLModel) -> None:
        self._urls[short_url.shortcode] = short_url
        self._reverse[short_url.target] = short_url.shortcode

    def _lookup(self, target: str) -> ShortURLModel | None:
        shortcode = self._reverse.get(target)
        return None if shortcode is None else self._urls[shortcode]

    def _unused_shortcode(self) -> str:
        shortcode = generate_shortcode()
        while shortcode in self._urls:
            shortcode = generate_shortcode()
        return shortcode

    def _insert(self, target: str, shortcode: str, user_id: str | None) -> ShortURLModel:
        existing = self._lookup(target)
        if existing is not None:
            raise ShortURLAlreadyExistsError(
                f"URL '{target}' is already shortened to '{existing.shortcode}'.",
                short_url=existing,
            )
        if shortcode in self._urls:
            raise DataStoreError(f"Shortcode '{shortcode}' is already taken by another URL.")

        short_url = ShortURLModel(uuid=str(uuid.uuid4()), shortcode=shortcode, target=target, user_id=user_id)
        self._persist(short_url)
        self._index(short_url)
        return short_url

    def _insert_batch(self, items: Sequence[BatchRequestItem], user_id: str | None) -> list[BatchResponseItem]:
        # NOTE: entries stored before a failing _persist() stay stored (no rollback)
        responses = []
        for item in items:
            short_url = self._lookup(item.target)
            if short_url is None:
                short_url = self._insert(item.target, self._unused_shortcode(), user_id)
            responses.append(BatchResponseItem(correlation_id=item.correlation_id, shortcode=short_url.shortcode))
        return responses

    def _get(self, shortcode: str) -> str:
        short_url = self._urls.get(shortcode)
        if short_url is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return short_url.target

    def _list_by_owner(self, user_id: str) -> list[UserURLModel]:
        return [UserURLModel(shortcode=u.shortcode, target=u.target) for u in self._urls.values() if u.user_id == user_id]
