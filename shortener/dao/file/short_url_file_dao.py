"""Data Access Object (DAO) implementation persisting shortened URLs to an append-only file

The storage file holds one JSON object per line:

    {"uuid": "...", "short_url": "...", "original_url": "...", "user_id": "..."}

On startup the whole file is read back into the in-memory maps of ReverseIndexMixin,
which then serve every read. Writes append a line (flushed and fsync'ed) before the
maps are updated, so memory never holds a record the file does not.

Classes:
    ShortURLFileDAO:
        DAO for storing ShortURLModel in a newline-delimited JSON file.

Example:
    >>> from shortener.dao.file import ShortURLFileDAO

    >>> with ShortURLFileDAO('/tmp/short-urls.json') as dao:
    ...     dao.insert('https://example.com', 'abc123', 'user-1').shortcode
    'abc123'

    >>> with ShortURLFileDAO('/tmp/short-urls.json') as dao:  # restart
    ...     dao.get('abc123')
    'https://example.com'

NOTE:
    - A malformed line aborts initialization with DataStoreError. The service
      refuses to start on a corrupted file rather than silently dropping records.
    - Only one process may use a storage file at a time.
"""

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from beartype import beartype

from shortener.models import ShortURLModel, BatchRequestItem, BatchResponseItem, UserURLModel
from shortener.dao.base import ShortURLBaseDAO
from shortener.dao.memory.mixins import ReverseIndexMixin
from shortener.dao.exceptions import DataStoreError
from shortener.dao.file.helpers import encode_record, decode_record


logger = logging.getLogger(__name__)


class ShortURLFileDAO(ReverseIndexMixin, ShortURLBaseDAO):
    """File-backed Data Access Object (DAO) for managing short URL mappings

    Attributes:
        path (Path):
            Location of the storage file.

    Methods (in addition to ShortURLBaseDAO):
        close() -> None:
            Close the storage file. Safe to call more than once; every other
            operation raises DataStoreError afterwards.
    """

    def __init__(self, path: str | os.PathLike):
        """Open (or create) the storage file and rebuild the in-memory index

        Args:
            path (str | os.PathLike):
                Path to the storage file. Missing parent directories are created.

        Raises:
            DataStoreError:
                If the file can't be opened or contains a malformed line.
        """
        super().__init__()
        self.path = Path(path)
        self._file = None

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, 'ab', buffering=0)  # noqa: SIM115
        except OSError as e:
            raise DataStoreError(f"Can't open storage file {self.path}.") from e

        try:
            self._load()
            self._terminate_last_line()
        except DataStoreError:
            self.close()
            raise

    def _load(self) -> None:
        try:
            with open(self.path, encoding='utf-8') as f:
                for lineno, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    short_url = decode_record(line, lineno)
                    if short_url.shortcode in self._urls or short_url.target in self._reverse:
                        raise DataStoreError(f'Duplicate short URL record in storage file (line {lineno}).')
                    self._index(short_url)
        except (OSError, UnicodeDecodeError) as e:
            raise DataStoreError(f"Can't read storage file {self.path}.") from e

        logger.info('Loaded short URLs from storage file.', extra={'path': str(self.path), 'records': len(self._urls)})

    def _terminate_last_line(self) -> None:
        # Appends must start on a fresh line
        try:
            with open(self.path, 'rb') as f:
                if f.seek(0, os.SEEK_END) == 0:
                    return
                f.seek(-1, os.SEEK_END)
                if f.read(1) == b'\n':
                    return
            self._file.write(b'\n')
            os.fsync(self._file.fileno())
        except OSError as e:
            raise DataStoreError(f"Can't terminate the last line of storage file {self.path}.") from e

        logger.info('Appended missing newline to storage file.', extra={'path': str(self.path)})

    def _ensure_open(self) -> None:
        if self._file is None or self._file.closed:
            raise DataStoreError(f'Storage file {self.path} is closed.')

    def _persist(self, short_url: ShortURLModel) -> None:
        data = memoryview(encode_record(short_url))
        fd = self._file.fileno()
        size = None

        try:
            size = os.fstat(fd).st_size
            while data:
                written = self._file.write(data)
                data = data[written:]
            os.fsync(fd)
        except OSError as e:
            if size is not None:
                self._truncate(size)
            raise DataStoreError(f'Failed to append short URL record to storage file {self.path}.') from e

    def _truncate(self, size: int) -> None:
        # Drop a partially written line so the next startup can still parse the file
        try:
            os.ftruncate(self._file.fileno(), size)
        except OSError:
            logger.exception('Failed to truncate storage file after a failed write.', extra={'path': str(self.path), 'size': size})

    @beartype
    def insert(self, target: str, shortcode: str, user_id: str | None = None, **kwargs) -> ShortURLModel:
        with self._locked(kwargs.get('timeout')):
            self._ensure_open()
            return self._insert(target, shortcode, user_id)

    @beartype
    def get(self, shortcode: str, **kwargs) -> str:
        with self._locked(kwargs.get('timeout')):
            self._ensure_open()
            return self._get(shortcode)

    @beartype
    def insert_batch(self, items: Sequence[BatchRequestItem], user_id: str | None = None, **kwargs) -> list[BatchResponseItem]:
        with self._locked(kwargs.get('timeout')):
            self._ensure_open()
            return self._insert_batch(items, user_id)

    @beartype
    def list_by_owner(self, user_id: str, **kwargs) -> list[UserURLModel]:
        with self._locked(kwargs.get('timeout')):
            self._ensure_open()
            return self._list_by_owner(user_id)

    def ping(self, **kwargs) -> bool:
        with self._locked(kwargs.get('timeout')):
            self._ensure_open()
            try:
                os.fstat(self._file.fileno())
            except OSError as e:
                raise DataStoreError(f"Can't stat storage file {self.path}.") from e
        return True

    def close(self) -> None:
        with self._lock:
            if self._file is not None and not self._file.closed:
                self._file.close()
                logger.debug('Closed storage file.', extra={'path': str(self.path)})
