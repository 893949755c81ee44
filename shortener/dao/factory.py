"""Select and construct the storage backend once, at startup.

Functions:
    create_short_url_dao(config: ServiceConfig) -> ShortURLBaseDAO
        Build the DAO for `config.active_backend`:
            - 'postgres' when a database DSN is configured
            - 'file' when a file storage path is configured
            - 'memory' otherwise

Example:
    >>> from shortener.utils.config import load_config
    >>> dao = create_short_url_dao(load_config(['-f', '/tmp/short-urls.json']))
    >>> type(dao).__name__
    'ShortURLFileDAO'
"""

import logging

from shortener.constants import Backend
from shortener.dao.base import ShortURLBaseDAO
from shortener.utils.config import ServiceConfig


logger = logging.getLogger(__name__)


def create_short_url_dao(config: ServiceConfig) -> ShortURLBaseDAO:
    """Construct the configured ShortURL DAO

    Args:
        config (ServiceConfig):
            Parsed service configuration.

    Returns:
        ShortURLBaseDAO: the storage backend used for the lifetime of the process.

    Raises:
        DataStoreError:
            If the backend can't be initialized (unreadable or corrupted storage
            file, unreachable database, schema creation failure).
    """
    backend = config.active_backend
    logger.info('Initializing storage backend.', extra={'backend': str(backend)})

    # NOTE: backends are imported on demand
    if backend is Backend.POSTGRES:
        from shortener.dao.postgres import ShortURLPostgresDAO

        return ShortURLPostgresDAO(postgres_dsn=config.database_dsn)

    if backend is Backend.FILE:
        from shortener.dao.file import ShortURLFileDAO

        return ShortURLFileDAO(config.file_storage_path)

    from shortener.dao.memory import ShortURLMemoryDAO

    return ShortURLMemoryDAO()
