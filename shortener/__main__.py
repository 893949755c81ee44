"""Command line entry point of the URL shortening service

Usage:
    shortener [-a host:port] [-b base_url] [-f storage_file] [-d dsn] [-k key] [-t timeout]

Exit status:
    0: server stopped normally
    1: bad configuration or storage backend failed to start

NOTE:
    The server started here is Werkzeug's threaded development server. It is
    meant for local runs and tests. In production serve the application built by
    `shortener.web.create_app(config, dao)` with a WSGI server instead (a single
    worker process when the file backend is used).
"""

import logging
import sys
from collections.abc import Sequence

from shortener.dao.exceptions import DataStoreError
from shortener.dao.factory import create_short_url_dao
from shortener.exceptions import BadConfigurationError
from shortener.utils import initialize_logging, load_config
from shortener.web import create_app


logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    initialize_logging()

    try:
        config = load_config(argv)
    except BadConfigurationError as e:
        logger.error('Failed to load configuration.', extra={'error': str(e), 'errorCode': e.error_code})
        return 1

    try:
        dao = create_short_url_dao(config)
    except DataStoreError as e:
        logger.error('Failed to initialize storage backend.', extra={'error': str(e), 'errorCode': e.error_code})
        return 1

    try:
        app = create_app(config, dao)
        logger.info(
            'Starting HTTP server.',
            extra={'serverAddress': config.server_address, 'baseUrl': config.base_url, 'backend': str(config.active_backend)},
        )
        app.run(host=config.host, port=config.port, threaded=True)
    finally:
        dao.close()
        logger.info('Storage backend closed.')

    return 0


if __name__ == '__main__':
    sys.exit(main())
