"""Flask application factory

Example:
    >>> from shortener.dao.memory import ShortURLMemoryDAO
    >>> from shortener.utils.config import ServiceConfig
    >>> app = create_app(ServiceConfig(), ShortURLMemoryDAO())
    >>> app.test_client().post('/', data='https://example.com').status_code
    201
"""

import logging
import time
from datetime import timedelta

from flask import Flask, Response, g, request

from shortener.constants import Cookie
from shortener.dao.base import ShortURLBaseDAO
from shortener.utils.config import ServiceConfig
from shortener.web.auth import ensure_user_identity
from shortener.web.compression import GzipRequestMiddleware, compress_response
from shortener.web.routes import bp
from shortener.web.constants import BASE_URL_CONFIG, DAO_EXTENSION, REQUEST_TIMEOUT_CONFIG


logger = logging.getLogger(__name__)


def _start_timer() -> None:
    g.started_at = time.perf_counter()


def _log_request(response: Response) -> Response:
    started_at = g.get('started_at')
    duration_ms = round((time.perf_counter() - started_at) * 1000, 3) if started_at is not None else None
    logger.info(
        'Handled request.',
        extra={
            'method': request.method,
            'path': request.path,
            'status': response.status_code,
            'size': response.content_length,
            'durationMs': duration_ms,
        },
    )
    return response


def create_app(config: ServiceConfig, dao: ShortURLBaseDAO) -> Flask:
    """Build the Flask application serving `dao`

    The DAO is chosen once by the caller (see shortener.dao.factory) and is
    never swapped while the application runs.

    Args:
        config (ServiceConfig):
            Parsed service configuration.
        dao (ShortURLBaseDAO):
            Storage backend shared by all requests.

    Returns:
        Flask: the WSGI application.
    """
    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.secret_key,
        SESSION_COOKIE_NAME=Cookie.NAME,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        SESSION_COOKIE_SECURE=config.base_url.startswith('https://'),
        PERMANENT_SESSION_LIFETIME=timedelta(days=Cookie.LIFETIME_DAYS),
    )
    app.config[BASE_URL_CONFIG] = config.base_url
    app.config[REQUEST_TIMEOUT_CONFIG] = config.request_timeout
    app.json.sort_keys = False
    app.extensions[DAO_EXTENSION] = dao

    app.before_request(_start_timer)
    app.before_request(ensure_user_identity)
    app.after_request(_log_request)
    # Runs before _log_request, so the logged size is the size sent
    app.after_request(compress_response)
    app.register_blueprint(bp)
    app.wsgi_app = GzipRequestMiddleware(app.wsgi_app)

    return app
