"""HTTP response helpers shared by the route handlers.

JSON errors follow one envelope:

    {"status_code": 400, "error": "Bad Request", "message": "Invalid URL format"}

Functions:
    response_json(data, status) -> Response
    response_text(text, status) -> Response
    response_error(status, message, error_code) -> Response
    response_400(message, error_code) -> Response
    response_500() -> Response
    guarantee_500_response(view) -> view
        Decorator: turn any unexpected exception into a logged, generic 500 response
"""

import functools
import logging
from collections.abc import Callable
from http import HTTPStatus

from flask import Response, jsonify

from shortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from shortener.dao.exceptions import DataStoreError
from shortener.types import JSONBody
from shortener.web.constants import DATA_STORE_ERROR


logger = logging.getLogger(__name__)


def response_json(data: JSONBody, status: int = HTTPStatus.OK) -> Response:
    response = jsonify(data)
    response.status_code = status
    return response


def response_text(text: str, status: int = HTTPStatus.OK) -> Response:
    return Response(text, status=status, mimetype='text/plain')


def response_error(status: int, message: str = '', error_code: str | None = None) -> Response:
    body = {
        'status_code': int(status),
        'error': HTTPStatus(status).phrase,
        'message': message,
    }
    if error_code:
        body['errorCode'] = error_code
    return response_json(body, status)


def response_400(message: str = '', error_code: str | None = None) -> Response:
    return response_error(HTTPStatus.BAD_REQUEST, message, error_code)


def response_500() -> Response:
    # Internal details stay in the logs
    return response_error(HTTPStatus.INTERNAL_SERVER_ERROR)


def guarantee_500_response(view: Callable[..., Response]) -> Callable[..., Response]:
    """Decorator: answer 500 when a view raises an unexpected exception

    DataStoreError is logged with its event code; anything else (e.g. an
    unavailable random source) is logged as an unknown internal error. The
    process keeps serving other requests either way.

    Example:
        >>> @bp.get('/ping')
        ... @guarantee_500_response
        ... def ping():
        ...     dao().ping()
        ...     return response_text('')
    """

    @functools.wraps(view)
    def wrapper(*args, **kwargs) -> Response:
        try:
            return view(*args, **kwargs)
        except DataStoreError:
            logger.exception('Data store error. Responding with 500.', extra={'view': view.__name__, 'event': DATA_STORE_ERROR})
            return response_500()
        except Exception:
            logger.exception(
                'Unexpected error. Responding with 500.',
                extra={'view': view.__name__, 'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return response_500()

    return wrapper
