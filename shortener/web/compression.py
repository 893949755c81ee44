"""gzip support for request and response bodies

Requests whose Content-Encoding mentions gzip are inflated before Flask
reads them. Responses are deflated when the client's Accept-Encoding
mentions gzip.

Example:
    >>> app.wsgi_app = GzipRequestMiddleware(app.wsgi_app)
    >>> app.after_request(compress_response)
"""

import gzip
import io
import json
import logging
import zlib
from http import HTTPStatus

from flask import Response, request
from werkzeug.wrappers import Response as WSGIResponse
from werkzeug.wsgi import get_input_stream

from shortener.web.constants import INVALID_REQUEST


logger = logging.getLogger(__name__)

GZIP = 'gzip'
BAD_GZIP_MESSAGE = 'bad gzip request'


def _mentions_gzip(header: str | None) -> bool:
    return GZIP in (header or '').lower()


class GzipRequestMiddleware:
    """WSGI middleware inflating gzip-encoded request bodies

    The inflated body replaces `wsgi.input`, CONTENT_LENGTH is updated and the
    Content-Encoding header is dropped, so the application sees a plain body.
    A body that is not valid gzip is answered with a JSON 400 and never reaches
    the application.
    """

    def __init__(self, wsgi_app):
        self.wsgi_app = wsgi_app

    def __call__(self, environ, start_response):
        if not _mentions_gzip(environ.get('HTTP_CONTENT_ENCODING')):
            return self.wsgi_app(environ, start_response)

        try:
            body = gzip.decompress(get_input_stream(environ).read())
        except (OSError, EOFError, zlib.error) as e:
            logger.info(
                'Undecodable gzip request body. Responding with 400.',
                extra={'path': environ.get('PATH_INFO'), 'reason': str(e), 'event': INVALID_REQUEST},
            )
            return self._bad_request()(environ, start_response)

        environ['wsgi.input'] = io.BytesIO(body)
        environ['CONTENT_LENGTH'] = str(len(body))
        environ.pop('HTTP_CONTENT_ENCODING', None)
        return self.wsgi_app(environ, start_response)

    @staticmethod
    def _bad_request() -> WSGIResponse:
        # Runs outside the Flask app context, so no jsonify here
        body = {
            'status_code': int(HTTPStatus.BAD_REQUEST),
            'error': HTTPStatus.BAD_REQUEST.phrase,
            'message': BAD_GZIP_MESSAGE,
        }
        return WSGIResponse(json.dumps(body), status=HTTPStatus.BAD_REQUEST, mimetype='application/json')


def compress_response(response: Response) -> Response:
    """after_request hook gzipping the body for clients that accept it"""
    response.vary.add('Accept-Encoding')

    if not _mentions_gzip(request.headers.get('Accept-Encoding')):
        return response
    if response.direct_passthrough or response.is_streamed or 'Content-Encoding' in response.headers:
        return response
    if response.status_code < 200 or response.status_code in (HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED):
        return response

    response.set_data(gzip.compress(response.get_data()))
    response.headers['Content-Encoding'] = GZIP
    return response
