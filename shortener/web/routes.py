"""Route handlers of the URL shortener

Each handler validates its input, calls exactly one storage method and maps
the storage outcome to an HTTP response:

    POST /                   shorten a URL sent as plain text
    GET  /<shortcode>        redirect to the original URL
    POST /api/shorten        shorten a URL sent as JSON
    POST /api/shorten/batch  shorten many URLs sent as JSON
    GET  /api/user/urls      list the current user's short URLs
    GET  /ping               healthcheck the storage backend
"""

import logging
from http import HTTPStatus

from flask import Blueprint, Response, current_app, redirect, request

from shortener.models import BatchRequestItem, ShortURLModel
from shortener.types import ShortURLRecord
from shortener.dao.base import ShortURLBaseDAO
from shortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError
from shortener.utils import generate_shortcode, get_short_url, is_valid_url
from shortener.web.auth import current_user_id
from shortener.web.responses import (
    guarantee_500_response,
    response_400,
    response_json,
    response_text,
)
from shortener.web.constants import (
    BASE_URL_CONFIG,
    BATCH_SHORTENED,
    DAO_EXTENSION,
    INVALID_REQUEST,
    REDIRECT_SUCCESS,
    REQUEST_TIMEOUT_CONFIG,
    SHORT_URL_NOT_FOUND,
    URL_ALREADY_SHORTENED,
    URL_SHORTENED,
)


logger = logging.getLogger(__name__)

bp = Blueprint('shortener', __name__)


def dao() -> ShortURLBaseDAO:
    return current_app.extensions[DAO_EXTENSION]


def timeout() -> float:
    return current_app.config[REQUEST_TIMEOUT_CONFIG]


def short_url_of(shortcode: str) -> str:
    return get_short_url(current_app.config[BASE_URL_CONFIG], shortcode)


def render_record(short_url: ShortURLModel) -> ShortURLRecord:
    record = short_url.to_record()
    record['short_url'] = short_url_of(short_url.shortcode)
    return record


def invalid(message: str) -> Response:
    logger.info('Invalid request. Responding with 400.', extra={'reason': message, 'event': INVALID_REQUEST})
    return response_400(message=message, error_code=INVALID_REQUEST)


def is_json_request() -> bool:
    return request.mimetype == 'application/json'


@bp.post('/')
@guarantee_500_response
def shorten_text() -> Response:
    """Shorten the URL sent as the plain text request body

    HTTP responses:
        201: text body with the new short URL
        409: text body with the short URL the original URL already has
        400: empty body or invalid URL
        500: internal server error
    """
    target = request.get_data(as_text=True).strip()
    if not target:
        return invalid('Empty URL')
    if not is_valid_url(target):
        return invalid('Invalid URL format')

    try:
        short_url = dao().insert(target, generate_shortcode(), current_user_id(), timeout=timeout())
    except ShortURLAlreadyExistsError as e:
        logger.info(
            'URL already shortened. Responding with 409.',
            extra={'shortcode': e.short_url.shortcode, 'event': URL_ALREADY_SHORTENED},
        )
        return response_text(short_url_of(e.short_url.shortcode), HTTPStatus.CONFLICT)

    logger.info('Shortened URL. Responding with 201.', extra={'shortcode': short_url.shortcode, 'event': URL_SHORTENED})
    return response_text(short_url_of(short_url.shortcode), HTTPStatus.CREATED)


@bp.get('/<shortcode>')
@guarantee_500_response
def redirect_to_target(shortcode: str) -> Response:
    """Redirect the client to the original URL of `shortcode`

    HTTP responses:
        307: Location header set to the original URL
        400: unknown shortcode
        500: internal server error
    """
    shortcode = shortcode.strip()
    if not shortcode:
        return invalid('Empty ID')

    try:
        target = dao().get(shortcode, timeout=timeout())
    except ShortURLNotFoundError:
        logger.info('Short URL not found. Responding with 400.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_400(message="provided short URL ID doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    logger.info('Redirecting client to target URL. Responding with 307.', extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS})
    return redirect(target, code=HTTPStatus.TEMPORARY_REDIRECT)


@bp.post('/api/shorten')
@guarantee_500_response
def shorten_json() -> Response:
    """Shorten the URL sent as `{"url": "..."}`

    HTTP responses:
        201: the new record, `short_url` rendered as a full URL
        409: the existing record of the original URL
        400: wrong Content-Type, invalid JSON, empty or invalid URL
        500: internal server error
    """
    if not is_json_request():
        return invalid('Incorrect Content-Type header')

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return invalid('Invalid JSON format')

    target = body.get('url')
    if not isinstance(target, str) or not target.strip():
        return invalid('Empty URL')
    target = target.strip()
    if not is_valid_url(target):
        return invalid('Invalid URL format')

    try:
        short_url = dao().insert(target, generate_shortcode(), current_user_id(), timeout=timeout())
    except ShortURLAlreadyExistsError as e:
        logger.info(
            'URL already shortened. Responding with 409.',
            extra={'shortcode': e.short_url.shortcode, 'event': URL_ALREADY_SHORTENED},
        )
        return response_json(render_record(e.short_url), HTTPStatus.CONFLICT)

    logger.info('Shortened URL. Responding with 201.', extra={'shortcode': short_url.shortcode, 'event': URL_SHORTENED})
    return response_json(render_record(short_url), HTTPStatus.CREATED)


@bp.post('/api/shorten/batch')
@guarantee_500_response
def shorten_batch() -> Response:
    """Shorten every `{"correlation_id": "...", "original_url": "..."}` of a JSON list

    HTTP responses:
        201: list of `{"correlation_id": "...", "short_url": "..."}` in request order
        400: wrong Content-Type, invalid JSON, empty batch or invalid item
        500: internal server error
    """
    if not is_json_request():
        return invalid('Incorrect Content-Type header')

    body = request.get_json(silent=True)
    if not isinstance(body, list):
        return invalid('Invalid JSON format')
    if not body:
        return invalid('Empty batch')

    items = []
    for entry in body:
        if not isinstance(entry, dict):
            return invalid('Invalid JSON format')
        correlation_id, target = entry.get('correlation_id'), entry.get('original_url')
        if not isinstance(correlation_id, str) or not correlation_id or not isinstance(target, str) or not target:
            return invalid('original_url or correlation_id cannot be empty')
        if not is_valid_url(target):
            return invalid('Invalid URL format')
        items.append(BatchRequestItem(correlation_id=correlation_id, target=target))

    responses = dao().insert_batch(items, current_user_id(), timeout=timeout())

    logger.info('Shortened URL batch. Responding with 201.', extra={'size': len(items), 'event': BATCH_SHORTENED})
    return response_json(
        [{'correlation_id': r.correlation_id, 'short_url': short_url_of(r.shortcode)} for r in responses],
        HTTPStatus.CREATED,
    )


@bp.get('/api/user/urls')
@guarantee_500_response
def list_user_urls() -> Response:
    """List the short URLs created by the current user

    HTTP responses:
        200: list of `{"short_url": "...", "original_url": "..."}`
        204: the user has no short URLs
        500: internal server error
    """
    urls = dao().list_by_owner(current_user_id(), timeout=timeout())
    if not urls:
        return response_text('', HTTPStatus.NO_CONTENT)

    return response_json([{'short_url': short_url_of(u.shortcode), 'original_url': u.target} for u in urls])


@bp.get('/ping')
@guarantee_500_response
def ping() -> Response:
    """Healthcheck the storage backend (200 if healthy, 500 otherwise)"""
    dao().ping(timeout=timeout())
    return response_text('OK')
