"""Unit tests for the Flask application factory and the anonymous identity

Test coverage includes:

1. Application setup
   - Ensures the DAO and the request deadline are registered on the app.

2. Anonymous identity cookie
   - Ensures first-time visitors receive a signed `user_cookie` (HttpOnly, SameSite=Lax, persistent).
   - Ensures the identity is stable across requests of one client and differs between clients.
   - Ensures tampered cookies yield a fresh identity instead of an error.
   - Ensures the cookie is marked Secure behind an https base URL.

3. Request logging
   - Ensures one log line per request with method, path, status and duration.

4. gzip encoding
   - Ensures gzip-encoded request bodies are inflated before the handlers read them.
   - Ensures an undecodable gzip body is answered with a JSON 400.
   - Ensures responses are gzipped only for clients accepting gzip.
"""

import gzip
import json
import logging

from shortener.utils.config import ServiceConfig
from shortener.web import create_app
from shortener.web.constants import DAO_EXTENSION, REQUEST_TIMEOUT_CONFIG


def _user_cookie(response):
    cookies = [c for c in response.headers.getlist('Set-Cookie') if c.startswith('user_cookie=')]
    assert len(cookies) == 1
    return cookies[0]


# -------------------------------
# 1. Application setup
# -------------------------------


def test_create_app(config, memory_dao):
    app = create_app(config, memory_dao)

    assert app.extensions[DAO_EXTENSION] is memory_dao
    assert app.config[REQUEST_TIMEOUT_CONFIG] == 2.0
    assert app.config['SECRET_KEY'] == 'test-key'


# -------------------------------
# 2. Anonymous identity cookie
# -------------------------------


def test_new_visitor_receives_cookie(client):
    """Ensure a signed, HttpOnly, SameSite=Lax, persistent cookie is issued."""
    cookie = _user_cookie(client.get('/ping'))

    assert 'HttpOnly' in cookie
    assert 'SameSite=Lax' in cookie
    assert 'Expires=' in cookie
    assert 'Secure' not in cookie


def test_identity_is_stable_per_client(config, memory_dao):
    """Ensure one client keeps its identity and another client gets its own."""
    app = create_app(config, memory_dao)
    alice, bob = app.test_client(), app.test_client()

    alice.post('/', data='https://example.com/alice')
    bob.post('/', data='https://example.com/bob')

    assert [u['original_url'] for u in alice.get('/api/user/urls').get_json()] == ['https://example.com/alice']
    assert [u['original_url'] for u in bob.get('/api/user/urls').get_json()] == ['https://example.com/bob']


def test_tampered_cookie_yields_fresh_identity(client):
    """Ensure an invalid signature is never an error."""
    client.set_cookie('user_cookie', 'tampered.value.signature')

    response = client.post('/', data='https://example.com/page')

    assert response.status_code == 201
    assert _user_cookie(response)
    assert client.get('/api/user/urls').get_json() == [
        {'short_url': response.get_data(as_text=True), 'original_url': 'https://example.com/page'}
    ]


def test_secure_cookie_behind_https(memory_dao):
    app = create_app(ServiceConfig(base_url='https://sho.rt'), memory_dao)
    cookie = _user_cookie(app.test_client().get('/ping'))
    assert 'Secure' in cookie


# -------------------------------
# 3. Request logging
# -------------------------------


def test_request_is_logged(client, caplog):
    """Ensure every request is logged once with its outcome."""
    caplog.set_level(logging.INFO, logger='shortener.web.app')

    client.get('/missing')

    records = [r for r in caplog.records if r.name == 'shortener.web.app' and r.getMessage() == 'Handled request.']
    assert len(records) == 1
    assert records[0].method == 'GET'
    assert records[0].path == '/missing'
    assert records[0].status == 400
    assert records[0].durationMs >= 0


# -------------------------------
# 4. gzip encoding
# -------------------------------


def test_gzip_request_body(client, memory_dao):
    """Ensure a gzip-encoded text body is shortened like a plain one."""
    response = client.post(
        '/',
        data=gzip.compress(b'https://example.com/page'),
        headers={'Content-Encoding': 'gzip'},
    )

    assert response.status_code == 201
    shortcode = response.get_data(as_text=True).rsplit('/', 1)[-1]
    assert memory_dao.get(shortcode) == 'https://example.com/page'


def test_gzip_json_request_body(client):
    """Ensure a gzip-encoded JSON body is parsed."""
    response = client.post(
        '/api/shorten',
        data=gzip.compress(json.dumps({'url': 'https://example.com/page'}).encode()),
        headers={'Content-Encoding': 'gzip', 'Content-Type': 'application/json'},
    )

    assert response.status_code == 201
    assert response.get_json()['original_url'] == 'https://example.com/page'


def test_bad_gzip_request_body(client):
    """Ensure a body that is not gzip yields a JSON 400."""
    response = client.post('/', data=b'https://example.com/page', headers={'Content-Encoding': 'gzip'})

    assert response.status_code == 400
    assert response.get_json() == {'status_code': 400, 'error': 'Bad Request', 'message': 'bad gzip request'}


def test_gzip_response(client):
    """Ensure the body is gzipped when the client accepts gzip."""
    response = client.post('/', data='https://example.com/page', headers={'Accept-Encoding': 'gzip, deflate'})

    assert response.status_code == 201
    assert response.headers['Content-Encoding'] == 'gzip'
    assert 'Accept-Encoding' in response.headers['Vary']
    assert gzip.decompress(response.get_data()).decode().startswith('http://sho.rt/')


def test_plain_response_without_accept_encoding(client):
    """Ensure the body is sent as is when the client does not accept gzip."""
    response = client.post('/', data='https://example.com/page')

    assert response.status_code == 201
    assert 'Content-Encoding' not in response.headers
    assert response.get_data(as_text=True).startswith('http://sho.rt/')
