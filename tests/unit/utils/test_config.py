"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Defaults
   - Ensures load_config() without flags or environment variables returns the defaults.

2. Precedence
   - Ensures flags override defaults.
   - Ensures environment variables override flags.
   - Ensures blank environment variables are ignored.

3. Backend selection
   - Ensures active_backend follows the database DSN and storage path options.

4. Validation
   - Ensures invalid server addresses, base URLs and timeouts raise BadConfigurationError.
   - Ensures non-finite timeouts (nan, inf) are refused.
   - Ensures all problems are reported in one error, including unparsable timeouts.

5. Log level
   - Ensures log_level() reads LOG_LEVEL and defaults to INFO.
"""

import pytest

from shortener.constants import ENV, Backend
from shortener.exceptions import BadConfigurationError
from shortener.utils.config import ServiceConfig, load_config, log_level


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Clear every environment variable the service reads."""
    for name in [*ENV.App, *ENV.Storage]:
        monkeypatch.delenv(name, raising=False)


# -------------------------------
# 1. Defaults
# -------------------------------


def test_load_config_defaults():
    """Ensure load_config() falls back to the defaults."""
    config = load_config([])

    assert config == ServiceConfig(
        server_address='localhost:8080',
        base_url='http://localhost:8080',
        file_storage_path='',
        database_dsn='',
        secret_key='secretkey',
        request_timeout=5.0,
    )
    assert config.host == 'localhost'
    assert config.port == 8080


# -------------------------------
# 2. Precedence
# -------------------------------


def test_flags_override_defaults():
    """Ensure command line flags override the defaults."""
    argv = ['-a', '0.0.0.0:9000', '-b', 'https://sho.rt/', '-f', '/tmp/urls.json', '-k', 'key', '-t', '2.5']
    config = load_config(argv)

    assert config.server_address == '0.0.0.0:9000'
    assert config.host == '0.0.0.0'
    assert config.port == 9000
    assert config.base_url == 'https://sho.rt'
    assert config.file_storage_path == '/tmp/urls.json'
    assert config.secret_key == 'key'
    assert config.request_timeout == 2.5


def test_long_flags():
    """Ensure long flag names are accepted."""
    config = load_config(['--address', ':9000', '--database', 'postgresql://localhost/db', '--timeout', '1'])

    assert config.server_address == ':9000'
    assert config.host == 'localhost'
    assert config.database_dsn == 'postgresql://localhost/db'
    assert config.request_timeout == 1.0


def test_env_overrides_flags(monkeypatch):
    """Ensure environment variables win over command line flags."""
    monkeypatch.setenv('SERVER_ADDRESS', 'localhost:7000')
    monkeypatch.setenv('BASE_URL', 'https://env.example')
    monkeypatch.setenv('FILE_STORAGE_PATH', '/var/lib/urls.json')
    monkeypatch.setenv('DATABASE_DSN', 'postgresql://db/shortener')
    monkeypatch.setenv('JWT_APP_KEY', 'env-key')
    monkeypatch.setenv('REQUEST_TIMEOUT', '3')

    argv = ['-a', 'localhost:9000', '-b', 'https://flag.example', '-f', '/tmp/urls.json', '-d', 'postgresql://flag/db', '-k', 'flag-key', '-t', '1']
    config = load_config(argv)

    assert config.server_address == 'localhost:7000'
    assert config.base_url == 'https://env.example'
    assert config.file_storage_path == '/var/lib/urls.json'
    assert config.database_dsn == 'postgresql://db/shortener'
    assert config.secret_key == 'env-key'
    assert config.request_timeout == 3.0


def test_blank_env_is_ignored(monkeypatch):
    """Ensure blank environment variables don't override flags."""
    monkeypatch.setenv('BASE_URL', '   ')
    config = load_config(['-b', 'https://flag.example'])
    assert config.base_url == 'https://flag.example'


# -------------------------------
# 3. Backend selection
# -------------------------------


@pytest.mark.parametrize(
    'argv, backend',
    [
        ([], Backend.MEMORY),
        (['-f', '/tmp/urls.json'], Backend.FILE),
        (['-d', 'postgresql://localhost/db'], Backend.POSTGRES),
        (['-f', '/tmp/urls.json', '-d', 'postgresql://localhost/db'], Backend.POSTGRES),
    ],
)
def test_active_backend(argv, backend):
    """Ensure the database wins over the file, and the file over memory."""
    assert load_config(argv).active_backend is backend


# -------------------------------
# 4. Validation
# -------------------------------


@pytest.mark.parametrize(
    'argv, message',
    [
        (['-a', 'localhost'], 'server address must be host:port'),
        (['-a', 'localhost:http'], 'server address must be host:port'),
        (['-a', 'localhost:70000'], 'server address must be host:port'),
        (['-b', 'sho.rt'], 'base URL must start with http:// or https://'),
        (['-t', '0'], 'request timeout must be a positive finite number'),
        (['-t', 'nan'], 'request timeout must be a positive finite number'),
        (['-t', 'inf'], 'request timeout must be a positive finite number'),
        (['-t', 'soon'], 'request timeout must be a number'),
    ],
)
def test_invalid_configuration(argv, message):
    """Ensure invalid options raise BadConfigurationError."""
    with pytest.raises(BadConfigurationError, match=message):
        load_config(argv)


def test_invalid_configuration_reports_every_problem():
    """Ensure all problems are reported in a single error."""
    with pytest.raises(BadConfigurationError) as exc_info:
        load_config(['-a', 'nowhere', '-b', 'ftp://sho.rt', '-t', '-1'])

    message = str(exc_info.value)
    assert 'server address' in message
    assert 'base URL' in message
    assert 'request timeout' in message


@pytest.mark.parametrize('value', ['nan', 'inf', '-inf', 'NaN', 'Infinity'])
def test_non_finite_timeout_from_env(monkeypatch, value):
    """Ensure non-finite deadlines are refused at startup."""
    monkeypatch.setenv('REQUEST_TIMEOUT', value)

    with pytest.raises(BadConfigurationError, match='request timeout must be a positive finite number'):
        load_config([])


def test_unparsable_timeout_is_reported_with_other_problems():
    """Ensure a non-numeric timeout doesn't hide the other problems."""
    with pytest.raises(BadConfigurationError) as exc_info:
        load_config(['-t', 'soon', '-b', 'sho.rt'])

    message = str(exc_info.value)
    assert "request timeout must be a number (given value: 'soon')" in message
    assert 'base URL must start with http:// or https://' in message


def test_empty_server_address():
    """Ensure an empty server address is rejected."""
    with pytest.raises(BadConfigurationError, match='server address cannot be empty'):
        ServiceConfig(server_address='').validate()


# -------------------------------
# 5. Log level
# -------------------------------


def test_log_level_default():
    """Ensure log_level() defaults to INFO."""
    assert log_level() == 'INFO'


def test_log_level_from_env(monkeypatch):
    """Ensure log_level() reads LOG_LEVEL (case-insensitive)."""
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    assert log_level() == 'DEBUG'
