"""Utility functions for service configuration management.

Every option can be given as a command line flag or as an environment variable.
The environment variable wins over the flag, and the flag wins over the default:

    option              flags               environment variable    default
    ------------------  ------------------  ----------------------  ----------------------
    server address      -a, --address       SERVER_ADDRESS          localhost:8080
    base URL            -b, --base-url      BASE_URL                http://localhost:8080
    file storage path   -f, --file          FILE_STORAGE_PATH       (empty)
    database DSN        -d, --database      DATABASE_DSN            (empty)
    cookie signing key  -k, --key           JWT_APP_KEY             secretkey
    request timeout     -t, --timeout       REQUEST_TIMEOUT         5.0 (seconds)

The storage backend follows from the options: PostgreSQL when a database DSN
is set, the append-only file when a storage path is set, in-memory otherwise.

Functions:
    load_config(argv: Sequence[str] | None = None) -> ServiceConfig
        Parse flags and environment variables into a validated ServiceConfig.

    log_level() -> str
        Return the configured log level (`LOG_LEVEL`), 'INFO' by default.

Example:
    >>> os.environ['BASE_URL'] = 'https://sho.rt'
    >>> config = load_config(['-b', 'http://ignored.example', '-f', '/var/lib/shortener/urls.json'])
    >>> config.base_url
    'https://sho.rt'
    >>> config.active_backend
    <Backend.FILE: 'file'>
"""

import argparse
import logging
import math
import os
from collections.abc import Sequence
from dataclasses import dataclass

from shortener.constants import ENV, Backend, Defaults
from shortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceConfig:
    """Immutable service configuration

    Attributes:
        server_address (str):
            host:port the HTTP server listens on.
        base_url (str):
            Prefix of rendered short URLs, e.g. 'http://localhost:8080'.
        file_storage_path (str):
            Path of the append-only storage file ('' disables the file backend).
        database_dsn (str):
            PostgreSQL connection string ('' disables the database backend).
        secret_key (str):
            Key signing the anonymous identity cookie.
        request_timeout (float):
            Deadline in seconds passed to every storage operation.
    """

    server_address: str = Defaults.SERVER_ADDRESS
    base_url: str = Defaults.BASE_URL
    file_storage_path: str = ''
    database_dsn: str = ''
    secret_key: str = Defaults.SECRET_KEY
    request_timeout: float = Defaults.REQUEST_TIMEOUT

    @property
    def active_backend(self) -> Backend:
        if self.database_dsn:
            return Backend.POSTGRES
        if self.file_storage_path:
            return Backend.FILE
        return Backend.MEMORY

    @property
    def host(self) -> str:
        return self.server_address.rpartition(':')[0] or 'localhost'

    @property
    def port(self) -> int:
        return int(self.server_address.rpartition(':')[2])

    def validate(self, errors: list[str] | None = None) -> 'ServiceConfig':
        """Check the configuration, reporting every problem at once

        Args:
            errors (list[str] | None):
                Problems already found while parsing raw values, reported together
                with the ones found here.

        Returns:
            ServiceConfig: self (for chaining)

        Raises:
            BadConfigurationError:
                If any option is invalid.
        """
        errors = list(errors or [])

        if not self.server_address:
            errors.append('server address cannot be empty')
        else:
            host, sep, port = self.server_address.rpartition(':')
            if not sep or not port.isdigit() or not 0 < int(port) < 65536:
                errors.append(f"server address must be host:port (given value: '{self.server_address}')")

        if not self.base_url.startswith(('http://', 'https://')):
            errors.append(f"base URL must start with http:// or https:// (given value: '{self.base_url}')")

        if not math.isfinite(self.request_timeout) or self.request_timeout <= 0:
            errors.append(f'request timeout must be a positive finite number (given value: {self.request_timeout})')

        if errors:
            raise BadConfigurationError('Invalid configuration: ' + '; '.join(errors) + '.')
        return self


def _pick(env_name: str, flag_value: str | None, default: str) -> str:
    env_value = os.environ.get(env_name, '').strip()
    if env_value:
        return env_value
    if flag_value and flag_value.strip():
        return flag_value.strip()
    return default


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='shortener', description='URL shortening HTTP service.')
    parser.add_argument('-a', '--address', help=f'HTTP server address (overridden by {ENV.App.SERVER_ADDRESS} env)')
    parser.add_argument('-b', '--base-url', help=f'base address of shortened URL (overridden by {ENV.App.BASE_URL} env)')
    parser.add_argument('-f', '--file', help=f'path of storage file of shortened URLs (overridden by {ENV.Storage.FILE_STORAGE_PATH} env)')
    parser.add_argument('-d', '--database', help=f'PostgreSQL connection string (overridden by {ENV.Storage.DATABASE_DSN} env)')
    parser.add_argument('-k', '--key', help=f'key signing the user cookie (overridden by {ENV.App.SECRET_KEY} env)')
    parser.add_argument('-t', '--timeout', help=f'storage deadline per request in seconds (overridden by {ENV.App.REQUEST_TIMEOUT} env)')
    return parser


def load_config(argv: Sequence[str] | None = None) -> ServiceConfig:
    """Load the service configuration from flags and environment variables

    Args:
        argv (Sequence[str] | None):
            Command line arguments without the program name. Defaults to sys.argv[1:].

    Returns:
        ServiceConfig: the validated configuration.

    Raises:
        BadConfigurationError:
            If any option is invalid.
    """
    args = _parser().parse_args(argv)

    raw_timeout = _pick(ENV.App.REQUEST_TIMEOUT, args.timeout, str(Defaults.REQUEST_TIMEOUT))
    errors = []
    try:
        request_timeout = float(raw_timeout)
    except ValueError:
        errors.append(f"request timeout must be a number (given value: '{raw_timeout}')")
        request_timeout = Defaults.REQUEST_TIMEOUT

    config = ServiceConfig(
        server_address=_pick(ENV.App.SERVER_ADDRESS, args.address, Defaults.SERVER_ADDRESS),
        base_url=_pick(ENV.App.BASE_URL, args.base_url, Defaults.BASE_URL).rstrip('/'),
        file_storage_path=_pick(ENV.Storage.FILE_STORAGE_PATH, args.file, ''),
        database_dsn=_pick(ENV.Storage.DATABASE_DSN, args.database, ''),
        secret_key=_pick(ENV.App.SECRET_KEY, args.key, Defaults.SECRET_KEY),
        request_timeout=request_timeout,
    )
    logger.debug(
        'Loaded service configuration.',
        extra={'serverAddress': config.server_address, 'baseUrl': config.base_url, 'backend': str(config.active_backend)},
    )
    return config.validate(errors)


def log_level() -> str:
    """Return the configured log level by reading 'LOG_LEVEL'

    Example:
        >>> os.environ['LOG_LEVEL'] = 'debug'
        >>> log_level()
        'DEBUG'
    """
    return os.environ.get(ENV.App.LOG_LEVEL, Defaults.LOG_LEVEL).upper()
