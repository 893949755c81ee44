from enum import StrEnum


class Defaults:
    """Default configuration values."""

    SERVER_ADDRESS = 'localhost:8080'
    BASE_URL = 'http://localhost:8080'
    SECRET_KEY = 'secretkey'  # noqa: S105
    REQUEST_TIMEOUT = 5.0  # seconds
    LOG_LEVEL = 'INFO'


class ShortcodeSize:
    """Random shortcode dimensions."""

    NBYTES = 10  # random bytes per shortcode


class Cookie:
    """Anonymous identity cookie settings."""

    NAME = 'user_cookie'
    LIFETIME_DAYS = 100


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        SERVER_ADDRESS = 'SERVER_ADDRESS'
        BASE_URL = 'BASE_URL'
        SECRET_KEY = 'JWT_APP_KEY'  # noqa: S105
        REQUEST_TIMEOUT = 'REQUEST_TIMEOUT'
        LOG_LEVEL = 'LOG_LEVEL'

    class Storage(StrEnum):
        FILE_STORAGE_PATH = 'FILE_STORAGE_PATH'
        DATABASE_DSN = 'DATABASE_DSN'


class Backend(StrEnum):
    """Storage backends selectable at startup."""

    MEMORY = 'memory'
    FILE = 'file'
    POSTGRES = 'postgres'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
