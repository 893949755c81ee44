from unittest.mock import MagicMock

import pytest
from psycopg2.pool import ThreadedConnectionPool


@pytest.fixture
def cursor():
    """Mock a psycopg2 cursor; fetchone() answers the connectivity check by default."""
    _cursor = MagicMock()
    _cursor.fetchone.return_value = (1,)
    _cursor.rowcount = 1
    return _cursor


@pytest.fixture
def connection(cursor):
    """Mock a psycopg2 connection usable as `with conn:` and `with conn.cursor() as cur:`."""
    _connection = MagicMock()
    _connection.closed = 0
    _connection.__enter__.return_value = _connection
    _connection.cursor.return_value.__enter__.return_value = cursor
    return _connection


@pytest.fixture
def pool(connection):
    """Mock a ThreadedConnectionPool lending the mocked connection."""
    _pool = MagicMock(spec=ThreadedConnectionPool)
    _pool.getconn.return_value = connection
    _pool.closed = False
    return _pool
