from unittest.mock import MagicMock

import pytest

from shortener.dao.base import ShortURLBaseDAO
from shortener.dao.memory import ShortURLMemoryDAO
from shortener.utils.config import ServiceConfig
from shortener.web import create_app


@pytest.fixture
def config():
    return ServiceConfig(base_url='http://sho.rt', secret_key='test-key', request_timeout=2.0)


@pytest.fixture
def memory_dao():
    return ShortURLMemoryDAO()


@pytest.fixture
def mock_dao():
    """Mock a DAO for handler error paths."""
    return MagicMock(spec=ShortURLBaseDAO)


@pytest.fixture
def client(config, memory_dao):
    """Flask test client backed by a real in-memory DAO."""
    return create_app(config, memory_dao).test_client()


@pytest.fixture
def mock_client(config, mock_dao):
    """Flask test client backed by a mocked DAO."""
    return create_app(config, mock_dao).test_client()
