"""Unit tests for the data models in models.py.

Test coverage includes:

1. ShortURLModel creation
   - Ensures instances can be created with valid data.
   - Verifies that user_id can be omitted and defaults to None.

2. Record layout
   - Ensures to_record() emits the persisted field names.
   - Ensures from_record() reads the persisted field names back.
   - Confirms missing or non-string fields (owner included) raise KeyError or TypeError.

3. Equality and immutability
   - Confirms that models with identical data compare equal.
   - Verifies that all fields are frozen.

4. Batch and listing models
   - Ensures BatchRequestItem, BatchResponseItem and UserURLModel hold their fields.
"""

from dataclasses import FrozenInstanceError

import pytest

from shortener.models import ShortURLModel, BatchRequestItem, BatchResponseItem, UserURLModel


UUID = '0b8a5c63-5d43-4f8e-9bd4-7d3f0d2f7c11'


# -------------------------------------------------
# 1. ShortURLModel creation
# -------------------------------------------------

def test_valid_short_url_model_creation():
    """Ensure ShortURLModel can be created with valid data."""
    short_url = ShortURLModel(uuid=UUID, shortcode='abc123', target='https://example.com/article/123', user_id='user-1')

    assert short_url.uuid == UUID
    assert short_url.shortcode == 'abc123'
    assert short_url.target == 'https://example.com/article/123'
    assert short_url.user_id == 'user-1'


def test_user_id_is_optional():
    """Verify that user_id can be omitted and defaults to None."""
    short_url = ShortURLModel(uuid=UUID, shortcode='abc123', target='https://example.com/article/123')
    assert short_url.user_id is None


# -------------------------------------------------
# 2. Record layout
# -------------------------------------------------

def test_to_record():
    """Ensure to_record() uses the persisted field names."""
    short_url = ShortURLModel(uuid=UUID, shortcode='abc123', target='https://example.com', user_id='user-1')

    assert short_url.to_record() == {
        'uuid': UUID,
        'short_url': 'abc123',
        'original_url': 'https://example.com',
        'user_id': 'user-1',
    }


def test_from_record():
    """Ensure from_record() reads the persisted field names."""
    record = {'uuid': UUID, 'short_url': 'abc123', 'original_url': 'https://example.com', 'user_id': 'user-1'}

    assert ShortURLModel.from_record(record) == ShortURLModel(
        uuid=UUID, shortcode='abc123', target='https://example.com', user_id='user-1'
    )


@pytest.mark.parametrize('user_id', [None, ''])
def test_from_record_without_owner(user_id):
    """Empty or null owners are read back as None."""
    record = {'uuid': UUID, 'short_url': 'abc123', 'original_url': 'https://example.com', 'user_id': user_id}
    assert ShortURLModel.from_record(record).user_id is None


def test_from_record_with_missing_field():
    """Missing required fields raise KeyError."""
    with pytest.raises(KeyError):
        ShortURLModel.from_record({'uuid': UUID, 'short_url': 'abc123'})


@pytest.mark.parametrize(
    'field, value',
    [
        ('uuid', 42),
        ('short_url', ''),
        ('original_url', None),
    ],
)
def test_from_record_with_invalid_field(field, value):
    """Non-string or empty required fields raise TypeError."""
    record = {'uuid': UUID, 'short_url': 'abc123', 'original_url': 'https://example.com', 'user_id': None}
    record[field] = value

    with pytest.raises(TypeError, match=field):
        ShortURLModel.from_record(record)


@pytest.mark.parametrize('user_id', [5, 0, False, ['user-1']])
def test_from_record_with_invalid_owner(user_id):
    """Non-string owners raise TypeError instead of being coerced."""
    record = {'uuid': UUID, 'short_url': 'abc123', 'original_url': 'https://example.com', 'user_id': user_id}

    with pytest.raises(TypeError, match='user_id'):
        ShortURLModel.from_record(record)


# -------------------------------------------------
# 3. Equality and immutability
# -------------------------------------------------

def test_short_url_model_equality():
    """Models with identical data should compare equal."""
    left = ShortURLModel(uuid=UUID, shortcode='abc123', target='https://example.com', user_id='user-1')
    right = ShortURLModel(uuid=UUID, shortcode='abc123', target='https://example.com', user_id='user-1')
    assert left == right


@pytest.mark.parametrize(
    'field, new_value',
    [
        ('uuid', 'other'),
        ('shortcode', 'def456'),
        ('target', 'https://example.com/article/456'),
        ('user_id', 'user-2'),
    ],
)
def test_short_url_model_immutability(field, new_value):
    """Attempting to modify fields should raise FrozenInstanceError."""
    short_url = ShortURLModel(uuid=UUID, shortcode='abc123', target='https://example.com', user_id='user-1')

    with pytest.raises(FrozenInstanceError):
        setattr(short_url, field, new_value)


# -------------------------------------------------
# 4. Batch and listing models
# -------------------------------------------------

def test_batch_and_listing_models():
    """Ensure the auxiliary models hold their fields."""
    request = BatchRequestItem(correlation_id='1', target='https://a.com')
    response = BatchResponseItem(correlation_id='1', shortcode='abc123')
    listed = UserURLModel(shortcode='abc123', target='https://a.com')

    assert (request.correlation_id, request.target) == ('1', 'https://a.com')
    assert (response.correlation_id, response.shortcode) == ('1', 'abc123')
    assert (listed.shortcode, listed.target) == ('abc123', 'https://a.com')
