"""Data models shared by the DAOs and the HTTP layer.

Classes:
    ShortURLModel:
        A persisted short URL mapping (one line of the storage file, one row of the `urls` table).

    BatchRequestItem:
        One entry of a batch shortening request.

    BatchResponseItem:
        One entry of a batch shortening response, correlated to its request by `correlation_id`.

    UserURLModel:
        A (shortcode, target) pair listed for the owner of the mapping.

Example:
    >>> url = ShortURLModel(
    ...     uuid='0b8a5c63-5d43-4f8e-9bd4-7d3f0d2f7c11',
    ...     shortcode='abc123',
    ...     target='https://example.com/article/123',
    ...     user_id='user-1',
    ... )
    >>> url.to_record()
    {'uuid': '0b8a5c63-5d43-4f8e-9bd4-7d3f0d2f7c11', 'short_url': 'abc123', 'original_url': 'https://example.com/article/123', 'user_id': 'user-1'}
"""

from dataclasses import dataclass

from shortener.types import ShortURLRecord


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    uuid: str                   # Unique record identifier (UUID4, 36 characters)
    shortcode: str              # Unique short identifier of shortened URL
    target: str                 # Original long URL
    user_id: str | None = None  # Anonymous identity of the user who created the mapping

    def to_record(self) -> ShortURLRecord:
        """Serialize to the persisted field layout"""
        return {
            'uuid': self.uuid,
            'short_url': self.shortcode,
            'original_url': self.target,
            'user_id': self.user_id,
        }

    @classmethod
    def from_record(cls, record: ShortURLRecord) -> 'ShortURLModel':
        """Deserialize from the persisted field layout

        Raises:
            KeyError: if a required field is missing.
            TypeError: if a required field is not a string, or `user_id` is neither a string nor null.
        """
        uuid, shortcode, target = record['uuid'], record['short_url'], record['original_url']
        user_id = record.get('user_id')
        for name, value in (('uuid', uuid), ('short_url', shortcode), ('original_url', target)):
            if not isinstance(value, str) or not value:
                raise TypeError(f"Field '{name}' must be a non-empty string (given value: {value!r}).")
        if user_id is not None and not isinstance(user_id, str):
            raise TypeError(f"Field 'user_id' must be a string or null (given value: {user_id!r}).")
        return cls(uuid=uuid, shortcode=shortcode, target=target, user_id=user_id or None)


@dataclass(frozen=True)
class BatchRequestItem:
    correlation_id: str  # Caller-supplied identifier echoed back in the response
    target: str          # Original long URL


@dataclass(frozen=True)
class BatchResponseItem:
    correlation_id: str  # Identifier copied from the matching BatchRequestItem
    shortcode: str       # Shortcode assigned to (or already held by) the target


@dataclass(frozen=True)
class UserURLModel:
    shortcode: str  # Short identifier of shortened URL
    target: str     # Original long URL
# fmt: on
