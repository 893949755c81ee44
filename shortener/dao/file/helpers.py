import json

from shortener.models import ShortURLModel
from shortener.dao.exceptions import DataStoreError


__all__ = ['encode_record', 'decode_record']


def encode_record(short_url: ShortURLModel) -> bytes:
    """Encode a ShortURLModel as one newline-terminated UTF-8 JSON line

    Example:
        >>> encode_record(ShortURLModel(uuid='6a1f...', shortcode='abc123', target='https://example.com', user_id='user-1'))
        b'{"uuid": "6a1f...", "short_url": "abc123", "original_url": "https://example.com", "user_id": "user-1"}\\n'
    """
    return (json.dumps(short_url.to_record(), ensure_ascii=False) + '\n').encode('utf-8')


def decode_record(line: str, lineno: int | None = None) -> ShortURLModel:
    """Decode one JSON line of the storage file into a ShortURLModel

    Args:
        line (str):
            A single line of the storage file, without its line terminator.
        lineno (int | None):
            Line number, only used in the error message.

    Raises:
        DataStoreError:
            If the line is not a JSON object with the expected fields.
    """
    where = f' (line {lineno})' if lineno is not None else ''
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        raise DataStoreError(f'Malformed JSON in storage file{where}.') from e

    if not isinstance(record, dict):
        raise DataStoreError(f'Expected a JSON object in storage file{where}, got {type(record).__name__}.')
    try:
        return ShortURLModel.from_record(record)
    except (KeyError, TypeError) as e:
        raise DataStoreError(f'Invalid short URL record in storage file{where}: {e}') from e
