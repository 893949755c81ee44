"""Helper utilities for the HTTP handlers.

Functions:
    get_short_url(base_url: str, shortcode: str) -> str
        Get string representation of short URL for a given shortcode
    is_valid_url(url: str) -> bool
        Check that a string is an absolute http(s) URL

Example:
    >>> get_short_url('http://localhost:8080/', 'abc123')
    'http://localhost:8080/abc123'
    >>> is_valid_url('https://example.com/page?id=1')
    True
    >>> is_valid_url('example.com')
    False
"""

from urllib.parse import urlsplit


def get_short_url(base_url: str, shortcode: str) -> str:
    """Get string representation of shortened URL

    Args:
        base_url (str): public base URL of the service
        shortcode (str): shortcode

    Returns:
        str: short url string representation
    """
    return f'{base_url.rstrip("/")}/{shortcode}'


def is_valid_url(url: str) -> bool:
    """Check that `url` is an absolute URL with an http(s) scheme and a host

    Args:
        url (str): candidate URL

    Returns:
        bool: True if the URL can be shortened, False otherwise
    """
    try:
        components = urlsplit(url)
    except ValueError:
        return False
    return components.scheme in {'http', 'https'} and bool(components.netloc) and not any(c.isspace() for c in url)
