"""Shortcode generation utility

This module provides a helper function for generating random, URL-safe
shortcodes from a cryptographically secure random source.

Functions:
    generate_shortcode(nbytes=10):
        Generate a random hex token suitable for use as a URL slug.

Example:
    >>> from shortener.utils import generate_shortcode
    >>> generate_shortcode()
    '3f9a0c1de27b54a8c6f1'
"""

import secrets

from shortener.constants import ShortcodeSize


def generate_shortcode(nbytes: int = ShortcodeSize.NBYTES) -> str:
    """Generate a random shortcode from `nbytes` secure random bytes.

    The output is the lowercase hex encoding of the random bytes, so its length
    is always 2 * nbytes characters (20 by default) and it only contains [0-9a-f].

    Args:
        nbytes (int, optional):
            Number of random bytes to draw. Defaults to 10.

    Returns:
        str: A hex shortcode of length 2 * nbytes.

    Raises:
        TypeError: if nbytes is not an integer.
        ValueError: if nbytes is not positive.
        OSError: if the operating system's random source is unavailable.

    NOTE:
        - Uniqueness against existing shortcodes is NOT checked here; DAOs are
          responsible for rejecting or regenerating taken codes.
        - Failures of the random source are never masked: no zero-filled or
          predictable code is ever returned. The error propagates to the caller,
          which fails the current request only.
    """
    if not isinstance(nbytes, int) or isinstance(nbytes, bool):
        raise TypeError(f'Number of bytes must be of type integer (given type: {type(nbytes)}).')
    if nbytes <= 0:
        raise ValueError(f'Number of bytes must be a positive integer (given value: {nbytes}).')

    return secrets.token_hex(nbytes)
