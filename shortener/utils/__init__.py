from shortener.utils.config import ServiceConfig, load_config, log_level
from shortener.utils.helpers import get_short_url, is_valid_url
from shortener.utils.shortener import generate_shortcode
from shortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'ServiceConfig',
    'load_config',
    'log_level',
    'get_short_url',
    'is_valid_url',
    'initialize_logging',
]
