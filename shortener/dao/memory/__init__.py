from shortener.dao.memory.mixins import ReverseIndexMixin
from shortener.dao.memory.short_url_memory_dao import ShortURLMemoryDAO


__all__ = [
    'ReverseIndexMixin',
    'ShortURLMemoryDAO',
]
