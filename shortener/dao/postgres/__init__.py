from shortener.dao.postgres.mixins import PostgresClientMixin
from shortener.dao.postgres.short_url_postgres_dao import ShortURLPostgresDAO


__all__ = [
    'PostgresClientMixin',
    'ShortURLPostgresDAO',
]
