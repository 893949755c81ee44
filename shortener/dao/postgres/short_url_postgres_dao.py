"""Data Access Object (DAO) implementation for managing shortened URLs in PostgreSQL

The database is the authority on duplicates: unique constraints on both
`original_url` and `short_url` decide conflicts, not an in-process cache.

Schema:

    urls(id serial primary key,
         uuid char(36) unique,
         original_url varchar(100) unique not null,
         short_url varchar(100) unique not null,
         user_id char(36))

Classes:
    ShortURLPostgresDAO:
        DAO for storing and retrieving ShortURLModel in a PostgreSQL table.

Example:
    >>> from shortener.dao.postgres import ShortURLPostgresDAO

    >>> dao = ShortURLPostgresDAO(postgres_dsn='postgresql://postgres@localhost/postgres')
    >>> dao.insert('https://example.com/page', 'abc123', 'user-1').shortcode
    'abc123'
    >>> dao.get('abc123')
    'https://example.com/page'
"""

import uuid
from collections.abc import Sequence

from beartype import beartype
from psycopg2.extensions import cursor as Cursor

from shortener.models import ShortURLModel, BatchRequestItem, BatchResponseItem, UserURLModel
from shortener.dao.base import ShortURLBaseDAO
from shortener.dao.postgres.mixins import PostgresClientMixin
from shortener.dao.postgres.helpers import handle_postgres_error
from shortener.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError, ShortURLNotFoundError
from shortener.utils.shortener import generate_shortcode


CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS urls (
    id SERIAL PRIMARY KEY,
    uuid CHAR(36) UNIQUE,
    original_url VARCHAR(100) NOT NULL UNIQUE,
    short_url VARCHAR(100) NOT NULL UNIQUE,
    user_id CHAR(36)
)
"""

SELECT_BY_ORIGINAL_SQL = 'SELECT uuid, short_url, user_id FROM urls WHERE original_url = %s'
SELECT_BY_SHORT_SQL = 'SELECT original_url FROM urls WHERE short_url = %s'
SELECT_BY_ORIGINALS_SQL = 'SELECT short_url, original_url FROM urls WHERE original_url = ANY(%s)'
SELECT_BY_USER_SQL = 'SELECT short_url, original_url FROM urls WHERE user_id = %s'
INSERT_SQL = (
    'INSERT INTO urls (uuid, original_url, short_url, user_id) VALUES (%s, %s, %s, %s) '
    'ON CONFLICT (original_url) DO NOTHING'
)


class ShortURLPostgresDAO(PostgresClientMixin, ShortURLBaseDAO):
    """PostgreSQL-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface on top of a pooled
    PostgreSQL connection. Every method runs in its own transaction; the
    optional `timeout` keyword argument becomes that transaction's
    `statement_timeout`.

    Attributes (see PostgresClientMixin):
        pool (AbstractConnectionPool):
            Thread-safe connection pool.

    Methods:
        insert(target: str, shortcode: str, user_id: str | None, **kwargs) -> ShortURLModel:
            Insert a mapping unless the original URL already exists.
            Raises ShortURLAlreadyExistsError with the stored row on conflict,
            including when a concurrent request won the race for the same URL.
            Raises DataStoreError on any driver error.

        get(shortcode: str, **kwargs) -> str:
            Retrieve the original URL by shortcode.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.

        insert_batch(items: Sequence[BatchRequestItem], user_id: str | None, **kwargs) -> list[BatchResponseItem]:
            Insert all new URLs and resolve every item's shortcode in one transaction.
            Either the whole batch is applied or nothing is.

        list_by_owner(user_id: str, **kwargs) -> list[UserURLModel]:
            List the mappings created by a user.

        ping(**kwargs) -> bool:
            Healthcheck the database.
    """

    def __init__(self, *args, **kwargs):
        """Connect (see PostgresClientMixin) and create the `urls` table if missing

        Raises:
            DataStoreError:
                If PostgreSQL is unreachable or the schema can't be created.
        """
        super().__init__(*args, **kwargs)
        try:
            self._create_schema()
        except DataStoreError:
            self.close()
            raise

    @handle_postgres_error
    def _create_schema(self) -> None:
        with self._transaction() as cur:
            cur.execute(CREATE_TABLE_SQL)

    @staticmethod
    def _select_by_original(cur: Cursor, target: str) -> ShortURLModel | None:
        cur.execute(SELECT_BY_ORIGINAL_SQL, (target,))
        row = cur.fetchone()
        if row is None:
            return None

        row_uuid, shortcode, user_id = row
        # CHAR(n) columns come back blank-padded
        return ShortURLModel(
            uuid=row_uuid.rstrip(),
            shortcode=shortcode,
            target=target,
            user_id=user_id.rstrip() if user_id else None,
        )

    @handle_postgres_error
    @beartype
    def insert(self, target: str, shortcode: str, user_id: str | None = None, **kwargs) -> ShortURLModel:
        """Insert a short URL mapping into PostgreSQL

        The existence check and the insert run in one transaction. The insert
        itself is `ON CONFLICT (original_url) DO NOTHING`, so if a concurrent
        request stores the same URL between the check and the insert, no row is
        written and the winner's row is read back once and reported as a conflict.

        Raises:
            ShortURLAlreadyExistsError:
                If `target` is already stored.
            DataStoreError:
                On any driver error, including a taken shortcode or an elapsed deadline.
        """
        with self._transaction(kwargs.get('timeout')) as cur:
            existing = self._select_by_original(cur, target)
            if existing is not None:
                raise ShortURLAlreadyExistsError(
                    f"URL '{target}' is already shortened to '{existing.shortcode}'.",
                    short_url=existing,
                )

            short_url = ShortURLModel(uuid=str(uuid.uuid4()), shortcode=shortcode, target=target, user_id=user_id)
            cur.execute(INSERT_SQL, (short_url.uuid, short_url.target, short_url.shortcode, short_url.user_id))

            if cur.rowcount == 0:
                existing = self._select_by_original(cur, target)
                if existing is None:
                    raise DataStoreError(f"Insert of URL '{target}' was skipped but no conflicting row was found.")
                raise ShortURLAlreadyExistsError(
                    f"URL '{target}' is already shortened to '{existing.shortcode}'.",
                    short_url=existing,
                )

        return short_url

    @handle_postgres_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> str:
        with self._transaction(kwargs.get('timeout')) as cur:
            cur.execute(SELECT_BY_SHORT_SQL, (shortcode,))
            row = cur.fetchone()

        if row is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return row[0]

    @handle_postgres_error
    @beartype
    def insert_batch(self, items: Sequence[BatchRequestItem], user_id: str | None = None, **kwargs) -> list[BatchResponseItem]:
        """Insert a batch of URLs in a single transaction

        Steps (one transaction):
            - Insert a candidate row for every item, skipping URLs already stored
            - Read back the (short, original) pair of every URL in the batch,
              which covers both the rows just written and pre-existing ones
            - Reconcile each item against that set by original URL

        The transaction commits only after all steps succeed.

        Raises:
            DataStoreError:
                On any driver error, or if an item's URL can't be resolved.
                Nothing from the batch is stored in that case.
        """
        if not items:
            return []

        rows = [(str(uuid.uuid4()), item.target, generate_shortcode(), user_id) for item in items]
        targets = list({item.target: None for item in items})

        with self._transaction(kwargs.get('timeout')) as cur:
            cur.executemany(INSERT_SQL, rows)
            cur.execute(SELECT_BY_ORIGINALS_SQL, (targets,))
            stored = {original: short for short, original in cur.fetchall()}

            missing = [target for target in targets if target not in stored]
            if missing:
                raise DataStoreError(f'Batch insert left {len(missing)} URL(s) unresolved.')

        return [BatchResponseItem(correlation_id=item.correlation_id, shortcode=stored[item.target]) for item in items]

    @handle_postgres_error
    @beartype
    def list_by_owner(self, user_id: str, **kwargs) -> list[UserURLModel]:
        with self._transaction(kwargs.get('timeout')) as cur:
            cur.execute(SELECT_BY_USER_SQL, (user_id,))
            rows = cur.fetchall()

        return [UserURLModel(shortcode=shortcode, target=target) for shortcode, target in rows]

    def ping(self, **kwargs) -> bool:
        return self._healthcheck(raise_error=True, timeout=kwargs.get('timeout'))

    def close(self) -> None:
        if not self.pool.closed:
            self.pool.closeall()
