"""
db/connection.py
----------------
psycopg2 connection pool for the service layer and CLI.

Repositories never see the pool. A service borrows one connection per
request with `borrowed_connection()` and hands it to the repository; the
connection goes back to the pool when the block exits, whatever happened.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool
from psycopg2.extensions import connection as PgConnection

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: Optional[pool.SimpleConnectionPool] = None


def init_pool(dsn: str = DATABASE_URL) -> None:
    """
    Open the pool (DB_POOL_MIN..DB_POOL_MAX connections). No-op when already open.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.SimpleConnectionPool(DB_POOL_MIN, DB_POOL_MAX, dsn)
    except psycopg2.OperationalError as e:
        logger.error(f"Could not reach activist database: {e}")
        raise
    logger.info(f"Activist database pool open ({DB_POOL_MIN}-{DB_POOL_MAX} connections)")


@contextmanager
def borrowed_connection() -> Iterator[PgConnection]:
    """
    Lend one pooled connection for the duration of a ``with`` block.

    Raises:
        RuntimeError: If `init_pool()` has not been called.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    lender = _pool
    conn = lender.getconn()
    try:
        yield conn
    finally:
        lender.putconn(conn)


def close_pool() -> None:
    """Close every pooled connection. Safe to call twice."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Activist database pool closed.")
