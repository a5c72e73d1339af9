"""Database connection management."""

import os
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool


def build_conninfo(config: Dict[str, Any]) -> str:
    """
    Connection string for a ``postgres`` config section.

    The password comes from ``password_env`` when set, else from ``password``.
    """
    password = config.get("password") or ""
    if config.get("password_env"):
        password = os.environ.get(config["password_env"], password)

    return make_conninfo(
        host=config.get("host", "localhost"),
        port=config.get("port", 5432),
        dbname=config.get("database", "newsmerge"),
        user=config.get("user", "newsmerge"),
        password=password,
        application_name="newsmerge",
    )


_connection_pool: Optional[ConnectionPool] = None


def get_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Get or create the process-wide pool; each pipeline run borrows one connection."""
    global _connection_pool
    if _connection_pool is None:
        _connection_pool = ConnectionPool(
            build_conninfo(config),
            min_size=1,
            max_size=config.get("pool_max_size", 10),
            kwargs={"row_factory": dict_row},
            open=True,
        )
    return _connection_pool


def close_connection_pool() -> None:
    """Close the shared pool if one was opened."""
    global _connection_pool
    if _connection_pool is not None:
        _connection_pool.close()
        _connection_pool = None


@contextmanager
def get_connection(config: Dict[str, Any]) -> Generator[psycopg.Connection, None, None]:
    """Borrow a connection from the pool for the duration of the block."""
    with get_connection_pool(config).connection() as conn:
        yield conn
