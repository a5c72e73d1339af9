"""Shared plumbing for storage classes."""

from contextlib import contextmanager
from typing import Generator

import psycopg
from psycopg import Connection

from ..errors import PersistenceError


class BaseStorage:
    """Storage bound to one connection.

    Every write commits on its own; a failed statement rolls the connection
    back and surfaces as ``PersistenceError``.
    """

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @contextmanager
    def _guard(self, action: str) -> Generator[None, None, None]:
        try:
            yield
        except psycopg.Error as e:
            try:
                self.conn.rollback()
            except psycopg.Error:
                pass
            raise PersistenceError(f"Failed to {action}: {e}") from e
