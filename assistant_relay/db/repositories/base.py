"""Base repository class."""

from contextlib import contextmanager

import duckdb
from ...errors import PersistenceError
from ...utils.logger import get_app_logger


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        """
        Initialize repository with database connection.

        Args:
            conn: DuckDB connection instance
        """
        self.conn = conn
        self.logger = get_app_logger()

    @contextmanager
    def _transaction(self, action: str):
        """
        Run a group of statements atomically.

        Args:
            action: Short description used in log and error messages

        Raises:
            PersistenceError: If any statement fails (the transaction is rolled back)
        """
        self.conn.begin()
        try:
            yield self.conn
        except duckdb.Error as e:
            self.conn.rollback()
            self.logger.error(f"Failed to {action}: {e}")
            raise PersistenceError(f"Failed to {action}: {e}") from e
        except Exception:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()
