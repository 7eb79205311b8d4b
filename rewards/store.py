import logging
from typing import Any, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import DEFAULT_DATABASE_URL
from .exceptions import StoreError

logger = logging.getLogger(__name__)


CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS rewards (
        phone TEXT PRIMARY KEY,
        points INTEGER NOT NULL DEFAULT 0
    )
"""


class LedgerStore:
    """
    File-backed table of phone -> points.

    Holds one engine for its whole lifetime; call close() (or use it as a
    context manager) to release it. Every statement runs in its own
    transaction.
    """

    def __init__(self, database_url: str = DEFAULT_DATABASE_URL, engine: Optional[Engine] = None):
        self.database_url = database_url
        try:
            self.engine = engine or create_engine(database_url, future=True)
            self._create_table()
        except SQLAlchemyError as e:
            logger.exception("Could not open ledger store at %s", database_url)
            raise StoreError(f"Error connecting to database: {e}") from e

    def _create_table(self) -> None:
        with self.engine.begin() as conn:
            conn.execute(text(CREATE_TABLE_SQL))

    def execute(self, sql: str, params: Optional[dict[str, Any]] = None) -> int:
        """Run one write statement and return the number of rows it touched."""
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(sql), params or {})
                return result.rowcount
        except (SQLAlchemyError, OverflowError) as e:
            logger.exception("Ledger store write failed")
            raise StoreError(f"Database error: {e}") from e

    def query(self, sql: str, params: Optional[dict[str, Any]] = None) -> Optional[int]:
        """Return the first column of the first row, or None when nothing matched."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(text(sql), params or {}).first()
        except (SQLAlchemyError, OverflowError) as e:
            logger.exception("Ledger store read failed")
            raise StoreError(f"Database error: {e}") from e
        if row is None:
            return None
        return int(row[0])

    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "LedgerStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
