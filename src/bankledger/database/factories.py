"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from bankledger.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "BANKLEDGER_DB_PATH"
DEFAULT_DB_DIR = ".bankledger"
DEFAULT_DB_NAME = "bankledger.db"


def default_database_path() -> Path:
    """Return ~/.bankledger/bankledger.db."""
    return Path.home() / DEFAULT_DB_DIR / DEFAULT_DB_NAME


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks BANKLEDGER_DB_PATH
            environment variable, then defaults to ~/.bankledger/bankledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite; the resolved file
        path is available as ``database_path``
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    path = Path(database_path).expanduser() if database_path else default_database_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Using SQLite database at %s", path)

    db = SQLAlchemyDatabase(f"sqlite:///{path}")
    db.database_path = str(path)
    return db


def database_factory_for(db: SQLAlchemyDatabase) -> Callable[[], SQLAlchemyDatabase]:
    """Return a callable that opens a fresh gateway on the same database.

    Each call builds a new SQLAlchemyDatabase with its own session, so the
    result can be handed to worker threads.
    """
    url = db.database_url

    def factory() -> SQLAlchemyDatabase:
        return SQLAlchemyDatabase(url)

    return factory
