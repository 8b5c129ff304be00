"""Persistence gateway: abstract Database plus the SQLAlchemy implementation."""

from bankledger.database.base import Database
from bankledger.database.factories import create_sqlite_database, database_factory_for
from bankledger.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = ["Database", "SQLAlchemyDatabase", "create_sqlite_database", "database_factory_for"]
