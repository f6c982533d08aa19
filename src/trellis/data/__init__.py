"""Async SQLite access for trellis.

SQL in, row dicts out. Not an ORM.

Basic usage::

    from trellis.data import Database

    db = Database("sqlite:///app.db")

    users = await db.fetch_all("SELECT * FROM users WHERE active = ?", True)
    user = await db.fetch_one("SELECT * FROM users WHERE id = ?", 42)

Backs the ``sqlite`` strategy. Uses only the standard library driver,
run in worker threads through ``anyio``.
"""

from trellis.data.database import Database
from trellis.data.errors import DataError, DriverNotInstalledError, QueryError

__all__ = [
    "DataError",
    "Database",
    "DriverNotInstalledError",
    "QueryError",
]
