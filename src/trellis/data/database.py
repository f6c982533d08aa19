"""Async SQLite access for the ``sqlite`` strategy.

SQL in, plain row dicts out. Not an ORM.

Connection URL format::

    sqlite:///path/to/db.sqlite    # SQLite file, relative or absolute
    sqlite:///:memory:             # In-memory SQLite

The ``Database`` is owned by the ``App``: it is connected during ASGI
lifespan startup (or lazily on first query) and closed on shutdown.
A single connection is shared and serialized with an ``anyio.Lock``.
"""

import logging
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import anyio

from trellis.data._sqlite import AsyncConnection, AsyncCursor
from trellis.data._sqlite import connect as sqlite_connect
from trellis.data.errors import DataError, DriverNotInstalledError, QueryError

logger = logging.getLogger("trellis.data")


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection configuration."""

    url: str
    echo: bool = False


class Database:
    """Async SQLite database.

    Usage::

        db = Database("sqlite:///app.db")

        rows = await db.fetch_all("SELECT * FROM users WHERE active = ?", True)
        user = await db.fetch_one("SELECT * FROM users WHERE id = ?", 42)
        count = await db.execute("DELETE FROM sessions WHERE expired = 1")

        await db.disconnect()

    Rows come back as ``dict`` keyed by column name.
    """

    __slots__ = ("_config", "_conn", "_lock", "_path")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self._config = DatabaseConfig(url=url, echo=echo)
        self._path = _parse_sqlite_path(url)
        self._conn: AsyncConnection | None = None
        self._lock: anyio.Lock | None = None

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def connected(self) -> bool:
        return self._conn is not None

    # -- Connection management --

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        """Yield the shared connection, holding the lock."""
        if self._lock is None:
            # Created lazily: anyio.Lock needs a running event loop.
            self._lock = anyio.Lock()
        async with self._lock:
            if self._conn is None:
                self._conn = await self._open()
            yield self._conn

    async def _open(self) -> AsyncConnection:
        conn = await sqlite_connect(self._path)
        await conn.execute("PRAGMA foreign_keys=ON")
        logger.debug("Opened SQLite database %s", self._path)
        return conn

    def _log_query(self, sql: str, params: Sequence[Any], elapsed: float) -> None:
        if not self._config.echo:
            return
        logger.info("%6.1fms  %s  params=%r", elapsed * 1000, sql, tuple(params))

    async def _run(self, sql: str, params: Sequence[Any]) -> tuple[AsyncCursor, list[Any]]:
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                rows = await cursor.fetchall() if cursor.description is not None else []
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)
        return cursor, rows

    # -- Public query API --

    async def fetch_all(self, sql: str, /, *params: Any) -> list[dict[str, Any]]:
        """Execute a query and return every row.

        Statements that produce no result set (INSERT, UPDATE, ...) return
        an empty list.
        """
        cursor, rows = await self._run(sql, params)
        columns = cursor.columns
        return [dict(zip(columns, row, strict=True)) for row in rows]

    async def fetch_one(self, sql: str, /, *params: Any) -> dict[str, Any] | None:
        """Execute a query and return the first row, or ``None``."""
        rows = await self.fetch_all(sql, *params)
        return rows[0] if rows else None

    async def fetch_val(self, sql: str, /, *params: Any) -> Any:
        """Return the first column of the first row, or ``None``.

        Useful for COUNT, SUM, MAX, etc.
        """
        row = await self.fetch_one(sql, *params)
        if row is None:
            return None
        return next(iter(row.values()))

    async def execute(self, sql: str, /, *params: Any) -> int:
        """Execute a statement and return the number of rows affected."""
        cursor, _ = await self._run(sql, params)
        return cursor.rowcount

    async def execute_script(self, sql: str, /) -> None:
        """Execute several statements at once (schema setup, fixtures)."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                await conn.executescript(sql)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, (), time.perf_counter() - t0)

    # -- Lifecycle --

    async def connect(self) -> None:
        """Open the connection now instead of on first query."""
        async with self._connection():
            pass

    async def disconnect(self) -> None:
        """Close the connection. Safe to call more than once."""
        conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()
            logger.debug("Closed SQLite database %s", self._path)

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()

    def __repr__(self) -> str:
        return f"Database({self._config.url!r})"


def _parse_sqlite_path(url: str) -> str:
    """Extract the file path from a ``sqlite://`` URL."""
    # sqlite:///path/to/db  ->  path/to/db
    # sqlite:///:memory:    ->  :memory:
    for prefix in ("sqlite:///", "sqlite://"):
        if url.startswith(prefix):
            path = url[len(prefix) :]
            if not path:
                break
            return path
    if url.startswith(("postgresql", "postgres", "mysql")):
        scheme = url.split(":", 1)[0]
        msg = f"No {scheme} driver is available; only sqlite:/// URLs are supported"
        raise DriverNotInstalledError(msg)
    msg = f"Invalid SQLite URL: {url!r}. Expected sqlite:///path/to/db"
    raise DataError(msg)
