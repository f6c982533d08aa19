"""Async SQLite wrapper using stdlib sqlite3 + anyio.

Every blocking sqlite3 call runs in a worker thread via
``anyio.to_thread``.  Connections are opened with
``check_same_thread=False`` because consecutive calls may land on
different pool threads; :class:`~trellis.data.database.Database`
serializes access with an ``anyio.Lock``.
"""

import sqlite3
from collections.abc import Callable, Sequence
from typing import Any

import anyio.to_thread


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    return anyio.to_thread.run_sync(func, *args)


class AsyncCursor:
    """Async wrapper around ``sqlite3.Cursor``."""

    __slots__ = ("_cursor",)

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self._cursor = cursor

    @property
    def description(self) -> Any:
        return self._cursor.description

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount

    @property
    def columns(self) -> list[str]:
        """Column names of the last query; empty for statements without rows."""
        if self._cursor.description is None:
            return []
        return [desc[0] for desc in self._cursor.description]

    async def fetchall(self) -> list[Any]:
        return await _run_sync(self._cursor.fetchall)


class AsyncConnection:
    """Async wrapper around ``sqlite3.Connection``."""

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> AsyncCursor:
        cursor = await _run_sync(lambda: self._conn.execute(sql, params))
        return AsyncCursor(cursor)

    async def executescript(self, sql: str) -> None:
        """Execute several statements at once.

        ``executescript`` commits any pending transaction before running.
        """
        await _run_sync(lambda: self._conn.executescript(sql))

    async def close(self) -> None:
        await _run_sync(self._conn.close)


async def connect(path: str) -> AsyncConnection:
    """Open an autocommitting async SQLite connection."""
    conn = await _run_sync(lambda: sqlite3.connect(path, autocommit=True, check_same_thread=False))
    return AsyncConnection(conn)
