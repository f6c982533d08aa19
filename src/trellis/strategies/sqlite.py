"""The ``sqlite`` strategy: run one SQL statement.

Fields::

    fetch_data:
      type: sqlite
      key: user
      sql: SELECT * FROM users WHERE id = ?        # required
      parameters: ["{{ params.id }}"]               # positional, default []
      return_one: true                              # default false

Returns every row as a dict, or with ``return_one`` the first row (or
``None``, which drops the key).
"""

from typing import Any

from trellis.data import Database
from trellis.errors import StrategyError
from trellis.pages.types import RequestContext
from trellis.strategies.base import Operation


class SQLiteStrategy:
    """SQL strategy running through an owned :class:`~trellis.data.Database`."""

    __slots__ = ("_db",)

    def __init__(self, db: Database) -> None:
        self._db = db

    @property
    def db(self) -> Database:
        return self._db

    async def execute(self, op: Operation, context: RequestContext) -> Any:
        sql = op.get("sql")
        if not sql or not isinstance(sql, str):
            msg = "sqlite operation requires a 'sql' field"
            raise StrategyError(msg)

        parameters = op.get("parameters") or []
        if not isinstance(parameters, list):
            msg = "sqlite operation 'parameters' must be a list"
            raise StrategyError(msg)

        if op.get("return_one"):
            return await self._db.fetch_one(sql, *parameters)
        return await self._db.fetch_all(sql, *parameters)
