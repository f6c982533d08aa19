"""Operation strategies.

A strategy runs one operation ``type``.  Two ship with trellis:

- ``request`` -- :class:`RequestStrategy`, HTTP through httpx
- ``sqlite`` -- :class:`SQLiteStrategy`, SQL through :mod:`trellis.data`

Register more on the app::

    @app.strategy("echo")
    def echo(op, context):
        return op.get("value")
"""

from trellis.strategies.base import (
    NO_RESULT,
    FunctionStrategy,
    Operation,
    Strategy,
    StrategyDispatcher,
    strategy,
)
from trellis.strategies.request import RequestStrategy
from trellis.strategies.sqlite import SQLiteStrategy

__all__ = [
    "NO_RESULT",
    "FunctionStrategy",
    "Operation",
    "RequestStrategy",
    "SQLiteStrategy",
    "Strategy",
    "StrategyDispatcher",
    "strategy",
]
