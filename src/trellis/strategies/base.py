"""Strategy capability interface and the type-keyed dispatcher.

A *strategy* implements one operation type.  It is any object with an
``execute(op, context)`` method (sync or async).  Plain functions are
adapted with :func:`strategy`::

    @strategy
    async def echo(op: Operation, context: RequestContext) -> dict:
        return {"value": op.get("value")}

    dispatcher = StrategyDispatcher({"echo": echo}, log=LoggerSink())

The dispatcher owns no state beyond the registry it is given.  New
backends are added by registering another entry; dispatch itself never
changes.  Failures never escape :meth:`StrategyDispatcher.execute`: an
unknown type or a raising strategy logs and yields :data:`NO_RESULT`.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final, Protocol, runtime_checkable

from trellis.log import LogSink
from trellis.pages.types import RequestContext


class _NoResult:
    """Sentinel type for "this operation contributes nothing"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_RESULT"

    def __bool__(self) -> bool:
        return False


NO_RESULT: Final = _NoResult()


@dataclass(frozen=True, slots=True)
class Operation:
    """One declared unit of work from a document's reserved key.

    Attributes:
        type: Registry key of the strategy that runs it.
        key: Name the result is merged under; ``None`` discards it.
        fields: Every declared field, ``type`` and ``key`` included.
    """

    type: str
    key: str | None = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Operation:
        """Build an operation from a parsed document entry.

        A missing ``type`` becomes the empty string, which no registry
        holds, so the entry is reported as an unknown type.  A falsy
        ``key`` (absent, empty, null) means the result is not merged.
        """
        op_type = raw.get("type")
        key = raw.get("key")
        return cls(
            type="" if op_type is None else str(op_type),
            key=str(key) if key else None,
            fields=MappingProxyType(dict(raw)),
        )

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)


@runtime_checkable
class Strategy(Protocol):
    """Capability interface for operation backends."""

    def execute(self, op: Operation, context: RequestContext) -> Any: ...


class FunctionStrategy:
    """Adapt a plain (sync or async) function to the :class:`Strategy` interface."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[[Operation, RequestContext], Any]) -> None:
        self.func = func

    def execute(self, op: Operation, context: RequestContext) -> Any:
        return self.func(op, context)

    def __repr__(self) -> str:
        return f"FunctionStrategy({getattr(self.func, '__name__', self.func)!r})"


def strategy(
    func: Callable[[Operation, RequestContext], Any | Awaitable[Any]],
) -> FunctionStrategy:
    """Decorator form of :class:`FunctionStrategy`."""
    return FunctionStrategy(func)


def as_strategy(value: Strategy | Callable[..., Any]) -> Strategy:
    """Accept either a strategy object or a bare callable."""
    if isinstance(value, Strategy):
        return value
    if callable(value):
        return FunctionStrategy(value)
    msg = f"Not a strategy: {value!r}"
    raise TypeError(msg)


class StrategyDispatcher(Mapping[str, Strategy]):
    """Look up and invoke strategies by operation type.

    The registry is copied at construction; later changes to the mapping
    passed in do not affect the dispatcher.
    """

    __slots__ = ("_log", "_registry")

    def __init__(
        self,
        registry: Mapping[str, Strategy | Callable[..., Any]],
        *,
        log: LogSink,
    ) -> None:
        self._registry: dict[str, Strategy] = {
            name: as_strategy(handler) for name, handler in registry.items()
        }
        self._log = log

    def __getitem__(self, name: str) -> Strategy:
        return self._registry[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry)

    def __len__(self) -> int:
        return len(self._registry)

    async def execute(self, op: Operation, context: RequestContext) -> Any:
        """Run *op* through its strategy.

        Returns the strategy's result, or :data:`NO_RESULT` when the type
        is unknown, the strategy raised, or it returned ``None``.
        """
        handler = self._registry.get(op.type)
        if handler is None:
            self._log("warn", f"Unknown strategy: {op.type}", {"type": op.type})
            return NO_RESULT

        try:
            result = handler.execute(op, context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            self._log(
                "error",
                f"Strategy execution failed: {exc}",
                {"type": op.type, "error": str(exc)},
            )
            return NO_RESULT

        if result is None:
            return NO_RESULT
        return result
