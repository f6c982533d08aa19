"""Trellis application class.

Mutable during setup (strategy registration, middleware).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import threading
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from trellis._internal.asgi import Receive, Scope, Send
from trellis.config import AppConfig
from trellis.data.database import Database
from trellis.errors import ConfigurationError
from trellis.log import LoggerSink, LogSink
from trellis.middleware.protocol import Middleware
from trellis.middleware.static import StaticFiles
from trellis.orchestrator import RequestOrchestrator
from trellis.pages.loader import PageLoader
from trellis.pages.renderer import PageRenderer, create_environment
from trellis.pages.resolver import PathResolver
from trellis.pipeline.runner import ConfigPipeline
from trellis.server.handler import handle_request
from trellis.strategies.base import Strategy, StrategyDispatcher, as_strategy
from trellis.strategies.request import RequestStrategy
from trellis.strategies.sqlite import SQLiteStrategy


class App:
    """The trellis application.

    Pages are directories under ``config.pages_dir``; there is nothing to
    register for them.  Setup only adds operation strategies and
    middleware::

        app = App(AppConfig(pages_dir="pages", database_url="sqlite:///app.db"))

        @app.strategy("echo")
        def echo(op, context):
            return op.get("value")

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the app.
    """

    __slots__ = (
        "_db",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_log",
        "_middleware",
        "_middleware_list",
        "_orchestrator",
        "_strategies",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        db: Database | str | None = None,
        strategies: Mapping[str, Strategy | Callable[..., Any]] | None = None,
        log: LogSink | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._strategies: dict[str, Strategy] = {
            name: as_strategy(handler) for name, handler in (strategies or {}).items()
        }
        self._middleware_list: list[Middleware] = []
        self._log: LogSink = log or LoggerSink()
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Database: an explicit instance or URL wins over config.database_url.
        # The app owns it: connected at lifespan startup, closed at shutdown.
        url = db if isinstance(db, str) else self.config.database_url
        self._db: Database | None = db if isinstance(db, Database) else None
        if self._db is None and url is not None:
            self._db = Database(url)

        # Compiled state, set during _freeze()
        self._dispatcher: StrategyDispatcher | None = None
        self._orchestrator: RequestOrchestrator | None = None
        self._middleware: tuple[Callable[..., Any], ...] = ()

    # -- Registration --

    def strategy(self, name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register an operation strategy via decorator.

        The decorated callable receives ``(op, context)`` and may be sync
        or async.  Registering a built-in name (``request``, ``sqlite``)
        replaces the built-in.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add_strategy(name, func)
            return func

        return decorator

    def add_strategy(self, name: str, handler: Strategy | Callable[..., Any]) -> None:
        """Register a strategy object or callable under *name*."""
        self._check_not_frozen()
        self._strategies[name] = as_strategy(handler)

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline, after static file serving."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Accessors --

    @property
    def db(self) -> Database | None:
        return self._db

    @property
    def dispatcher(self) -> StrategyDispatcher:
        self._ensure_frozen()
        assert self._dispatcher is not None
        return self._dispatcher

    @property
    def orchestrator(self) -> RequestOrchestrator:
        self._ensure_frozen()
        assert self._orchestrator is not None
        return self._orchestrator

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start a pounce server.

        Compiles the app first so configuration errors surface before
        the server binds.
        """
        self._ensure_frozen()

        from trellis.server.dev import run_dev_server

        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    async def close(self) -> None:
        """Release app-owned resources. Safe to call more than once."""
        if self._db is not None:
            await self._db.disconnect()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._orchestrator is not None

        await handle_request(
            scope,
            receive,
            send,
            orchestrator=self._orchestrator,
            middleware=self._middleware,
            log=self._log,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request),
        connects the database, and closes it on shutdown.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    if self._db is not None:
                        await self._db.connect()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                await self.close()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started serving requests."
            raise RuntimeError(msg)

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        config = self.config
        config.validate()

        pages_dir = Path(config.pages_dir)
        if not pages_dir.is_dir():
            msg = f"Pages directory does not exist: {pages_dir}"
            raise ConfigurationError(msg)

        # 1. Strategy registry: built-ins first, user registrations override
        registry: dict[str, Strategy] = {"request": RequestStrategy()}
        if self._db is not None:
            registry["sqlite"] = SQLiteStrategy(self._db)
        registry.update(self._strategies)
        self._dispatcher = StrategyDispatcher(registry, log=self._log)

        # 2. Page pipeline
        resolver = PathResolver(
            pages_dir,
            content_file=config.content_file,
            cache=config.cache_pages,
        )
        loader = PageLoader(
            resolver,
            read_config_file=config.read_config_file,
            write_config_file=config.write_config_file,
            log=self._log,
        )
        renderer = PageRenderer(create_environment(config), layout=config.layout)
        pipeline = ConfigPipeline(self._dispatcher, log=self._log)
        self._orchestrator = RequestOrchestrator(loader, pipeline, renderer, log=self._log)

        # 3. Middleware: static files are served ahead of everything else
        middleware: list[Callable[..., Any]] = []
        if config.static_dir is not None:
            middleware.append(StaticFiles(config.static_dir, prefix=config.static_url))
        middleware.extend(self._middleware_list)
        self._middleware = tuple(middleware)

        self._frozen = True
