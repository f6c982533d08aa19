"""Development server.

Starts a pounce ASGI server with the live trellis App object.
"""


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    workers: int = 1,
) -> None:
    """Start a pounce server with the given trellis App.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but trellis has a live ``App`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (trellis App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        workers: Worker count.

    Raises:
        ConfigurationError: If pounce is not installed.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError:
        from trellis.errors import ConfigurationError

        msg = "trellis run requires the 'pounce' server. Install it with: pip install trellis[server]"
        raise ConfigurationError(msg) from None

    config = ServerConfig(
        host=host,
        port=port,
        workers=workers,
        reload=reload,
    )
    server = Server(config, app)
    server.run()
