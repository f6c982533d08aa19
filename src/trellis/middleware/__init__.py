"""Built-in middleware for trellis applications."""

from trellis.middleware.protocol import Middleware, Next
from trellis.middleware.static import StaticFiles

__all__ = [
    "Middleware",
    "Next",
    "StaticFiles",
]
