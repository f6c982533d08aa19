"""Test utilities for trellis applications.

    from trellis.testing import RecordingSink, TestClient
"""

from trellis.testing.client import TestClient
from trellis.testing.sink import LogEntry, RecordingSink

__all__ = [
    "LogEntry",
    "RecordingSink",
    "TestClient",
]
