"""Data layer error hierarchy."""

from trellis.errors import TrellisError


class DataError(TrellisError):
    """Base for all trellis.data errors."""


class DriverNotInstalledError(DataError):
    """Raised when a database URL names a driver trellis does not ship."""


class QueryError(DataError):
    """Raised when a SQL statement fails."""
