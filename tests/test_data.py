"""Tests for trellis.data — async SQLite access."""

import pytest

from trellis.data import Database, DataError, DriverNotInstalledError, QueryError

# -- Fixtures --


@pytest.fixture
async def db(tmp_path):
    """Create a fresh SQLite database with a users table."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    await db.connect()
    await db.execute_script(
        "CREATE TABLE users ("
        "  id INTEGER PRIMARY KEY AUTOINCREMENT,"
        "  name TEXT NOT NULL,"
        "  avatar BLOB"
        ");"
        "INSERT INTO users (name) VALUES ('Alice');"
        "INSERT INTO users (name) VALUES ('Bob');"
    )
    yield db
    await db.disconnect()


# =============================================================================
# URL parsing
# =============================================================================


class TestURL:
    def test_sqlite_url(self) -> None:
        assert Database("sqlite:///app.db").url == "sqlite:///app.db"

    def test_memory_url(self) -> None:
        Database("sqlite:///:memory:")

    def test_postgres_needs_driver(self) -> None:
        with pytest.raises(DriverNotInstalledError):
            Database("postgresql://user@localhost/db")

    @pytest.mark.parametrize("url", ["app.db", "sqlite://", "http://x"])
    def test_invalid_url(self, url: str) -> None:
        with pytest.raises(DataError):
            Database(url)


# =============================================================================
# Queries
# =============================================================================


class TestQueries:
    async def test_fetch_all(self, db) -> None:
        rows = await db.fetch_all("SELECT id, name FROM users ORDER BY id")
        assert rows == [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]

    async def test_fetch_one(self, db) -> None:
        assert await db.fetch_one("SELECT name FROM users WHERE id = ?", 2) == {"name": "Bob"}

    async def test_fetch_one_missing(self, db) -> None:
        assert await db.fetch_one("SELECT * FROM users WHERE id = ?", 99) is None

    async def test_fetch_val(self, db) -> None:
        assert await db.fetch_val("SELECT COUNT(*) FROM users") == 2

    async def test_execute_returns_rowcount(self, db) -> None:
        assert await db.execute("UPDATE users SET name = ? WHERE id > ?", "X", 0) == 2

    async def test_fetch_all_on_statement_without_rows(self, db) -> None:
        assert await db.fetch_all("INSERT INTO users (name) VALUES (?)", "Carol") == []
        assert await db.fetch_val("SELECT COUNT(*) FROM users") == 3

    async def test_query_error(self, db) -> None:
        with pytest.raises(QueryError):
            await db.fetch_all("SELECT * FROM nope")


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    async def test_lazy_connect(self, tmp_path) -> None:
        db = Database(f"sqlite:///{tmp_path / 'lazy.db'}")
        assert not db.connected
        assert await db.fetch_val("SELECT 1") == 1
        assert db.connected
        await db.disconnect()
        assert not db.connected

    async def test_disconnect_twice(self, tmp_path) -> None:
        db = Database(f"sqlite:///{tmp_path / 'x.db'}")
        await db.connect()
        await db.disconnect()
        await db.disconnect()

    async def test_context_manager(self, tmp_path) -> None:
        async with Database(f"sqlite:///{tmp_path / 'cm.db'}") as db:
            assert db.connected
        assert not db.connected
