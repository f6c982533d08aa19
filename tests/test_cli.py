"""Tests for the trellis CLI."""

import argparse
import json

import pytest

from trellis.cli import main
from trellis.cli._run import build_config


class TestResolveCommand:
    def test_prints_match(self, site, capsys) -> None:
        main(["resolve", "/users/42", "--pages", str(site / "pages")])
        out = capsys.readouterr().out.splitlines()
        assert out[0].endswith("index.html")
        assert "[id]" in out[0]
        assert json.loads(out[1]) == {"id": "42"}

    def test_not_found_exits_1(self, site, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["resolve", "/no/such/page", "--pages", str(site / "pages")])
        assert exc_info.value.code == 1
        assert "No page for /no/such/page" in capsys.readouterr().err


class TestRunCommand:
    def test_build_config(self) -> None:
        args = argparse.Namespace(
            host=None,
            port=9001,
            debug=True,
            pages="site/pages",
            static="site/static",
            database="sqlite:///site.db",
            log_level="debug",
            log_format="text",
        )
        config = build_config(args)
        assert config.host == "127.0.0.1"
        assert config.port == 9001
        assert config.debug is True
        assert config.pages_dir == "site/pages"
        assert config.database_url == "sqlite:///site.db"
        assert config.log_format == "text"

    def test_bad_log_format_rejected_by_argparse(self) -> None:
        with pytest.raises(SystemExit):
            main(["run", "--log-format", "xml"])


class TestHelp:
    def test_no_command_prints_help(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "resolve" in capsys.readouterr().out
