"""Tests for crudkit.cli — CLI command smoke tests via CliRunner."""

from __future__ import annotations

import json
from unittest.mock import patch

from typer.testing import CliRunner

from crudkit import __version__
from crudkit.cli.app import app

runner = CliRunner()


class TestRootCLI:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_groups(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "db" in result.output
        assert "serve" in result.output


class TestDbCLI:
    def test_init_creates_tables(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'book.db'}"
        result = runner.invoke(app, ["db", "init", "--database", url])
        assert result.exit_code == 0, result.output
        assert "contacts" in result.output
        assert (tmp_path / "book.db").exists()

    def test_tables_json(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'book.db'}"
        runner.invoke(app, ["db", "init", "--database", url])
        result = runner.invoke(app, ["db", "tables", "--database", url, "--json"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        assert rows == [{"table": "contacts", "rows": 0}, {"table": "tags", "rows": 0}]

    def test_tables_without_schema_fails(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'empty.db'}"
        result = runner.invoke(app, ["db", "tables", "--database", url])
        assert result.exit_code == 1


class TestServeCLI:
    @patch("crudkit.cli.serve.configure_logging")
    @patch("crudkit.cli.serve.uvicorn.run")
    def test_start_runs_factory(self, mock_run, mock_logging):
        result = runner.invoke(app, ["serve", "start", "--host", "127.0.0.1", "--port", "9999"])
        assert result.exit_code == 0, result.output
        args, kwargs = mock_run.call_args
        assert args == ("crudkit.addressbook:create_addressbook_app",)
        assert kwargs["factory"] is True
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9999
        mock_logging.assert_called_once()
