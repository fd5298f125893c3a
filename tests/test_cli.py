"""CLI tests — click commands driven through CliRunner."""

import sqlite3

from click.testing import CliRunner

from linkbio.cli.main import main
from linkbio.config import get_settings


def _env(tmp_path, **extra):
    env = {
        "LINKBIO_JWT_SECRET": "cli-secret",
        "LINKBIO_DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}",
    }
    env.update(extra)
    return env


def test_init_db_creates_tables(tmp_path, monkeypatch):
    for key, value in _env(tmp_path).items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()

    result = CliRunner().invoke(main, ["init-db"])
    get_settings.cache_clear()

    assert result.exit_code == 0, result.output
    assert "Database schema created" in result.output
    with sqlite3.connect(tmp_path / "cli.db") as conn:
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
    assert {"users", "links"} <= tables


def test_init_db_without_secret_exits(tmp_path, monkeypatch):
    monkeypatch.delenv("LINKBIO_JWT_SECRET", raising=False)
    monkeypatch.chdir(tmp_path)  # keep any developer .env out of the way
    get_settings.cache_clear()

    result = CliRunner().invoke(main, ["init-db"])
    get_settings.cache_clear()

    assert result.exit_code == 1


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "linkbio" in result.output
