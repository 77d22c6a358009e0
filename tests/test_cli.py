"""
Tests for the command line front end.
"""

import os

import pytest

import kafi_cli
from kafi.engine.store import Store


@pytest.fixture
def cli_db(db_path, monkeypatch):
    """Point the CLI at a temporary database."""
    monkeypatch.setenv("KAFI_DB", db_path)
    return db_path


class TestCLI:
    """Tests for kafi_cli.main."""

    def test_set_then_get(self, cli_db, capsys):
        """A stored value is printed back."""
        assert kafi_cli.main(["satu", "111"]) == 0
        assert capsys.readouterr().out == ""

        assert kafi_cli.main(["satu"]) == 0
        assert capsys.readouterr().out == "111\n"

    def test_get_missing_is_silent(self, cli_db, capsys):
        """An absent key prints nothing."""
        assert kafi_cli.main(["lima"]) == 0
        assert capsys.readouterr().out == ""
        assert not os.path.exists(cli_db)

    def test_set_persists_to_store(self, cli_db):
        """Values written by the CLI are visible through the library."""
        kafi_cli.main(["lima", "555"])

        with Store.open(cli_db) as store:
            assert store.get("lima") == "555"

    @pytest.mark.parametrize("argv", [[], ["a", "b", "c"]])
    def test_usage(self, cli_db, capsys, argv):
        """Wrong argument counts print usage to stdout."""
        assert kafi_cli.main(argv) == 2
        out = capsys.readouterr().out
        assert "USAGE" in out
        assert "kafi [KEY] [VALUE]" in out

    def test_corrupt_database(self, cli_db, capsys):
        """Store errors are reported on stderr with exit code 1."""
        with open(cli_db, "wb") as f:
            f.write(b"\x00\x00")

        assert kafi_cli.main(["satu"]) == 1
        assert "kafi:" in capsys.readouterr().err

    def test_default_path(self, temp_dir, monkeypatch):
        """Without KAFI_DB the store lives in kafi.db in the working directory."""
        monkeypatch.delenv("KAFI_DB", raising=False)
        monkeypatch.chdir(temp_dir)

        kafi_cli.main(["satu", "111"])
        assert os.path.exists(os.path.join(temp_dir, kafi_cli.DEFAULT_DB_PATH))
