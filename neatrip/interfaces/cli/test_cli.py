"""Tests for the command-line interface."""

import json
from pathlib import Path

from typer.testing import CliRunner

from .main import app

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "NeaTrip v" in result.stdout


def test_discover_lists_places() -> None:
    result = runner.invoke(app, ["discover", "38.72", "-9.14", "--radius", "500", "-n", "3"])
    assert result.exit_code == 0
    assert "8 places within 500 m" in result.stdout


def test_discover_rejects_bad_category() -> None:
    result = runner.invoke(app, ["discover", "38.72", "-9.14", "--category", "volcano"])
    assert result.exit_code == 1


def test_buddies_search() -> None:
    result = runner.invoke(app, ["buddies", "--query", "barcelona"])
    assert result.exit_code == 0
    assert "Marco Rodriguez" in result.stdout


def test_init_seed_backup_restore(tmp_path: Path) -> None:
    db = tmp_path / "cli.db"

    assert runner.invoke(app, ["init", "--db", str(db)]).exit_code == 0
    seeded = runner.invoke(app, ["seed", "--db", str(db)])
    assert seeded.exit_code == 0, seeded.stdout

    backup_file = tmp_path / "backup.json"
    assert runner.invoke(app, ["backup", str(backup_file), "--db", str(db)]).exit_code == 0
    snapshot = json.loads(backup_file.read_text())
    assert len(snapshot["users"]) == 3
    assert len(snapshot["posts"]) == 2

    other_db = tmp_path / "restored.db"
    restored = runner.invoke(app, ["restore", str(backup_file), "--db", str(other_db)])
    assert restored.exit_code == 0


def test_seed_twice_adds_nothing(tmp_path: Path) -> None:
    db = tmp_path / "cli.db"
    assert runner.invoke(app, ["seed", "--db", str(db)]).exit_code == 0

    again = runner.invoke(app, ["seed", "--db", str(db)])
    assert again.exit_code == 0
    assert "already present" in again.stdout

    backup_file = tmp_path / "backup.json"
    assert runner.invoke(app, ["backup", str(backup_file), "--db", str(db)]).exit_code == 0
    snapshot = json.loads(backup_file.read_text())
    assert len(snapshot["users"]) == 3
    assert len(snapshot["places"]) == 2
    assert len(snapshot["posts"]) == 2
    assert len(snapshot["comments"]) == 1


def test_restore_rejects_bad_backup(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("not json")
    result = runner.invoke(app, ["restore", str(bad), "--db", str(tmp_path / "x.db")])
    assert result.exit_code == 1
