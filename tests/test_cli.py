"""Tests for the top-level pdfmanager CLI."""

import json

import pytest
from click.testing import CliRunner

from pdfmanager import __version__
from pdfmanager.cli import main


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands(runner):
    result = runner.invoke(main, ["--help"])

    assert result.exit_code == 0
    for command in ("add", "remove", "edit", "list", "search", "show", "fields", "config", "backup", "init"):
        assert command in result.output


def test_init_creates_data_dir(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(main, ["init"])

    assert result.exit_code == 0, result.output
    data_dir = tmp_path / ".pdfmanager"
    assert json.loads((data_dir / "config.json").read_text()) == {"libraryPath": ""}
    for name in ("books.json", "slides.json", "classnotes.json"):
        assert json.loads((data_dir / name).read_text()) == []
    assert (data_dir / "backups").is_dir()


def test_init_existing_is_left_alone(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner.invoke(main, ["init"])
    (tmp_path / ".pdfmanager" / "books.json").write_text('[{"title": "A"}]')

    result = runner.invoke(main, ["init"])

    assert result.exit_code == 0, result.output
    assert "already exists" in result.output
    assert json.loads((tmp_path / ".pdfmanager" / "books.json").read_text()) == [{"title": "A"}]


def test_init_force_after_confirm(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner.invoke(main, ["init"])
    (tmp_path / ".pdfmanager" / "books.json").write_text('[{"title": "A"}]')

    result = runner.invoke(main, ["init", "--force"], input="y\n")

    assert result.exit_code == 0, result.output
    assert json.loads((tmp_path / ".pdfmanager" / "books.json").read_text()) == []


def test_init_dry_run(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(main, ["--dry-run", "init"])

    assert result.exit_code == 0, result.output
    assert not (tmp_path / ".pdfmanager").exists()
