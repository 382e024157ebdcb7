"""Tests for the typer CLI."""

import json

from typer.testing import CliRunner

from iconrequest import __version__
from iconrequest.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_submit_without_token_fails(tmp_path, monkeypatch):
    monkeypatch.delenv("ICONREQUEST_STATISTICS_TOKEN", raising=False)
    monkeypatch.delenv("ICONREQUEST_STATISTICS_ENDPOINT", raising=False)
    batch = tmp_path / "batch.json"
    batch.write_text(json.dumps([{"packageName": "com.a", "name": "A", "activity": "com.a.Main"}]))

    result = runner.invoke(
        app,
        [
            "submit",
            str(batch),
            "--config",
            str(tmp_path / "upload.yaml"),
            "--resources",
            str(tmp_path / "resources.yaml"),
            "--env-file",
            str(tmp_path / "missing.env"),
        ],
    )

    assert result.exit_code == 1
    assert "Statistics service token not configured" in result.output
