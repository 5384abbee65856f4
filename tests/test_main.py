"""Tests for the Typer CLI."""

import json
import sys

import pytest
from typer.testing import CliRunner

from vibecheck.config import get_default_checkers
from vibecheck.main import app, main

runner = CliRunner()


def _leaky_tree(root):
    (root / "src").mkdir()
    (root / "src" / "session.js").write_text('localStorage.setItem("token", t);\n')


def test_scan_clean_tree_exits_zero(tmp_path):
    result = runner.invoke(app, ["scan", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "All checks passed!" in result.output
    assert "Report saved" not in result.output


def test_scan_with_findings_still_exits_zero(tmp_path):
    _leaky_tree(tmp_path)
    result = runner.invoke(app, ["scan", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "JWT Token in Browser Storage" in result.output


def test_scan_writes_json_report(tmp_path):
    _leaky_tree(tmp_path)
    out = tmp_path / "out" / "report.json"
    result = runner.invoke(app, ["scan", str(tmp_path), "--format", "json", "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert "Report saved to" in result.output
    report = json.loads(out.read_text())
    assert report["summary"]["total"] == len(report["results"])
    assert "jwt-local-storage" in [r["id"] for r in report["results"]]


def test_scan_infers_format_from_output(tmp_path):
    out = tmp_path / "report.html"
    result = runner.invoke(app, ["scan", str(tmp_path), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text().startswith("<!DOCTYPE html>")


def test_scan_skip_and_ignore(tmp_path):
    _leaky_tree(tmp_path)
    out = tmp_path / "report.json"
    result = runner.invoke(
        app,
        ["scan", str(tmp_path), "-s", "jwt-storage-checker", "-i", "nothing/**", "-f", "json", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    ids = [r["id"] for r in json.loads(out.read_text())["results"]]
    assert "jwt-storage" not in ids
    assert len(ids) == len(get_default_checkers()) - 1


def test_scan_uses_report_options_from_config(tmp_path):
    out = tmp_path / "from-config.txt"
    (tmp_path / "vibecheck.config.json").write_text(
        json.dumps({"reportOptions": {"format": "text", "outputFile": str(out), "showPassed": False}})
    )
    result = runner.invoke(app, ["scan", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "PASSED CHECKS" not in out.read_text()


def test_scan_missing_directory_exits_one(tmp_path):
    result = runner.invoke(app, ["scan", str(tmp_path / "missing")])
    assert result.exit_code == 1


def test_scan_unknown_format_exits_one(tmp_path):
    result = runner.invoke(app, ["scan", str(tmp_path), "-f", "pdf"])
    assert result.exit_code == 1


def test_scan_bad_explicit_config_exits_one(tmp_path):
    config = tmp_path / "broken.json"
    config.write_text("{")
    result = runner.invoke(app, ["scan", str(tmp_path), "--config", str(config)])
    assert result.exit_code == 1


def test_list_shows_every_checker():
    result = runner.invoke(app, ["list"], env={"COLUMNS": "200"})
    assert result.exit_code == 0
    for checker in get_default_checkers():
        assert checker.id in result.output


def test_init_writes_config_once(tmp_path):
    target = tmp_path / "vibecheck.config.json"
    result = runner.invoke(app, ["init", "--type", "strict", "--file", str(target)])
    assert result.exit_code == 0, result.output
    data = json.loads(target.read_text())
    assert data["extends"] == "vibecheck:strict"
    assert "**/__tests__/**" in data["ignorePatterns"]

    again = runner.invoke(app, ["init", "--file", str(target)])
    assert again.exit_code == 1
    assert json.loads(target.read_text()) == data


def test_init_short_file_flag(tmp_path):
    target = tmp_path / "custom.json"
    result = runner.invoke(app, ["init", "-t", "next", "-f", str(target)])
    assert result.exit_code == 0, result.output
    assert json.loads(target.read_text())["extends"] == "vibecheck:next"


def test_init_unknown_type(tmp_path):
    result = runner.invoke(app, ["init", "-t", "enterprise", "--file", str(tmp_path / "c.json")])
    assert result.exit_code == 1
    assert not (tmp_path / "c.json").exists()


@pytest.mark.parametrize("argv", [["DIR"], ["scan", "DIR"], ["list"]])
def test_main_routes_to_commands(tmp_path, monkeypatch, argv):
    args = [str(tmp_path) if a == "DIR" else a for a in argv]
    monkeypatch.setattr(sys, "argv", ["vibecheck", *args])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 0
