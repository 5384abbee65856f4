"""Tests for the cors-checker."""

import asyncio
from pathlib import Path

from vibecheck.checkers.base import CheckOptions
from vibecheck.checkers.cors import CorsChecker
from vibecheck.findings.models import Severity


def _run_checker(root: Path) -> list:
    return asyncio.run(CorsChecker().check(CheckOptions(directory=root)))


def _write(root: Path, rel: str, text: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def test_no_server_files_passes(tmp_path):
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    assert findings[0].passed
    assert findings[0].id == "cors-config"


def test_wildcard_header(tmp_path):
    _write(tmp_path, "server.js", 'res.setHeader("Access-Control-Allow-Origin", "*");\n')
    findings = _run_checker(tmp_path)
    assert [(f.id, f.severity) for f in findings] == [("cors-wildcard-origin", Severity.MEDIUM)]
    assert findings[0].location.line == 1


def test_reflected_origin_with_credentials(tmp_path):
    _write(
        tmp_path,
        "api/handler.js",
        "export default function handler(req, res) {\n"
        '  res.setHeader("Access-Control-Allow-Origin", req.headers.origin);\n'
        '  res.setHeader("Access-Control-Allow-Credentials", "true");\n'
        "}\n",
    )
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    f = findings[0]
    assert f.id == "cors-credentials-dynamic-origin"
    assert f.severity == Severity.CRITICAL
    assert f.location.line == 3


def test_reflected_origin_without_credentials_passes(tmp_path):
    _write(tmp_path, "api/handler.js", 'res.setHeader("Access-Control-Allow-Origin", req.headers.origin);\n')
    assert _run_checker(tmp_path)[0].passed


def test_express_cors_origin_true_with_credentials(tmp_path):
    _write(tmp_path, "server.ts", "app.use(cors({ origin: true, credentials: true }));\n")
    assert [f.id for f in _run_checker(tmp_path)] == ["cors-credentials-dynamic-origin"]


def test_express_wildcard(tmp_path):
    _write(tmp_path, "app.js", 'app.use(cors({ origin: "*" }));\n')
    findings = _run_checker(tmp_path)
    assert [f.id for f in findings] == ["cors-express-wildcard"]


def test_explicit_origin_passes(tmp_path):
    _write(tmp_path, "app.js", 'app.use(cors({ origin: ["https://example.com"] }));\n')
    findings = _run_checker(tmp_path)
    assert findings[0].passed
    assert "1 server-side files" in findings[0].details


def test_test_paths_skipped(tmp_path):
    _write(tmp_path, "tests/server.js", 'res.setHeader("Access-Control-Allow-Origin", "*");\n')
    assert _run_checker(tmp_path)[0].passed
