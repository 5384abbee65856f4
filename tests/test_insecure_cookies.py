"""Tests for the insecure-cookies-checker."""

import asyncio
from pathlib import Path

from vibecheck.checkers.base import CheckOptions
from vibecheck.checkers.insecure_cookies import InsecureCookiesChecker
from vibecheck.findings.models import Severity


def _run_checker(root: Path) -> list:
    return asyncio.run(InsecureCookiesChecker().check(CheckOptions(directory=root)))


def _write(root: Path, rel: str, text: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def test_no_code_passes(tmp_path):
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    assert findings[0].passed
    assert findings[0].id == "insecure-cookies"


def test_bare_server_cookie(tmp_path):
    _write(tmp_path, "api/login.js", 'const token = sign(user);\nres.cookie("session", token);\n')
    findings = _run_checker(tmp_path)
    by_id = {f.id: f for f in findings}
    assert set(by_id) == {"missing-secure-flag", "missing-httponly-flag", "missing-samesite-attribute"}
    assert by_id["missing-samesite-attribute"].severity == Severity.MEDIUM
    assert by_id["missing-secure-flag"].severity == Severity.HIGH
    assert all(f.location.line == 2 for f in findings)


def test_fully_flagged_server_cookie_passes(tmp_path):
    _write(
        tmp_path,
        "api/login.js",
        'res.cookie("session", token, { secure: true, httpOnly: true, sameSite: "strict" });\n',
    )
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    assert findings[0].passed


def test_client_cookie_does_not_need_httponly(tmp_path):
    _write(tmp_path, "src/theme.js", 'document.cookie = "theme=dark; Secure; SameSite=Lax";\n')
    assert _run_checker(tmp_path)[0].passed


def test_client_cookie_missing_attributes(tmp_path):
    _write(tmp_path, "src/theme.js", 'document.cookie = "theme=dark";\n')
    ids = sorted(f.id for f in _run_checker(tmp_path))
    assert ids == ["missing-samesite-attribute", "missing-secure-flag"]


def test_file_without_cookies_passes(tmp_path):
    _write(tmp_path, "src/util.ts", "export const x = 1;\n")
    findings = _run_checker(tmp_path)
    assert "No cookie usage" in findings[0].details
