"""Tests for the next-public-env-checker."""

import asyncio
from pathlib import Path

from vibecheck.checkers.base import CheckOptions
from vibecheck.checkers.public_env import PublicEnvChecker, is_sensitive_name
from vibecheck.findings.models import Severity


def _run_checker(root: Path, **kwargs) -> list:
    return asyncio.run(PublicEnvChecker().check(CheckOptions(directory=root, **kwargs)))


def test_no_env_files_passes(tmp_path):
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    assert findings[0].passed
    assert findings[0].id == "next-public-env"


def test_private_variable_passes(tmp_path):
    (tmp_path / ".env").write_text("API_KEY=xyz\n")
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    assert findings[0].passed


def test_public_secret_flagged(tmp_path):
    (tmp_path / ".env.local").write_text("NEXT_PUBLIC_SITE_URL=https://a.dev\nNEXT_PUBLIC_STRIPE_SECRET_KEY=sk_live_x\n")
    findings = _run_checker(tmp_path)
    assert len(findings) == 1
    f = findings[0]
    assert f.id == "next-public-env-exposed"
    assert f.severity == Severity.CRITICAL
    assert f.location.file == ".env.local"
    assert f.location.line == 2
    assert "NEXT_PUBLIC_STRIPE_SECRET_KEY" in f.details


def test_gitignored_env_file_still_scanned(tmp_path):
    (tmp_path / ".gitignore").write_text(".env*\n")
    (tmp_path / ".env").write_text("NEXT_PUBLIC_SUPABASE_SERVICE_ROLE=abc\n")
    assert not _run_checker(tmp_path)[0].passed


def test_comment_lines_ignored(tmp_path):
    (tmp_path / ".env").write_text("# NEXT_PUBLIC_API_KEY=abc\n")
    assert _run_checker(tmp_path)[0].passed


def test_next_config_scanned(tmp_path):
    (tmp_path / "next.config.js").write_text("module.exports = { env: { NEXT_PUBLIC_OPENAI_KEY: process.env.KEY } }\n")
    findings = _run_checker(tmp_path)
    assert findings[0].id == "next-public-env-exposed"


def test_disabled_by_option(tmp_path):
    (tmp_path / ".env").write_text("NEXT_PUBLIC_API_SECRET=abc\n")
    findings = _run_checker(tmp_path, checker_options={"checkPublicEnv": False})
    assert findings[0].passed
    assert "disabled" in findings[0].details


def test_custom_public_prefix(tmp_path):
    (tmp_path / ".env").write_text("VITE_API_SECRET=abc\nNEXT_PUBLIC_API_SECRET=abc\n")
    findings = _run_checker(tmp_path, checker_options={"publicPrefixes": ["VITE_"]})
    assert [f.location.line for f in findings] == [1]


def test_additional_env_files(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "vars.txt").write_text("NEXT_PUBLIC_DB_PASSWORD=hunter2\n")
    findings = _run_checker(tmp_path, checker_options={"additionalEnvFiles": ["config/vars.txt"]})
    assert not findings[0].passed


def test_ignore_patterns(tmp_path):
    (tmp_path / ".env").write_text("NEXT_PUBLIC_API_SECRET=abc\n")
    assert _run_checker(tmp_path, ignore_patterns=[".env"])[0].passed


def test_is_sensitive_name():
    assert is_sensitive_name("NEXT_PUBLIC_GITHUB_TOKEN")
    assert is_sensitive_name("NEXT_PUBLIC_OPENAI_MODEL")
    assert not is_sensitive_name("NEXT_PUBLIC_ANALYTICS_ID")
